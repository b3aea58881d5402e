import pytest
from pydantic import ValidationError

from chessbot.config import SearchSettings, load_settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("CHESSBOT_DEPTHS", "CHESSBOT_NODE_BUDGET", "CHESSBOT_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


class TestSearchSettings:
    def test_defaults(self):
        settings = SearchSettings()

        assert settings.depth_schedule == (2, 4, 5)
        assert settings.node_budget == 499_000
        assert settings.log_level == "INFO"

    @pytest.mark.parametrize("schedule", [(), (0, 2), (2, 2), (4, 2)])
    def test_bad_depth_schedule(self, schedule):
        with pytest.raises(ValidationError):
            SearchSettings(depth_schedule=schedule)

    @pytest.mark.parametrize("budget", [0, -5])
    def test_bad_node_budget(self, budget):
        with pytest.raises(ValidationError):
            SearchSettings(node_budget=budget)

    def test_log_level_is_normalised(self):
        assert SearchSettings(log_level="debug").log_level == "DEBUG"

    def test_unknown_log_level(self):
        with pytest.raises(ValidationError):
            SearchSettings(log_level="chatty")

    def test_settings_are_frozen(self):
        settings = SearchSettings()

        with pytest.raises(ValidationError):
            settings.node_budget = 10


class TestLoadSettings:
    def test_missing_file_gives_defaults(self, tmp_path):
        assert load_settings(tmp_path / "absent.toml") == SearchSettings()

    def test_no_path_gives_defaults(self):
        assert load_settings() == SearchSettings()

    def test_reads_search_table(self, tmp_path):
        path = tmp_path / "chessbot.toml"
        path.write_text(
            '[search]\ndepth_schedule = [1, 3]\nnode_budget = 1000\nlog_level = "warning"\n'
        )

        settings = load_settings(path)

        assert settings.depth_schedule == (1, 3)
        assert settings.node_budget == 1000
        assert settings.log_level == "WARNING"

    def test_environment_overrides_file(self, tmp_path, monkeypatch):
        path = tmp_path / "chessbot.toml"
        path.write_text("[search]\nnode_budget = 1000\n")
        monkeypatch.setenv("CHESSBOT_DEPTHS", "2, 3")
        monkeypatch.setenv("CHESSBOT_NODE_BUDGET", "50")
        monkeypatch.setenv("CHESSBOT_LOG_LEVEL", "debug")

        settings = load_settings(path)

        assert settings.depth_schedule == (2, 3)
        assert settings.node_budget == 50
        assert settings.log_level == "DEBUG"

    def test_invalid_environment_value(self, monkeypatch):
        monkeypatch.setenv("CHESSBOT_DEPTHS", "3,1")

        with pytest.raises(ValidationError):
            load_settings()
