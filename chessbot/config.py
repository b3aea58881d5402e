"""
Search settings: the few knobs a caller may turn, validated on the way in.

Defaults come from :mod:`chessbot.constants`. They can be overridden from
an optional TOML file::

    [search]
    depth_schedule = [2, 4, 5]
    node_budget = 499000
    log_level = "INFO"

and then from the environment:

    CHESSBOT_DEPTHS       comma separated depth schedule, e.g. "2,4"
    CHESSBOT_NODE_BUDGET  integer node budget
    CHESSBOT_LOG_LEVEL    logging level name

Invalid values raise :class:`pydantic.ValidationError`; nothing is
silently replaced by a default.
"""

import logging
import os
import tomllib
from pathlib import Path

from pydantic import BaseModel, ConfigDict, field_validator

from chessbot.constants import DEPTH_SCHEDULE, NODE_BUDGET

_ENV_DEPTHS = "CHESSBOT_DEPTHS"
_ENV_NODE_BUDGET = "CHESSBOT_NODE_BUDGET"
_ENV_LOG_LEVEL = "CHESSBOT_LOG_LEVEL"


class SearchSettings(BaseModel):
    """
    Validated search configuration.

    Fields:
        depth_schedule: Depth limits visited by iterative deepening, strictly
                        increasing and all at least 1.
        node_budget:    Maximum number of tree nodes one decision may create
                        before the running iteration is abandoned.
        log_level:      Level name used by tools that configure logging.
    """

    model_config = ConfigDict(frozen=True)

    depth_schedule: tuple[int, ...] = DEPTH_SCHEDULE
    node_budget: int = NODE_BUDGET
    log_level: str = "INFO"

    @field_validator("depth_schedule")
    @classmethod
    def check_depth_schedule(cls, v: tuple[int, ...]) -> tuple[int, ...]:
        """Require a non-empty, strictly increasing schedule of positive depths."""
        if not v:
            raise ValueError("depth_schedule must not be empty")
        if v[0] < 1:
            raise ValueError("depth limits must be at least 1")
        if any(later <= earlier for earlier, later in zip(v, v[1:])):
            raise ValueError("depth_schedule must be strictly increasing")
        return v

    @field_validator("node_budget")
    @classmethod
    def check_node_budget(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("node_budget must be positive")
        return v

    @field_validator("log_level")
    @classmethod
    def check_log_level(cls, v: str) -> str:
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level: {v!r}")
        return level


def load_settings(path: str | Path | None = None) -> SearchSettings:
    """
    Build :class:`SearchSettings` from a TOML file and the environment.

    Args:
        path: TOML file to read. A missing file is not an error; the
              defaults (plus environment overrides) are used instead.

    Returns:
        The validated settings.
    """
    raw: dict[str, object] = {}
    if path is not None and Path(path).exists():
        with open(path, "rb") as f:
            raw.update(tomllib.load(f).get("search", {}))

    depths = os.environ.get(_ENV_DEPTHS)
    if depths:
        raw["depth_schedule"] = [part.strip() for part in depths.split(",") if part.strip()]
    budget = os.environ.get(_ENV_NODE_BUDGET)
    if budget:
        raw["node_budget"] = budget
    level = os.environ.get(_ENV_LOG_LEVEL)
    if level:
        raw["log_level"] = level

    return SearchSettings.model_validate(raw)
