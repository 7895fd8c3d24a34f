"""
Configuration
=============
Every tunable the visualizer has, in one dataclass.

    settings = Settings.from_env()
    app = create_app(settings)

Environment variables (all optional):
    GRAPHVIZ_HISTORY_CAPACITY   undo depth                    (50)
    GRAPHVIZ_INTERVAL_MS        default auto-play interval    (700)
    GRAPHVIZ_MIN_INTERVAL_MS    fastest allowed interval      (50)
    GRAPHVIZ_HEURISTIC_SCALE    A* euclidean divisor          (50.0)
    GRAPHVIZ_MAX_RANDOM_NODES   random-graph node cap         (20)
    GRAPHVIZ_WEIGHT_MIN / _MAX  random edge weight range      (1 / 20)
    GRAPHVIZ_SECRET_KEY         Flask session signing key     (random per process)
    GRAPHVIZ_LOG_LEVEL          DEBUG / INFO / WARNING …      (INFO)
    GRAPHVIZ_LOG_FILE           optional log file path
"""

import logging
import os
import secrets
from dataclasses import dataclass, field
from typing import Mapping, Optional, Tuple

from engine.player import SPEED_PRESETS

ENV_PREFIX = "GRAPHVIZ_"


@dataclass
class Settings:
    history_capacity:    int             = 50
    default_interval_ms: int             = SPEED_PRESETS["medium"]
    min_interval_ms:     int             = 50
    heuristic_scale:     float           = 50.0
    max_random_nodes:    int             = 20
    random_weight_range: Tuple[int, int] = (1, 20)
    secret_key:          str             = field(default_factory=lambda: secrets.token_hex(32))
    log_level:           str             = "INFO"
    log_file:            Optional[str]   = None
    testing:             bool            = False

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ

        def get(name: str, cast, default):
            raw = env.get(ENV_PREFIX + name)
            if raw is None or raw == "":
                return default
            try:
                return cast(raw)
            except ValueError:
                raise ValueError(f"{ENV_PREFIX}{name}: cannot parse {raw!r}") from None

        base = cls()
        return cls(
            history_capacity=get("HISTORY_CAPACITY", int, base.history_capacity),
            default_interval_ms=get("INTERVAL_MS", int, base.default_interval_ms),
            min_interval_ms=get("MIN_INTERVAL_MS", int, base.min_interval_ms),
            heuristic_scale=get("HEURISTIC_SCALE", float, base.heuristic_scale),
            max_random_nodes=get("MAX_RANDOM_NODES", int, base.max_random_nodes),
            random_weight_range=(
                get("WEIGHT_MIN", int, base.random_weight_range[0]),
                get("WEIGHT_MAX", int, base.random_weight_range[1]),
            ),
            secret_key=get("SECRET_KEY", str, base.secret_key),
            log_level=get("LOG_LEVEL", str, base.log_level).upper(),
            log_file=get("LOG_FILE", str, None),
        )

    @property
    def log_level_value(self) -> int:
        level = logging.getLevelName(self.log_level)
        return level if isinstance(level, int) else logging.INFO
