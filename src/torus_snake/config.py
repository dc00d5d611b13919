"""Runtime configuration for the session loop."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path

from torus_snake.constants import TICK_INTERVAL

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RuntimeConfig:
    """Knobs for how sessions are driven.

    Game rules are fixed constants; only pacing and buffering are
    configurable. Supports JSON serialization.
    """

    tick_interval: float = TICK_INTERVAL
    input_queue_size: int = 256

    def __post_init__(self) -> None:
        if self.tick_interval < 0:
            raise ValueError("tick_interval must be >= 0.")
        if self.input_queue_size < 1:
            raise ValueError("input_queue_size must be at least 1.")

    def to_dict(self) -> dict:
        return asdict(self)

    def save(self, path: str | Path) -> None:
        """Write config to a JSON file."""
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(json.dumps(self.to_dict(), indent=2))
        logger.info("Config saved to %s", p)

    @classmethod
    def load(cls, path: str | Path) -> RuntimeConfig:
        """Load config from a JSON file."""
        raw = json.loads(Path(path).read_text())
        return cls(**raw)
