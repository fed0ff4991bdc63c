"""Settings for the demo servers and the default router context.

Values come from the process environment, after loading a ``.env`` file if
one is present:

- ``PYROUTER_MODE``: ``history`` (default) or ``hash``
- ``PYROUTER_BASE``: base path for history mode
- ``PYROUTER_ORIGIN``: origin used for the initial URL
- ``PYROUTER_HOST`` / ``PYROUTER_PORT``: bind address for ``run_web``
- ``PYROUTER_LOG_LEVEL``: ``logging`` level name
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

import dotenv

from pyrouter.errors import ConfigError
from pyrouter.nav.mode import MODES, ModeConfig

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


@dataclass(frozen=True)
class RouterSettings:
    mode: str = "history"
    base: str = ""
    origin: str = "http://127.0.0.1:8000"
    host: str = "127.0.0.1"
    port: int = 8000
    log_level: str = "INFO"

    def __post_init__(self):
        if self.mode not in MODES:
            raise ConfigError(f"PYROUTER_MODE must be one of {MODES}, got {self.mode!r}")
        if not 0 < self.port < 65536:
            raise ConfigError(f"PYROUTER_PORT out of range: {self.port}")

    @classmethod
    def from_env(cls, *, load_dotenv: bool = True) -> "RouterSettings":
        if load_dotenv:
            dotenv.load_dotenv(dotenv.find_dotenv(usecwd=True))
        raw_port = os.getenv("PYROUTER_PORT", str(cls.port))
        try:
            port = int(raw_port)
        except ValueError:
            raise ConfigError(f"PYROUTER_PORT must be an integer, got {raw_port!r}")
        return cls(
            mode=os.getenv("PYROUTER_MODE", cls.mode).strip().lower(),
            base=os.getenv("PYROUTER_BASE", cls.base).strip(),
            origin=os.getenv("PYROUTER_ORIGIN", cls.origin).rstrip("/"),
            host=os.getenv("PYROUTER_HOST", cls.host),
            port=port,
            log_level=os.getenv("PYROUTER_LOG_LEVEL", cls.log_level).upper(),
        )

    @property
    def mode_config(self) -> ModeConfig:
        return ModeConfig(mode=self.mode, base=self.base)  # type: ignore[arg-type]

    @property
    def initial_href(self) -> str:
        base = self.base if self.mode == "history" else ""
        return f"{self.origin}{base.rstrip('/')}/"


def configure_logging(level: str = "INFO") -> None:
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        raise ConfigError(f"Unknown log level {level!r}")
    logging.basicConfig(level=numeric, format=LOG_FORMAT)
    logging.getLogger("pyrouter").setLevel(numeric)
