import logging
import os
from dataclasses import dataclass
from typing import Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

_TRUE = {"1", "true", "yes", "on"}


def _int_env(name, default):
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


@dataclass
class Settings:
    host: str = "127.0.0.1"
    port: int = 8080
    debug: bool = False
    log_level: str = "INFO"
    poll_interval_ms: int = 50
    poll_max_attempts: int = 200
    seed: Optional[int] = None
    width: int = 800
    height: int = 600

    @classmethod
    def from_env(cls):
        return cls(
            host=os.getenv("GRAPHVIEW_HOST", cls.host),
            port=_int_env("GRAPHVIEW_PORT", cls.port),
            debug=os.getenv("GRAPHVIEW_DEBUG", "").strip().lower() in _TRUE,
            log_level=os.getenv("GRAPHVIEW_LOG_LEVEL", cls.log_level).upper(),
            poll_interval_ms=_int_env("GRAPHVIEW_POLL_INTERVAL_MS", cls.poll_interval_ms),
            poll_max_attempts=_int_env("GRAPHVIEW_POLL_MAX_ATTEMPTS", cls.poll_max_attempts),
            seed=_int_env("GRAPHVIEW_SEED", None),
            width=_int_env("GRAPHVIEW_WIDTH", cls.width),
            height=_int_env("GRAPHVIEW_HEIGHT", cls.height),
        )


def configure_logging(level="INFO", debug=False):
    logging.basicConfig(level=level, format=LOG_FORMAT)
    if not debug:
        logging.getLogger('werkzeug').setLevel(logging.ERROR)
