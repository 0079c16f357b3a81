import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv
from rich.logging import RichHandler

logger = logging.getLogger(__name__)

DEFAULT_SEED_PATH = "data/seed.json"
DEFAULT_CURRENCY = "USD"
DEFAULT_BUDGET_WARNING = 80.0
DEFAULT_LOG_LEVEL = "INFO"


@dataclass(frozen=True)
class Settings:
    seed_path: str = DEFAULT_SEED_PATH
    currency: str = DEFAULT_CURRENCY
    budget_warning: float = DEFAULT_BUDGET_WARNING  # percent, "near limit" above this
    log_level: str = DEFAULT_LOG_LEVEL


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Invalid %s=%r, using %s", name, raw, default)
        return default


def load_settings(dotenv: bool = True) -> Settings:
    """Read settings from the environment, after loading a .env file if present."""
    if dotenv:
        load_dotenv()
    return Settings(
        seed_path=os.getenv("FINANCE_SEED_PATH", DEFAULT_SEED_PATH),
        currency=os.getenv("FINANCE_CURRENCY", DEFAULT_CURRENCY).upper(),
        budget_warning=_float_env("FINANCE_BUDGET_WARNING", DEFAULT_BUDGET_WARNING),
        log_level=os.getenv("FINANCE_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
    )


def configure_logging(level: str = DEFAULT_LOG_LEVEL) -> None:
    root = logging.getLogger()
    root.setLevel(level)
    if not any(isinstance(h, RichHandler) for h in root.handlers):
        root.addHandler(RichHandler(rich_tracebacks=True, show_path=False))
