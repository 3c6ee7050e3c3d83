import logging
import os

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_LEVEL_ENV = "STMTSENSE_LOG_LEVEL"

_configured = False


def _configure_root():
    global _configured
    if _configured:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root = logging.getLogger("stmtsense")
    root.addHandler(handler)
    level = getattr(logging, os.environ.get(LOG_LEVEL_ENV, "INFO").upper(), logging.INFO)
    root.setLevel(level if isinstance(level, int) else logging.INFO)
    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Returns a logger under the shared 'stmtsense' handler."""
    _configure_root()
    if not name.startswith("stmtsense"):
        name = f"stmtsense.{name}"
    return logging.getLogger(name)


def load_locale_pack(path: str):
    """Reads a LocalePack from a JSON file."""
    from stmtsense.models import LocalePack

    with open(path, 'r', encoding='utf-8') as f:
        return LocalePack.model_validate_json(f.read())
