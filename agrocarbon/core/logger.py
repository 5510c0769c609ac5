import logging
import json
from datetime import datetime, timezone

from agrocarbon.core.config import get_settings

EXTRA_FIELDS = ("credit_id", "farmer_id", "crop_type", "field", "value", "status")


def json_formatter(record):
    log = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "level": record.levelname,
        "service": "agrocarbon",
        "logger": record.name,
        "message": record.getMessage(),
    }

    for key in EXTRA_FIELDS:
        if hasattr(record, key):
            log[key] = getattr(record, key)

    if record.exc_info:
        log["exc_info"] = logging.Formatter().formatException(record.exc_info)

    return json.dumps(log, default=str)


class JSONFormatter(logging.Formatter):
    def format(self, record):
        return json_formatter(record)


logger = logging.getLogger("agrocarbon")
logger.setLevel(get_settings().log_level.upper())

console_handler = logging.StreamHandler()
console_handler.setFormatter(JSONFormatter())

if not logger.handlers:
    logger.addHandler(console_handler)


def get_logger(name: str) -> logging.Logger:
    """Child logger under the service logger, e.g. ``agrocarbon.verification``."""
    return logger.getChild(name)
