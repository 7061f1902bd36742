import json
import logging
import sys
from typing import Any, Dict, MutableMapping, Optional, Tuple
import uuid

from intentbot.config import get_settings

TEXT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# Libraries that log every request or batch at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "sentence_transformers", "urllib3")


class CustomJsonFormatter(logging.Formatter):
    """
    Renders each record as one JSON object per line.

    Records logged during a conversational turn carry ``turn_id``; anything
    passed as ``extra={"data": {...}}`` is merged into the object.
    """

    def __init__(self, service: str, environment: str):
        super().__init__()
        self.service = service
        self.environment = environment

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "service": self.service,
            "environment": self.environment,
        }

        turn_id = getattr(record, "turn_id", None)
        if turn_id:
            entry["turn_id"] = turn_id

        data = getattr(record, "data", None)
        if isinstance(data, dict):
            entry.update(data)

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str, ensure_ascii=False)


def configure_logging(level: Optional[str] = None) -> None:
    """
    Install the stdout handler on the root logger.

    Args:
        level: Optional level name overriding LOG_LEVEL
    """
    settings = get_settings()
    log_level = getattr(logging, (level or settings.LOG_LEVEL).upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    if settings.LOG_FORMAT == "json":
        handler.setFormatter(CustomJsonFormatter(settings.SERVICE_NAME, settings.ENVIRONMENT))
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))

    logging.basicConfig(level=log_level, handlers=[handler], force=True)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


class TurnLoggerAdapter(logging.LoggerAdapter):
    """
    Stamps every record with the id of the conversational turn being handled.
    """

    def __init__(self, logger: logging.Logger, turn_id: Optional[str] = None):
        self.turn_id = turn_id or str(uuid.uuid4())
        super().__init__(logger, {"turn_id": self.turn_id})

    def process(self, msg: str, kwargs: MutableMapping[str, Any]) -> Tuple[str, MutableMapping[str, Any]]:
        extra: Dict[str, Any] = dict(kwargs.get("extra") or {})
        extra.update(self.extra)
        kwargs["extra"] = extra
        return msg, kwargs


def get_turn_logger(name: str, turn_id: Optional[str] = None) -> TurnLoggerAdapter:
    """
    Get a logger bound to one conversational turn.

    Args:
        name: Logger name
        turn_id: Id shared by all records of the turn, generated when omitted

    Returns:
        TurnLoggerAdapter: Adapter stamping ``turn_id`` on each record
    """
    return TurnLoggerAdapter(get_logger(name), turn_id)
