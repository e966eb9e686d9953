import json
import logging
from datetime import datetime, UTC

class JSONFormatter(logging.Formatter):
    """Minimal JSON log formatter suitable for shipping to stdout.

    Includes level, logger, message, timestamp and the audit context keys when a
    caller passes them through ``extra`` (event, actor, org, room, request,
    connection).
    """

    CONTEXT_KEYS = ("event", "actor", "org", "room", "request", "connection")

    def format(self, record: logging.LogRecord) -> str:
        data = {
            "ts": datetime.now(UTC).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for key in self.CONTEXT_KEYS:
            if hasattr(record, key):
                data[key] = getattr(record, key)
        if record.exc_info:
            data["exc"] = self.formatException(record.exc_info)
        data["src"] = f"{record.pathname}:{record.lineno}"
        return json.dumps(data, ensure_ascii=False, default=str)
