import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

REDACTED_FIELDS = frozenset({"token", "verification_token", "secret"})


class StructuredRuntimeLogger:
    """
    JSON-lines event logger for the interaction webhook path.
    Fields named like secrets are masked before they are written.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self._logger = logger or logging.getLogger("runtime")

    def emit(self, event_type: str, level: int = logging.INFO, **fields: Any) -> None:
        payload: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "event_type": event_type,
        }
        for key, value in fields.items():
            payload[key] = "***" if key in REDACTED_FIELDS else value
        self._logger.log(level, json.dumps(payload, default=str, ensure_ascii=False))
