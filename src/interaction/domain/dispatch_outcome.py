from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional


@dataclass
class DispatchOutcome:
    """
    Result of dispatching one callback.
    `after_response` callables run once the HTTP response has been written.
    """
    status_code: int = 200
    body: Optional[Dict[str, Any]] = None
    after_response: List[Callable[[], None]] = field(default_factory=list)

    @classmethod
    def empty(cls, status_code: int = 200) -> "DispatchOutcome":
        return cls(status_code=status_code)
