from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from src.interaction.domain.original_message import OriginalMessage


class ActionKind(Enum):
    SELECT = "select"
    CANCEL = "cancel"

    @classmethod
    def parse(cls, name: str) -> Union["ActionKind", str]:
        """Unrecognised names are returned as-is so routing can reject them."""
        try:
            return cls(name)
        except ValueError:
            return name


@dataclass(frozen=True)
class TriggeringUser:
    id: str
    name: str


@dataclass(frozen=True)
class InteractionCallback:
    """
    Decoded interactive-action callback.
    Created per request and discarded once handled.
    """
    verification_token: str
    action_kind: Union[ActionKind, str]
    operation_id: str
    user: TriggeringUser
    channel_id: str
    message_ts: str
    original_message: OriginalMessage
    selected_value: Optional[str] = None
