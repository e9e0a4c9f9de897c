from abc import ABC, abstractmethod
from typing import Any, Dict, List

from src.interaction.domain.original_message import FileReference


class ChatClient(ABC):
    """
    Interface for the chat platform the bot talks to.
    Implementations raise ChatAdapterError on any failure.
    """
    @abstractmethod
    def post_message(self, channel: str, attachment: Dict[str, Any]) -> Dict[str, Any]:
        pass

    @abstractmethod
    def delete_message(self, channel: str, timestamp: str) -> None:
        pass

    @abstractmethod
    def upload_file(
        self,
        path: str,
        channels: List[str],
        title: str = "",
        filetype: str = "text"
    ) -> FileReference:
        pass
