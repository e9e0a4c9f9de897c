import logging
from typing import Any, Dict, List, Optional

from slack_sdk import WebClient
from slack_sdk.errors import SlackApiError, SlackClientError

from src.infrastructure.adapters.slack.slack_errors import (
    SlackApiCallError,
    SlackChatError,
    SlackNetworkError,
)
from src.interaction.domain.original_message import FileReference
from src.interaction.interfaces.chat_client import ChatClient

logger = logging.getLogger(__name__)


class SlackChatClient(ChatClient):
    """
    Slack Web API adapter. One instance is shared by every request;
    the underlying WebClient holds no per-request state.
    """

    def __init__(self, token: str, timeout: int = 10, client: Optional[WebClient] = None):
        self.client = client or WebClient(token=token, timeout=timeout)

    def post_message(self, channel: str, attachment: Dict[str, Any]) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = {"channel": channel, "attachments": [attachment]}
        # Body lives only in the attachment; top-level text is the notification fallback
        if attachment.get("fallback"):
            kwargs["text"] = attachment["fallback"]

        response = self._call("chat.postMessage", self.client.chat_postMessage, **kwargs)
        return {"channel": response.get("channel"), "ts": response.get("ts")}

    def delete_message(self, channel: str, timestamp: str) -> None:
        self._call("chat.delete", self.client.chat_delete, channel=channel, ts=timestamp)

    def upload_file(
        self,
        path: str,
        channels: List[str],
        title: str = "",
        filetype: str = "text"
    ) -> FileReference:
        kwargs: Dict[str, Any] = {"file": path, "title": title}
        if channels:
            kwargs["channel"] = channels[0]

        response = self._call("files.upload", self.client.files_upload_v2, **kwargs)

        file_info = response.get("file")
        if not file_info:
            files = response.get("files") or []
            file_info = files[0] if files else None
        if not file_info or not file_info.get("id"):
            raise SlackApiCallError("files.upload", "no_file_in_response")

        return FileReference(
            id=str(file_info["id"]),
            title=str(file_info.get("title") or title),
            filetype=str(file_info.get("filetype") or filetype),
        )

    def _call(self, method: str, fn, **kwargs):
        try:
            return fn(**kwargs)
        except SlackApiError as e:
            error = e.response.get("error", "unknown_error") if e.response is not None else "unknown_error"
            logger.warning(f"Slack API error on {method}: {error}")
            raise SlackApiCallError(method, error) from e
        except SlackClientError as e:
            logger.error(f"Slack client error on {method}: {e}")
            raise SlackChatError(f"{method} failed: {e}") from e
        except OSError as e:
            logger.error(f"Slack network error on {method}: {e}")
            raise SlackNetworkError(f"{method} failed: {e}") from e
