import json
import logging
from typing import Any, Dict, Optional
from urllib.parse import unquote_plus

from src.interaction.domain.callback_errors import AuthError, DecodeError
from src.interaction.domain.interaction_callback import (
    ActionKind,
    InteractionCallback,
    TriggeringUser,
)
from src.interaction.domain.original_message import OriginalMessage
from src.interaction.services.callback_token_verifier import CallbackTokenVerifier

logger = logging.getLogger(__name__)

PAYLOAD_PREFIX = "payload="


class SlackCallbackDecoder:
    """
    Turns a raw interactive-callback body into an InteractionCallback.
    Pure apart from logging: decodes, then compares the token.
    """

    def __init__(self, verifier: CallbackTokenVerifier):
        self.verifier = verifier

    def decode(self, body: bytes) -> InteractionCallback:
        payload = self._parse(body)
        callback = self._to_callback(payload)

        if not self.verifier.verify(callback.verification_token):
            raise AuthError("Invalid verification token")

        return callback

    def _parse(self, body: bytes) -> Dict[str, Any]:
        try:
            text = body.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodeError("Request body is not valid UTF-8") from e

        if not text.startswith(PAYLOAD_PREFIX):
            raise DecodeError(f"Request body does not start with '{PAYLOAD_PREFIX}'")

        try:
            json_str = unquote_plus(text[len(PAYLOAD_PREFIX):], errors="strict")
        except UnicodeDecodeError as e:
            raise DecodeError("Failed to unescape request body") from e

        try:
            payload = json.loads(json_str)
        except json.JSONDecodeError as e:
            logger.error(f"Failed to decode json message from slack: {e}")
            raise DecodeError("Invalid JSON payload") from e

        if not isinstance(payload, dict):
            raise DecodeError("Payload must be a JSON object")
        return payload

    def _to_callback(self, payload: Dict[str, Any]) -> InteractionCallback:
        actions = payload.get("actions")
        if not isinstance(actions, list) or not actions or not isinstance(actions[0], dict):
            raise DecodeError("Payload carries no action")
        action = actions[0]

        user = payload.get("user") or {}
        channel = payload.get("channel") or {}
        original = payload.get("original_message") or {}
        if not isinstance(user, dict) or not isinstance(channel, dict) or not isinstance(original, dict):
            raise DecodeError("Payload has malformed user, channel or original_message")

        return InteractionCallback(
            verification_token=str(payload.get("token", "")),
            action_kind=ActionKind.parse(str(action.get("name", ""))),
            operation_id=str(payload.get("callback_id", "")),
            user=TriggeringUser(id=str(user.get("id", "")), name=str(user.get("name", ""))),
            channel_id=str(channel.get("id", "")),
            message_ts=str(payload.get("message_ts", "")),
            original_message=OriginalMessage.from_dict(original),
            selected_value=_selected_value(action),
        )


def _selected_value(action: Dict[str, Any]) -> Optional[str]:
    options = action.get("selected_options")
    if not isinstance(options, list) or not options or not isinstance(options[0], dict):
        return None
    value = options[0].get("value")
    return None if value is None else str(value)
