from dataclasses import replace
from typing import Any, Dict

from src.interaction.domain.callback_errors import MissingAttachmentError
from src.interaction.domain.original_message import (
    AttachmentField,
    FileReference,
    OriginalMessage,
)


class MessageLifecycle:
    """
    Pure transformations of the original message sent back to the chat platform.
    Inputs are never mutated.
    """

    def responded(self, original: OriginalMessage, title: str, value: str) -> OriginalMessage:
        """
        Strips the interactive actions of the first attachment and leaves
        a single static field in their place.
        """
        if not original.attachments:
            raise MissingAttachmentError("Original message has no attachment to respond on")

        first = replace(
            original.attachments[0],
            actions=[],
            fields=[AttachmentField(title=title, value=value, short=False)],
        )
        return replace(original, attachments=[first] + list(original.attachments[1:]))

    def with_file(self, original: OriginalMessage, file_ref: FileReference) -> OriginalMessage:
        return replace(original, attachments=[], files=[file_ref])

    def respond(self, original: OriginalMessage, title: str, value: str) -> Dict[str, Any]:
        return self.responded(original, title, value).to_dict()
