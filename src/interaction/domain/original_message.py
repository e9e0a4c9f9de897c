from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass(frozen=True)
class AttachmentField:
    title: str
    value: str
    short: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AttachmentField":
        return cls(
            title=str(data.get("title", "")),
            value=str(data.get("value", "")),
            short=bool(data.get("short", False)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"title": self.title, "value": self.value, "short": self.short}


@dataclass(frozen=True)
class FileReference:
    id: str
    title: str = ""
    filetype: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FileReference":
        return cls(
            id=str(data.get("id", "")),
            title=str(data.get("title", "")),
            filetype=str(data.get("filetype", "")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "title": self.title, "filetype": self.filetype}


@dataclass(frozen=True)
class Attachment:
    """
    One attachment of a chat message.
    Keys other than actions and fields are carried in `extra` untouched.
    """
    actions: List[Dict[str, Any]] = field(default_factory=list)
    fields: List[AttachmentField] = field(default_factory=list)
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Attachment":
        extra = {k: v for k, v in data.items() if k not in ("actions", "fields")}
        return cls(
            actions=[dict(a) for a in data.get("actions") or [] if isinstance(a, dict)],
            fields=[AttachmentField.from_dict(f) for f in data.get("fields") or [] if isinstance(f, dict)],
            extra=extra,
        )

    def to_dict(self) -> Dict[str, Any]:
        data = dict(self.extra)
        data["actions"] = [dict(a) for a in self.actions]
        data["fields"] = [f.to_dict() for f in self.fields]
        return data


@dataclass(frozen=True)
class OriginalMessage:
    """
    The message carrying the interactive controls that triggered a callback.
    Never stored; read from the inbound payload and re-emitted or deleted.
    """
    attachments: List[Attachment] = field(default_factory=list)
    files: List[FileReference] = field(default_factory=list)
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OriginalMessage":
        extra = {k: v for k, v in data.items() if k not in ("attachments", "files")}
        return cls(
            attachments=[Attachment.from_dict(a) for a in data.get("attachments") or [] if isinstance(a, dict)],
            files=[FileReference.from_dict(f) for f in data.get("files") or [] if isinstance(f, dict)],
            extra=extra,
        )

    def to_dict(self) -> Dict[str, Any]:
        data = dict(self.extra)
        data["attachments"] = [a.to_dict() for a in self.attachments]
        if self.files:
            data["files"] = [f.to_dict() for f in self.files]
        return data
