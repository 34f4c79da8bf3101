"""Event types exchanged between channels and the dispatcher."""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class InboundEvent:
    """A message received from the chat network."""
    id: str
    chat_id: str
    from_me: bool = False
    participant: str | None = None  # Set for group messages
    push_name: str = ""
    conversation: str = ""  # Plain text body
    extended_text: str = ""  # Reply / link-preview text body
    image_caption: str = ""
    video_caption: str = ""
    has_image: bool = False
    has_video: bool = False
    quoted_has_image: bool = False
    quoted_has_video: bool = False
    raw: dict[str, Any] = field(default_factory=dict)

    @property
    def has_media(self) -> bool:
        """Whether the message or the message it quotes carries an image or video."""
        return self.has_image or self.has_video or self.quoted_has_image or self.quoted_has_video

    @classmethod
    def from_bridge(cls, data: dict[str, Any]) -> "InboundEvent":
        """
        Build an event from a bridge message payload.

        The bridge forwards messages in the shape
        ``{"key": {...}, "message": {...}, "pushName": ...}``.
        """
        key = data.get("key") or {}
        message = data.get("message") or {}

        extended = message.get("extendedTextMessage") or {}
        image = message.get("imageMessage")
        video = message.get("videoMessage")
        quoted = (extended.get("contextInfo") or {}).get("quotedMessage") or {}

        return cls(
            id=key.get("id", ""),
            chat_id=key.get("remoteJid", ""),
            from_me=bool(key.get("fromMe", False)),
            participant=key.get("participant") or None,
            push_name=data.get("pushName") or "",
            conversation=message.get("conversation") or "",
            extended_text=extended.get("text") or "",
            image_caption=(image or {}).get("caption") or "",
            video_caption=(video or {}).get("caption") or "",
            has_image=image is not None,
            has_video=video is not None,
            quoted_has_image="imageMessage" in quoted,
            quoted_has_video="videoMessage" in quoted,
            raw=data,
        )


@dataclass
class OutboundMessage:
    """A message to send to a chat. Exactly one content kind is set."""
    chat_id: str
    text: str | None = None
    image: bytes | None = None
    caption: str = ""
    audio: bytes | None = None
    audio_mimetype: str = "audio/mpeg"
    sticker: bytes | None = None
    sticker_pack: str = ""
    sticker_author: str = ""
    quoted: InboundEvent | None = None

    @property
    def kind(self) -> str:
        """Content kind: text, image, audio or sticker."""
        if self.image is not None:
            return "image"
        if self.audio is not None:
            return "audio"
        if self.sticker is not None:
            return "sticker"
        return "text"

    @classmethod
    def reply(cls, chat_id: str, text: str, quoted: InboundEvent | None = None) -> "OutboundMessage":
        """Build a text message."""
        return cls(chat_id=chat_id, text=text, quoted=quoted)
