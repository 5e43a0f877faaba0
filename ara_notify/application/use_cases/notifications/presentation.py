"""Toast styling and content sanitization."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from html.parser import HTMLParser
from typing import Any

from ara_notify.domain.entities import (
    AttachmentType,
    DirectMessage,
    NotificationRecord,
    NotificationType,
    SenderProfile,
)
from ara_notify.utils import format_time_label

PHOTO_PLACEHOLDER = "Photo"

MESSAGE_TEXTS: dict[str, str] = {
    "notification.deleted_post": "This post has been deleted.",
    "notification.deleted_comment": "This comment has been deleted.",
    "common.success_delete": "Deleted.",
    "common.error_delete": "Could not delete. Please try again.",
    "notification.success_clear_all": "All notifications were cleared.",
    "notification.error_clear_all": "Could not clear notifications. Please try again.",
}


class ToastKind(str, Enum):
    """Every notification type plus direct-message toasts."""

    CHAT = "chat"
    LIKE = "like"
    COMMENT = "comment"
    REPOST = "repost"
    MENTION = "mention"
    FOLLOW = "follow"
    REPLY = "reply"
    SYSTEM = "system"
    LIKE_COMMENT = "like_comment"
    LIKE_FEED = "like_feed"

    @classmethod
    def for_notification(cls, notification_type: NotificationType) -> "ToastKind":
        return cls(notification_type.value)


@dataclass(frozen=True)
class ToastStyle:
    icon: str
    color: str
    label_key: str
    label: str


_LIKE_COMMENT_STYLE = ToastStyle("❤️", "rose", "notification.action_like_comment", "liked your comment")
_LIKE_FEED_STYLE = ToastStyle("❤️", "rose", "notification.action_like_feed", "liked your post")

_STYLES: dict[ToastKind, ToastStyle] = {
    ToastKind.CHAT: ToastStyle("💬", "blue", "chat.new_message", "New message"),
    ToastKind.LIKE: _LIKE_FEED_STYLE,
    ToastKind.LIKE_COMMENT: _LIKE_COMMENT_STYLE,
    ToastKind.LIKE_FEED: _LIKE_FEED_STYLE,
    ToastKind.COMMENT: ToastStyle("💬", "emerald", "notification.action_comment", "left a comment"),
    ToastKind.REPLY: ToastStyle("💬", "emerald", "notification.action_reply", "replied to your comment"),
    ToastKind.FOLLOW: ToastStyle("👤", "cyan", "notification.follow_msg", "started following you"),
    ToastKind.MENTION: ToastStyle("🏷️", "indigo", "notification.action_mention", "mentioned you"),
    ToastKind.REPOST: ToastStyle("🔁", "amber", "notification.action_repost", "shared your post"),
    ToastKind.SYSTEM: ToastStyle("📢", "zinc", "notification.system", "Notice from the ARA team"),
}

_missing_styles = set(ToastKind) - set(_STYLES)
if _missing_styles:
    raise RuntimeError(f"Toast styles missing for: {sorted(kind.value for kind in _missing_styles)}")

_BODYLESS_KINDS = frozenset(
    {ToastKind.LIKE, ToastKind.LIKE_COMMENT, ToastKind.LIKE_FEED, ToastKind.FOLLOW}
)


def style_for(kind: ToastKind, *, on_comment: bool = False) -> ToastStyle:
    """Return the style of ``kind``; a plain like on a comment reads as a comment like."""

    if kind is ToastKind.LIKE and on_comment:
        return _LIKE_COMMENT_STYLE
    return _STYLES[kind]


@dataclass(frozen=True)
class ContentPreview:
    text: str
    image_url: str | None = None


class _PreviewParser(HTMLParser):
    """Keep the text of a small tag allow-list and the first image source."""

    _ALLOWED_TAGS = frozenset({"p", "strong", "em", "b", "i", "u", "br", "img"})
    _DROPPED_TAGS = frozenset(
        {"script", "style", "iframe", "object", "embed", "template", "noscript", "svg", "math"}
    )

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.paragraphs: list[str] = []
        self.loose_text: list[str] = []
        self.image_url: str | None = None
        self._paragraph: list[str] | None = None
        self._dropped_depth = 0

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        if tag in self._DROPPED_TAGS:
            self._dropped_depth += 1
            return
        if self._dropped_depth or tag not in self._ALLOWED_TAGS:
            return
        if tag == "p":
            self._close_paragraph()
            self._paragraph = []
        elif tag == "br":
            self._write("\n")
        elif tag == "img" and self.image_url is None:
            src = dict(attrs).get("src")
            if src and _is_safe_image_source(src):
                self.image_url = src.strip()

    def handle_startendtag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        if tag in self._DROPPED_TAGS:
            return
        self.handle_starttag(tag, attrs)

    def handle_endtag(self, tag: str) -> None:
        if tag in self._DROPPED_TAGS:
            self._dropped_depth = max(0, self._dropped_depth - 1)
            return
        if tag == "p" and not self._dropped_depth:
            self._close_paragraph()

    def handle_data(self, data: str) -> None:
        if not self._dropped_depth:
            self._write(data)

    def close(self) -> None:
        super().close()
        self._close_paragraph()

    def _write(self, text: str) -> None:
        if self._paragraph is not None:
            self._paragraph.append(text)
        else:
            self.loose_text.append(text)

    def _close_paragraph(self) -> None:
        if self._paragraph is not None:
            self.paragraphs.append("".join(self._paragraph).strip())
            self._paragraph = None


def _is_safe_image_source(src: str) -> bool:
    lowered = src.strip().lower()
    return lowered.startswith(("https://", "http://", "/"))


def sanitize_content(html: str | None) -> ContentPreview:
    """Reduce stored rich content to plain text and an optional image.

    Markup never reaches the client: entities are decoded to text, scripts and
    styles are removed with their contents, and an image-only body becomes a
    photo placeholder.
    """

    if not html:
        return ContentPreview(text="")

    parser = _PreviewParser()
    parser.feed(html)
    parser.close()

    if parser.paragraphs:
        text = "\n".join(parser.paragraphs).strip()
    else:
        text = "".join(parser.loose_text).strip()

    if not text and parser.image_url:
        text = PHOTO_PLACEHOLDER
    return ContentPreview(text=text, image_url=parser.image_url)


_ATTACHMENT_PLACEHOLDERS = {
    AttachmentType.IMAGE: PHOTO_PLACEHOLDER,
    AttachmentType.VIDEO: "Video",
    AttachmentType.FILE: "File",
}


def chat_preview(message: DirectMessage) -> ContentPreview:
    preview = sanitize_content(message.content)
    if preview.text or not message.attachment_types:
        return preview
    return ContentPreview(text=_ATTACHMENT_PLACEHOLDERS[message.attachment_types[0]])


def _serialize_sender(sender: SenderProfile | None) -> dict[str, Any]:
    sender = sender or SenderProfile.unknown()
    return {"nickname": sender.nickname, "avatar_url": sender.avatar_url}


def build_notification_toast(toast_id: str, record: NotificationRecord) -> dict[str, Any]:
    """Return the payload rendered by the client for a notification toast."""

    kind = ToastKind.for_notification(record.type)
    style = style_for(kind, on_comment=bool(record.sub_target_entity_ref))
    preview = sanitize_content(record.content_snapshot)
    show_body = kind not in _BODYLESS_KINDS
    return {
        "id": toast_id,
        "notification_id": record.id,
        "kind": kind.value,
        "icon": style.icon,
        "color": style.color,
        "label_key": style.label_key,
        "label": style.label,
        "sender": _serialize_sender(record.sender),
        "body": preview.text if show_body else None,
        "image_url": preview.image_url if show_body else None,
        "timestamp": record.created_at.isoformat() if record.created_at else None,
        "time_label": format_time_label(record.created_at),
    }


def build_chat_toast(
    toast_id: str, message: DirectMessage, sender: SenderProfile | None
) -> dict[str, Any]:
    style = style_for(ToastKind.CHAT)
    preview = chat_preview(message)
    return {
        "id": toast_id,
        "notification_id": None,
        "chat_id": message.chat_id,
        "kind": ToastKind.CHAT.value,
        "icon": style.icon,
        "color": style.color,
        "label_key": style.label_key,
        "label": style.label,
        "sender": _serialize_sender(sender),
        "body": preview.text,
        "image_url": preview.image_url,
        "timestamp": message.created_at.isoformat() if message.created_at else None,
        "time_label": format_time_label(message.created_at),
    }


__all__ = [
    "ContentPreview",
    "MESSAGE_TEXTS",
    "PHOTO_PLACEHOLDER",
    "ToastKind",
    "ToastStyle",
    "build_chat_toast",
    "build_notification_toast",
    "chat_preview",
    "sanitize_content",
    "style_for",
]
