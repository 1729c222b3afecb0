from __future__ import annotations

from collections.abc import Mapping
from typing import Any

UNKNOWN_ERROR = "Unknown error"


def _message_of(item: Any) -> str | None:
    if isinstance(item, str):
        return item or None
    if isinstance(item, Mapping):
        message = item.get("message")
    else:
        message = getattr(item, "message", None)
    return message if isinstance(message, str) and message else None


def reduce_errors(error: BaseException | None) -> list[str]:
    body = getattr(error, "body", None)
    if isinstance(body, (list, tuple)):
        messages = [message for message in (_message_of(item) for item in body) if message]
        return messages or [UNKNOWN_ERROR]
    body_message = _message_of(body) if isinstance(body, Mapping) else None
    if body_message:
        return [body_message]
    generic = _message_of(error) or (str(error) if error is not None else "")
    return [generic or UNKNOWN_ERROR]


def join_error_messages(error: BaseException | None) -> str:
    return ", ".join(reduce_errors(error))
