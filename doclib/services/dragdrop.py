"""
Drag-and-drop payload codec.

A dragged library item travels as ``"<kind>:<uuid>"``, for example
``"folder:3f2c..."``.
"""
import uuid
from dataclasses import dataclass

from doclib.models.node import NodeKind
from doclib.core.exceptions import ValidationError


@dataclass(frozen=True)
class DragItem:
    """Decoded drag payload."""
    kind: NodeKind
    id: uuid.UUID


def encode_drag_payload(item: DragItem) -> str:
    return f"{item.kind.value}:{item.id}"


def decode_drag_payload(payload: str) -> DragItem:
    """
    Decode a drag payload string.

    Raises:
        ValidationError: If the payload is malformed
    """
    kind, separator, raw_id = (payload or "").strip().partition(":")
    if not separator:
        raise ValidationError(f"Invalid drag payload '{payload}'")

    try:
        node_kind = NodeKind(kind)
    except ValueError:
        raise ValidationError(f"Unknown drag payload kind '{kind}'") from None

    try:
        item_id = uuid.UUID(raw_id)
    except ValueError:
        raise ValidationError(f"Invalid identifier in drag payload '{payload}'") from None

    return DragItem(kind=node_kind, id=item_id)
