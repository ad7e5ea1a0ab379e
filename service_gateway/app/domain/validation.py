"""
Declarative request validation for Gateway routes.

Query parameters are coerced once, here, so route handlers receive typed
values. Failures raise ``RequestValidationError`` and are rendered by the
terminal handler as a 400 envelope with one ``{path, message}`` per field.
"""

from typing import Optional

from fastapi import Query

from ..models import BoolLiteral, CommentsQuery, ParentEntityType


def parse_bool_flag(value: Optional[str]) -> Optional[bool]:
    """Map the literals ``"true"``/``"false"``; anything else is left unset."""
    if value == "true":
        return True
    if value == "false":
        return False
    return None


def or_default(value: Optional[int], default: int) -> int:
    """Apply a default only when the caller supplied nothing (``0`` is kept)."""
    return default if value is None else value


def comments_query(
    limit: Optional[int] = Query(None, ge=0),
    offset: Optional[int] = Query(None, ge=0),
    order: Optional[str] = Query(None),
    ascending: Optional[BoolLiteral] = Query(None),
    parent_entity_type: Optional[ParentEntityType] = Query(None),
    parent_entity_id: Optional[int] = Query(None),
    get_positions: Optional[BoolLiteral] = Query(None),
    holders_only: Optional[BoolLiteral] = Query(None),
) -> CommentsQuery:
    """Validated filters for the comments listing."""
    return CommentsQuery(
        limit=limit,
        offset=offset,
        order=order,
        ascending=parse_bool_flag(ascending),
        parent_entity_type=parent_entity_type,
        parent_entity_id=parent_entity_id,
        get_positions=parse_bool_flag(get_positions),
        holders_only=parse_bool_flag(holders_only),
    )
