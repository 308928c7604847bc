"""
Pure list reducers. Realtime change events and optimistic cart edits are both
folded into in-memory lists here so the update rules can be tested without a
subscription or a backend.
"""
from typing import Any, Dict, List, Optional

from marketplace.domain.schemas import CartItemView, ChangeEvent


def apply_change(current: List[Dict[str, Any]], event: ChangeEvent) -> List[Dict[str, Any]]:
    """
    Fold one change event into a list of rows keyed by "id".
    INSERT prepends (lists are newest first), UPDATE replaces in place,
    DELETE removes. Events for unknown ids leave the list unchanged.
    The input list is never mutated.
    """
    if event.event_type == "INSERT":
        if not event.new:
            return list(current)
        new_id = event.new.get("id")
        rest = [row for row in current if row.get("id") != new_id]
        return [dict(event.new)] + rest

    if event.event_type == "UPDATE":
        if not event.new:
            return list(current)
        new_id = event.new.get("id")
        return [dict(row, **event.new) if row.get("id") == new_id else row for row in current]

    if event.event_type == "DELETE":
        old_id = (event.old or {}).get("id")
        if old_id is None:
            return list(current)
        return [row for row in current if row.get("id") != old_id]

    return list(current)


def apply_quantity_change(items: List[CartItemView], item_id: str, quantity: int) -> List[CartItemView]:
    """Optimistic local quantity edit. Quantities below 1 are ignored."""
    if quantity < 1:
        return list(items)
    return [
        item.model_copy(update={"quantity": quantity}) if item.id == item_id else item
        for item in items
    ]


def revert_quantity_change(
    items: List[CartItemView], item_id: str, previous_quantity: Optional[int]
) -> List[CartItemView]:
    """Compensating action for apply_quantity_change after a failed write."""
    if previous_quantity is None:
        return list(items)
    return [
        item.model_copy(update={"quantity": previous_quantity}) if item.id == item_id else item
        for item in items
    ]


def remove_item(items: List[CartItemView], item_id: str) -> List[CartItemView]:
    return [item for item in items if item.id != item_id]
