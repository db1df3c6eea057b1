"""
Action button normalization.

Forms declare their buttons in any of three encodings:

- ``"save"``: bare value, used as both id and label
- ``["save", "Save & Continue"]``: pair, label defaults to the id
- ``{"id": "cancel", "label": "Cancel", "cancel": True, "color": "warn"}``

Note: ``cancel`` is read from the raw entry for every encoding, so bare
and pair entries always normalize to ``cancel=None``. It is kept that way
on purpose until the intended default for those encodings is settled.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from .errors import InvalidAction
from .ir import DEFAULT_ACTION_COLOR, ActionDescriptor


def normalize_actions(actions: Sequence[Any] | None) -> list[ActionDescriptor]:
    """
    Normalize raw action declarations, preserving order.

    Raises:
        InvalidAction: For ``None`` entries, empty pairs and mappings
            without an ``id``
    """
    if not actions:
        return []
    return [normalize_action(action, index) for index, action in enumerate(actions)]


def normalize_action(action: Any, index: int = 0) -> ActionDescriptor:
    if action is None:
        raise InvalidAction(f"Action #{index} is empty")

    if isinstance(action, Mapping):
        if action.get("id") is None:
            raise InvalidAction(f"Action #{index} has no id")
        return ActionDescriptor(
            id=action["id"],
            label=action.get("label"),
            color=action.get("color") or DEFAULT_ACTION_COLOR,
            cancel=action.get("cancel"),
        )

    if isinstance(action, Sequence) and not isinstance(action, str | bytes):
        if not action or action[0] is None:
            raise InvalidAction(f"Action #{index} has no id")
        action_id = action[0]
        label = action[1] if len(action) > 1 else None
        return ActionDescriptor(
            id=action_id,
            label=action_id if label is None else label,
            cancel=_cancel_of(action),
        )

    return ActionDescriptor(id=action, label=action, cancel=_cancel_of(action))


def _cancel_of(action: Any) -> Any:
    # Only mappings carry a cancel flag
    return action.get("cancel") if isinstance(action, Mapping) else None
