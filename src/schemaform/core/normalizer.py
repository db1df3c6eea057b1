"""
Layout boundary normalization.

Maps the three accepted raw encodings onto ``LeafLayout`` / ``GroupLayout``:

- ``[id, label?, type?]``: positional leaf
- ``["Legend"?, [...], [...]]``: any list holding at least one nested list
  is a fieldset; a leading plain string is its legend
- ``{"id": ..., "label": ..., "type": ..., "controls": [...], "choices": [...]}``

Nothing downstream inspects raw shape again.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import ValidationError

from .errors import InvalidLayout, LayoutContext, MissingFieldId, UnsupportedControlType
from .ir import (
    DEFAULT_CONTROL_TYPE,
    FIELDSET_TYPE,
    ChoiceSpec,
    GroupLayout,
    LayoutNode,
    LeafLayout,
)


def normalize_layout(specs: Any, path: str = "layout") -> list[LayoutNode]:
    """
    Normalize a raw layout list.

    Args:
        specs: Raw layout, a JSON-shaped list
        path: Path prefix used in error contexts

    Returns:
        Normalized nodes in source order

    Raises:
        InvalidLayout: If ``specs`` is not a list or an entry has no
            recognizable shape
        MissingFieldId: If a leaf has no usable id
    """
    if not _is_array(specs):
        raise InvalidLayout("Layout must be a list", LayoutContext(path=path, entry=specs))
    return [normalize_entry(spec, f"{path}[{index}]") for index, spec in enumerate(specs)]


def normalize_entry(entry: Any, path: str) -> LayoutNode:
    """Normalize one raw layout entry."""
    if _is_array(entry):
        if any(_is_array(item) for item in entry):
            return _normalize_array_group(entry, path)
        return _normalize_positional(entry, path)
    if isinstance(entry, Mapping):
        return _normalize_object(entry, path)
    raise InvalidLayout(
        f"Unrecognized layout entry of type {type(entry).__name__}",
        LayoutContext(path=path, entry=entry),
    )


def _is_array(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, str | bytes)


def _normalize_array_group(entry: Sequence[Any], path: str) -> GroupLayout:
    legend = ""
    start = 0
    if isinstance(entry[0], str):
        legend = entry[0]
        start = 1
    controls = [
        normalize_entry(entry[index], f"{path}[{index}]") for index in range(start, len(entry))
    ]
    return GroupLayout(legend=legend, controls=controls, path=path)


def _normalize_positional(entry: Sequence[Any], path: str) -> LayoutNode:
    field_id = entry[0] if len(entry) > 0 else None
    label = _label(entry[1] if len(entry) > 1 else None)
    control_type = _control_type(entry[2] if len(entry) > 2 else None, path, entry)

    if control_type == FIELDSET_TYPE:
        # Positional fieldsets cannot carry children
        return GroupLayout(legend=label, path=path)

    return LeafLayout(
        id=_field_id(field_id, path, entry),
        label=label,
        type=control_type,
        path=path,
    )


def _normalize_object(entry: Mapping[str, Any], path: str) -> LayoutNode:
    label = _label(entry.get("label"))
    control_type = _control_type(entry.get("type"), path, entry)

    if control_type == FIELDSET_TYPE:
        raw_controls = entry.get("controls")
        if raw_controls is None:
            raw_controls = []
        return GroupLayout(
            legend=label,
            controls=normalize_layout(raw_controls, f"{path}.controls"),
            path=path,
        )

    return LeafLayout(
        id=_field_id(entry.get("id"), path, entry),
        label=label,
        type=control_type,
        choices=_choices(entry.get("choices"), path),
        path=path,
    )


def _field_id(value: Any, path: str, entry: Any) -> str:
    if not isinstance(value, str) or not value:
        raise MissingFieldId(
            "Layout leaf has no field id", LayoutContext(path=path, entry=entry)
        )
    return value


def _label(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _control_type(value: Any, path: str, entry: Any) -> str:
    if value is None:
        return DEFAULT_CONTROL_TYPE
    if not isinstance(value, str):
        raise UnsupportedControlType(repr(value), LayoutContext(path=path, entry=entry))
    return value


def _choices(raw: Any, path: str) -> list[ChoiceSpec]:
    if raw is None:
        return []
    if not _is_array(raw):
        raise InvalidLayout(
            "choices must be a list", LayoutContext(path=f"{path}.choices", entry=raw)
        )
    choices = []
    for index, item in enumerate(raw):
        try:
            choices.append(ChoiceSpec.model_validate(item))
        except ValidationError as e:
            raise InvalidLayout(
                f"Invalid choice: {e.errors()[0]['msg']}",
                LayoutContext(path=f"{path}.choices[{index}]", entry=item),
            ) from e
    return choices
