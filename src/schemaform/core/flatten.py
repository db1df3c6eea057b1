"""
Flatten tree-shaped form values into submission records.

A form value mirrors the compiled tree: each group contributes a nested
mapping under its ``generated_<n>`` id. The remote API expects a flat
record keyed by leaf ids only, so synthetic groups are hoisted away.

The walk is driven by the compiled tree, not by the value's keys: only
keys that name a ``Group`` at the current level are descended into.
Everything else (leaf values, arrays, nested mappings under leaves,
keys the caller added) passes through untouched.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Any

from .errors import StructuralError
from .ir import SYNTHETIC_ID_PREFIX, ControlNode, Group

logger = logging.getLogger(__name__)

SYNTHETIC_ID_PATTERN = re.compile(rf"{re.escape(SYNTHETIC_ID_PREFIX)}\d+")

SubmissionRecord = dict[str, Any]


def is_synthetic_id(key: str) -> bool:
    return bool(SYNTHETIC_ID_PATTERN.fullmatch(key))


def flatten(value: Mapping[str, Any], controls: list[ControlNode]) -> SubmissionRecord:
    """
    Flatten a form value against its compiled tree.

    Nested synthetic groups are flattened before being hoisted, so any
    depth of fieldsets-within-fieldsets is undone in one pass. The input
    is not modified.

    Args:
        value: Tree-shaped value, e.g. ``{"generated_0": {"a": 1}}``
        controls: The compiled tree the value was produced from

    Returns:
        Flat record, e.g. ``{"a": 1}``

    Raises:
        StructuralError: If the value and the tree have diverged
    """
    if not isinstance(value, Mapping):
        raise StructuralError(f"Form value must be a mapping, got {type(value).__name__}")
    return _flatten_level(value, controls, "")


def _flatten_level(
    value: Mapping[str, Any], controls: list[ControlNode], path: str
) -> SubmissionRecord:
    groups = {node.id: node for node in controls if isinstance(node, Group)}
    leaves = {node.id for node in controls if not isinstance(node, Group)}
    record: SubmissionRecord = {}

    for key, item in value.items():
        group = groups.get(key)
        if group is None:
            if key not in leaves and isinstance(key, str) and is_synthetic_id(key):
                logger.error("Value has group key %s%s with no matching group", path, key)
                raise StructuralError(
                    f"Key {path}{key!s} looks like a group id but no such group exists here"
                )
            if key in record:
                logger.warning("Value %s%s overwrites a hoisted value", path, key)
            record[key] = item
            continue

        if not isinstance(item, Mapping):
            logger.error("Group %s%s holds %s, expected a mapping", path, key, type(item).__name__)
            raise StructuralError(
                f"Group {path}{key} must hold a mapping, got {type(item).__name__}"
            )

        inner = _flatten_level(item, group.controls, f"{path}{key}.")
        if not group.synthetic:
            record[key] = inner
            continue

        for inner_key, inner_value in inner.items():
            if inner_key in record:
                logger.warning(
                    "Hoisting %s%s.%s overwrites an existing value", path, key, inner_key
                )
            record[inner_key] = inner_value

    return record
