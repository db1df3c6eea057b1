"""
Layout to control tree compiler.

Compiles a normalized layout into ``ControlNode`` objects. Every group
produced in one pass receives a ``generated_<n>`` id from a single counter
that starts at 0 and is shared across the whole (recursive) pass. Groups
take their id before their children are compiled.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from .errors import DuplicateFieldId, LayoutContext, UnsupportedControlType, make_compile_error
from .ir import (
    SYNTHETIC_ID_PREFIX,
    ChoiceField,
    ChoiceOption,
    ChoiceSpec,
    ControlNode,
    Group,
    GroupLayout,
    LayoutNode,
    LeafControl,
    LeafLayout,
    RadioField,
    StringField,
)
from .normalizer import normalize_layout

logger = logging.getLogger(__name__)


class SyntheticIdAllocator:
    """Hands out ``generated_<n>`` ids for one compilation pass."""

    def __init__(self) -> None:
        self._next = 0

    def allocate(self) -> str:
        group_id = f"{SYNTHETIC_ID_PREFIX}{self._next}"
        self._next += 1
        return group_id

    @property
    def allocated(self) -> int:
        return self._next


def _options(choices: list[ChoiceSpec]) -> list[ChoiceOption]:
    return [ChoiceOption(label=choice.display_name, value=choice.value) for choice in choices]


def _build_string(leaf: LeafLayout) -> StringField:
    return StringField(id=leaf.id, label=leaf.label)


def _build_radio(leaf: LeafLayout) -> RadioField:
    return RadioField(id=leaf.id, label=leaf.label, options=_options(leaf.choices))


def _build_choice(leaf: LeafLayout) -> ChoiceField:
    return ChoiceField(id=leaf.id, label=leaf.label, options=_options(leaf.choices))


LEAF_BUILDERS: dict[str, Callable[[LeafLayout], LeafControl]] = {
    "string": _build_string,
    "radio": _build_radio,
    "choice": _build_choice,
}


class LayoutCompiler:
    """
    Single-use compiler for one layout.

    Holds the per-pass state: the synthetic id counter and the ids seen so
    far. Create a new instance (or call ``compile_layout``) to recompile.
    """

    def __init__(self) -> None:
        self.ids = SyntheticIdAllocator()
        self._seen: dict[str, str] = {}

    def compile(self, nodes: list[LayoutNode]) -> list[ControlNode]:
        controls = [self._compile_node(node) for node in nodes]
        logger.debug(
            "Compiled layout: %d groups, %d leaves",
            self.ids.allocated,
            len(self._seen) - self.ids.allocated,
        )
        return controls

    def _compile_node(self, node: LayoutNode) -> ControlNode:
        if isinstance(node, GroupLayout):
            return self._compile_group(node)
        return self._compile_leaf(node)

    def _compile_group(self, node: GroupLayout) -> Group:
        group_id = self.ids.allocate()
        self._claim(group_id, node.path)
        return Group(
            id=group_id,
            label=node.legend,
            legend=node.legend,
            synthetic=True,
            controls=[self._compile_node(child) for child in node.controls],
        )

    def _compile_leaf(self, node: LeafLayout) -> LeafControl:
        builder = LEAF_BUILDERS.get(node.type)
        if builder is None:
            raise UnsupportedControlType(
                node.type, LayoutContext(path=node.path, entry=node.model_dump(exclude={"path"}))
            )
        self._claim(node.id, node.path)
        return builder(node)

    def _claim(self, control_id: str, path: str) -> None:
        previous = self._seen.get(control_id)
        if previous is not None:
            raise make_compile_error(
                DuplicateFieldId,
                f"Control id {control_id!r} already used at {previous}",
                path,
            )
        self._seen[control_id] = path


def compile_nodes(nodes: list[LayoutNode]) -> list[ControlNode]:
    """Compile already-normalized layout nodes with a fresh id counter."""
    return LayoutCompiler().compile(nodes)


def compile_layout(specs: Any) -> list[ControlNode]:
    """
    Compile a raw layout into a control tree.

    Each call is an independent pass: synthetic ids restart at
    ``generated_0``.

    Args:
        specs: Raw JSON-shaped layout list

    Returns:
        Ordered list of compiled controls

    Raises:
        UnsupportedControlType: If a leaf type has no control model
        MissingFieldId: If a leaf has no usable id
        DuplicateFieldId: If two controls share an id
        InvalidLayout: If an entry has no recognizable shape
    """
    return compile_nodes(normalize_layout(specs))
