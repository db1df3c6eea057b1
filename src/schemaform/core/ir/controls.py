"""
Compiled control tree types.

A compiled tree is an ordered list of ``ControlNode``. Leaves carry the
field id that appears in submission records; groups carry a synthetic id
that exists only inside the tree-shaped value and is removed by flatten.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field

EXTERNAL_ERROR = "external_error"
SYNTHETIC_ID_PREFIX = "generated_"


class ChoiceOption(BaseModel):
    """Option of a single-select control."""

    model_config = ConfigDict(frozen=True)

    label: str
    value: Any


class StringField(BaseModel):
    """
    Free-text input.

    Attributes:
        id: Field id, used as the submission key
        label: Placeholder text
        validators: Names of validators bound when the form model is built
        error_messages: Template per validator name; ``{{name}}`` is replaced
            with the validator's reported value
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["string"] = "string"
    id: str
    label: str = ""
    validators: list[str] = Field(default_factory=lambda: [EXTERNAL_ERROR])
    error_messages: dict[str, str] = Field(
        default_factory=lambda: {EXTERNAL_ERROR: "{{external_error}}"}
    )


class RadioField(BaseModel):
    """Single-select rendered as a radio group."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["radio"] = "radio"
    id: str
    label: str = ""
    options: list[ChoiceOption] = Field(default_factory=list)


class ChoiceField(BaseModel):
    """Single-select rendered as a drop-down. Same data shape as RadioField."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["choice"] = "choice"
    id: str
    label: str = ""
    options: list[ChoiceOption] = Field(default_factory=list)


class Group(BaseModel):
    """
    Fieldset of child controls.

    Attributes:
        id: ``generated_<n>`` for groups produced by the compiler
        label: Same as legend
        legend: Heading shown above the children
        synthetic: True when the id exists only in the tree and must be
            hoisted away on flatten
        controls: Ordered children
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["group"] = "group"
    id: str
    label: str = ""
    legend: str = ""
    synthetic: bool = True
    controls: list[ControlNode] = Field(default_factory=list)


LeafControl = StringField | RadioField | ChoiceField

ControlNode = Annotated[
    StringField | RadioField | ChoiceField | Group, Field(discriminator="kind")
]


Group.model_rebuild()


def iter_leaves(controls: list[ControlNode]) -> Iterator[LeafControl]:
    """Yield every leaf in depth-first order."""
    for node in controls:
        if isinstance(node, Group):
            yield from iter_leaves(node.controls)
        else:
            yield node


def iter_groups(controls: list[ControlNode]) -> Iterator[Group]:
    """Yield every group in pre-order."""
    for node in controls:
        if isinstance(node, Group):
            yield node
            yield from iter_groups(node.controls)


def leaf_ids(controls: list[ControlNode]) -> list[str]:
    return [leaf.id for leaf in iter_leaves(controls)]


def find_control(controls: list[ControlNode], control_id: str) -> ControlNode | None:
    """Find a node by id at any depth."""
    for node in controls:
        if node.id == control_id:
            return node
        if isinstance(node, Group):
            found = find_control(node.controls, control_id)
            if found is not None:
                return found
    return None
