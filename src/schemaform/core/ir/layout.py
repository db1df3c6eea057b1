"""
Normalized layout types.

Raw layouts arrive in three encodings (positional triples, nested arrays
for fieldsets, explicit objects). The normalizer maps all of them onto
the closed union below before any compilation logic runs.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_CONTROL_TYPE = "string"
FIELDSET_TYPE = "fieldset"


class ChoiceSpec(BaseModel):
    """
    One entry of a leaf's ``choices`` list.

    Attributes:
        display_name: Label shown to the user
        value: Value submitted when selected
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    display_name: str
    value: Any


class LeafLayout(BaseModel):
    """
    A single field.

    ``type`` is kept as the raw string; dispatch to a control model (and
    rejection of unknown types) belongs to the compiler.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["leaf"] = "leaf"
    id: str
    label: str = ""
    type: str = DEFAULT_CONTROL_TYPE
    choices: list[ChoiceSpec] = Field(default_factory=list)
    path: str = Field(default="", description="Location in the raw layout")


class GroupLayout(BaseModel):
    """A fieldset with an optional legend and ordered children."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["group"] = "group"
    legend: str = ""
    controls: list[LayoutNode] = Field(default_factory=list)
    path: str = Field(default="", description="Location in the raw layout")


LayoutNode = Annotated[LeafLayout | GroupLayout, Field(discriminator="kind")]


GroupLayout.model_rebuild()
