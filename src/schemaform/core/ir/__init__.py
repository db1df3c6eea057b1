"""
schemaform intermediate representation types.

Normalized layouts, compiled control trees and action descriptors.
"""

from .actions import DEFAULT_ACTION_COLOR, ActionDescriptor
from .controls import (
    EXTERNAL_ERROR,
    SYNTHETIC_ID_PREFIX,
    ChoiceField,
    ChoiceOption,
    ControlNode,
    Group,
    LeafControl,
    RadioField,
    StringField,
    find_control,
    iter_groups,
    iter_leaves,
    leaf_ids,
)
from .layout import (
    DEFAULT_CONTROL_TYPE,
    FIELDSET_TYPE,
    ChoiceSpec,
    GroupLayout,
    LayoutNode,
    LeafLayout,
)

__all__ = [
    # Layout
    "ChoiceSpec",
    "DEFAULT_CONTROL_TYPE",
    "FIELDSET_TYPE",
    "GroupLayout",
    "LayoutNode",
    "LeafLayout",
    # Controls
    "ChoiceField",
    "ChoiceOption",
    "ControlNode",
    "EXTERNAL_ERROR",
    "Group",
    "LeafControl",
    "RadioField",
    "StringField",
    "SYNTHETIC_ID_PREFIX",
    "find_control",
    "iter_groups",
    "iter_leaves",
    "leaf_ids",
    # Actions
    "ActionDescriptor",
    "DEFAULT_ACTION_COLOR",
]
