"""
schemaform - forms compiled from declarative layouts served by a remote API.

Compiles a layout description into a typed control tree, flattens edited
form values back into flat submission records, and routes server-side
field errors to the right control exactly once.
"""

from __future__ import annotations

from ._version import get_version
from .core import ir
from .core.actions import normalize_actions
from .core.compiler import compile_layout
from .core.errors import (
    CompileError,
    DuplicateFieldId,
    InvalidAction,
    InvalidLayout,
    MissingFieldId,
    SchemaFormError,
    StructuralError,
    SubmissionRejected,
    TransportError,
    UnsupportedControlType,
)
from .core.flatten import flatten
from .core.form_model import FormModel, build_form

__version__ = get_version()

__all__ = [
    "__version__",
    "ir",
    "build_form",
    "compile_layout",
    "flatten",
    "normalize_actions",
    "FormModel",
    "SchemaFormError",
    "CompileError",
    "UnsupportedControlType",
    "InvalidLayout",
    "MissingFieldId",
    "DuplicateFieldId",
    "StructuralError",
    "InvalidAction",
    "TransportError",
    "SubmissionRejected",
]
