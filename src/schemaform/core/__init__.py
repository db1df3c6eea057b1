"""
schemaform core: layout compiler, form model, flatten and error correlation.
"""

from .actions import normalize_actions
from .compiler import compile_layout, compile_nodes
from .external_errors import ExternalErrorStore, external_validator
from .flatten import flatten
from .form_model import FormControl, FormGroupState, FormModel, build_form
from .normalizer import normalize_layout

__all__ = [
    "ExternalErrorStore",
    "FormControl",
    "FormGroupState",
    "FormModel",
    "build_form",
    "compile_layout",
    "compile_nodes",
    "external_validator",
    "flatten",
    "normalize_actions",
    "normalize_layout",
]
