"""
Error types for schemaform layout compilation, flattening and transport.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any


class SchemaFormError(Exception):
    """Base exception for all schemaform errors."""

    def __init__(self, message: str, context: LayoutContext | None = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}\n{self.message}"
        return self.message


class CompileError(SchemaFormError):
    """
    Raised when a layout cannot be compiled into a control tree.

    A compile error aborts the whole pass; no partial tree is produced.
    """

    pass


class UnsupportedControlType(CompileError):
    """Raised when a leaf declares a type with no control model."""

    def __init__(self, control_type: str, context: LayoutContext | None = None):
        self.control_type = control_type
        super().__init__(f"No control model for type {control_type!r}", context)


class InvalidLayout(CompileError):
    """
    Raised when a layout entry matches none of the accepted encodings.

    Examples:
    - A bare string or number where an entry is expected
    - ``controls`` that is not a list
    - A choice without ``value``
    """

    pass


class MissingFieldId(CompileError):
    """Raised when a leaf entry has no usable id."""

    pass


class DuplicateFieldId(CompileError):
    """Raised when two leaves in one tree share an id."""

    pass


class StructuralError(SchemaFormError):
    """
    Raised when a submitted value does not match the compiled tree.

    Examples:
    - A ``generated_<n>`` key with no matching group
    - A group key whose value is not a mapping
    """

    pass


class InvalidAction(SchemaFormError):
    """Raised when an action entry cannot be normalized."""

    pass


class SettingsError(SchemaFormError):
    """Raised when the settings file cannot be read or validated."""

    pass


class TransportError(SchemaFormError):
    """Raised when a remote call fails."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class SubmissionRejected(TransportError):
    """
    Raised when the remote service refuses a submission with field errors.

    Attributes:
        errors: Mapping of field id to messages, as returned by the service
    """

    def __init__(self, errors: dict[str, list[str]], status_code: int = 400):
        self.errors = errors
        super().__init__(
            f"Submission rejected with errors for: {', '.join(sorted(errors)) or '(none)'}",
            status_code=status_code,
        )


class UnsupportedMethod(TransportError):
    """Raised when a form config asks for a submit method other than post/patch."""

    pass


@dataclass
class LayoutContext:
    """
    Location of an error inside a layout description.

    Attributes:
        path: Dotted/indexed path to the entry, e.g. ``layout[1][0]``
        entry: The raw entry that failed, shown as a JSON snippet
    """

    path: str
    entry: Any = None

    def format(self) -> str:
        """
        Format layout context as a human-readable string.

        Returns:
            Formatted string like: "layout[1][0]" followed by a snippet
        """
        if self.entry is not None:
            return f"{self.path}\n{self._format_snippet()}"
        return self.path

    def _format_snippet(self) -> str:
        """Render the offending entry as indented JSON."""
        try:
            text = json.dumps(self.entry, ensure_ascii=False, default=repr)
        except (TypeError, ValueError):
            text = repr(self.entry)
        if len(text) > 120:
            text = text[:117] + "..."
        return f"    | {text}"


def make_compile_error(
    error_type: type[CompileError],
    message: str,
    path: str,
    entry: Any = None,
) -> CompileError:
    """
    Helper to create a compile error with layout context.

    Args:
        error_type: CompileError subclass to instantiate
        message: Error description
        path: Layout path of the failing entry
        entry: Raw entry for the snippet

    Returns:
        Error instance with context attached
    """
    return error_type(message, LayoutContext(path=path, entry=entry))
