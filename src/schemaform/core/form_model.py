"""
Live form state built from a compiled control tree.

``FormModel`` is the mutable counterpart of a compiled tree: it holds the
current value, dirty/touched flags and validation errors of every leaf,
and owns the ``ExternalErrorStore`` its string fields validate against.

Usage:
    form = build_form([["email", "E-mail"], ["Address", ["street"], ["city"]]])
    form.push_initial_data({"email": "a@example.com", "city": "Brno"})
    form.value       # {"email": ..., "generated_0": {"street": None, "city": "Brno"}}
    form.flatten()   # {"email": ..., "street": None, "city": "Brno"}
    form.set_external_errors({"email": ["Already taken"]})
    form.get("email").error_message  # "Already taken"
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from typing import Any

from .compiler import compile_layout
from .errors import InvalidLayout
from .external_errors import VALIDATOR_FACTORIES, ExternalErrorStore, ValidatorFn
from .flatten import SubmissionRecord, flatten
from .ir import ControlNode, Group, LeafControl, StringField

logger = logging.getLogger(__name__)


class FormControl:
    """State of one leaf control."""

    def __init__(self, node: LeafControl, validators: list[ValidatorFn] | None = None):
        self.node = node
        self.value: Any = None
        self.dirty = False
        self.touched = False
        self.errors: dict[str, Any] | None = None
        self._validators = validators or []

    @property
    def id(self) -> str:
        return self.node.id

    @property
    def valid(self) -> bool:
        return not self.errors

    @property
    def error_message(self) -> str | None:
        """First error rendered through the field's message template."""
        if not self.errors:
            return None
        name, details = next(iter(self.errors.items()))
        reported = details.get("value") if isinstance(details, Mapping) else details
        templates = self.node.error_messages if isinstance(self.node, StringField) else {}
        template = templates.get(name)
        if template is None:
            return str(reported)
        return template.replace("{{" + name + "}}", str(reported))

    def set_value(self, value: Any) -> None:
        self.value = value
        self.update_validity()

    def update_validity(self) -> None:
        errors: dict[str, Any] = {}
        for validator in self._validators:
            result = validator(self)
            if result:
                errors.update(result)
        self.errors = errors or None

    def mark_as_dirty(self) -> None:
        self.dirty = True

    def mark_as_touched(self) -> None:
        self.touched = True

    def __repr__(self) -> str:
        return f"FormControl(id={self.id!r}, value={self.value!r}, errors={self.errors!r})"


class FormGroupState:
    """State of a group: ordered child states keyed by control id."""

    def __init__(self, node: Group, children: dict[str, FormControl | FormGroupState]):
        self.node = node
        self.children = children

    @property
    def id(self) -> str:
        return self.node.id

    @property
    def value(self) -> dict[str, Any]:
        return _value_of(self.children)

    @property
    def valid(self) -> bool:
        return all(child.valid for child in self.children.values())


def _value_of(states: Mapping[str, FormControl | FormGroupState]) -> dict[str, Any]:
    return {control_id: state.value for control_id, state in states.items()}


class FormModel:
    """
    Mutable form built from one compiled tree.

    A new layout means a new ``FormModel``; the old one (and its pending
    errors) is simply dropped.
    """

    def __init__(self, controls: list[ControlNode]):
        self.controls = controls
        self.external_errors = ExternalErrorStore()
        self._leaves: dict[str, FormControl] = {}
        self.root: dict[str, FormControl | FormGroupState] = {
            node.id: self._build_state(node) for node in controls
        }

    def _build_state(self, node: ControlNode) -> FormControl | FormGroupState:
        if isinstance(node, Group):
            return FormGroupState(
                node, {child.id: self._build_state(child) for child in node.controls}
            )
        control = FormControl(node, self._bind_validators(node))
        control.update_validity()
        self._leaves[node.id] = control
        return control

    def _bind_validators(self, node: LeafControl) -> list[ValidatorFn]:
        if not isinstance(node, StringField):
            return []
        validators = []
        for name in node.validators:
            factory = VALIDATOR_FACTORIES.get(name)
            if factory is None:
                raise InvalidLayout(f"Unknown validator {name!r} on field {node.id!r}")
            validators.append(factory(node.id, self.external_errors))
        return validators

    @property
    def value(self) -> dict[str, Any]:
        """Tree-shaped value, groups nested under their synthetic ids."""
        return _value_of(self.root)

    @property
    def valid(self) -> bool:
        return all(state.valid for state in self.root.values())

    @property
    def leaves(self) -> Iterator[FormControl]:
        return iter(self._leaves.values())

    def get(self, field_id: str) -> FormControl | None:
        return self._leaves.get(field_id)

    def flatten(self) -> SubmissionRecord:
        return flatten(self.value, self.controls)

    def push_initial_data(self, record: Mapping[str, Any] | None) -> None:
        """
        Assign initial values to leaves.

        Keys are leaf ids at any depth; keys with no matching leaf are
        ignored.
        """
        if not record:
            return
        for field_id, value in record.items():
            control = self._leaves.get(field_id)
            if control is None:
                logger.debug("Initial data key %s has no matching field", field_id)
                continue
            control.set_value(value)

    def mark_all_touched(self) -> None:
        for control in self._leaves.values():
            control.mark_as_touched()

    def set_external_errors(self, errors: Mapping[str, Any] | None) -> list[str]:
        """
        Deliver server errors.

        A non-empty map is merged into the store and every affected field
        is marked dirty and touched and re-validated immediately, which
        consumes its entry. An empty or ``None`` map clears the store.

        Returns:
            Ids from ``errors`` that matched no field. They stay pending.
        """
        store = self.external_errors
        with store.lock:
            if not errors:
                store.clear()
                return []

            store.merge(errors)
            unmatched = []
            for field_id in errors:
                control = self._leaves.get(field_id)
                if control is None:
                    unmatched.append(field_id)
                    continue
                control.mark_as_dirty()
                control.mark_as_touched()
                control.set_value(control.value)

        logger.info("Delivered external errors for %d field(s)", len(errors) - len(unmatched))
        if unmatched:
            logger.warning("External errors with no matching field: %s", ", ".join(unmatched))
        return unmatched


def build_form(specs: Any) -> FormModel:
    """Compile a raw layout and wrap it in a fresh ``FormModel``."""
    return FormModel(compile_layout(specs))
