"""Tests for action normalization."""

import pytest

from schemaform.core.actions import normalize_actions
from schemaform.core.errors import InvalidAction
from schemaform.core.ir import ActionDescriptor


class TestNormalizeActions:
    def test_pair(self):
        (action,) = normalize_actions([["save", "Save & Continue"]])

        assert action == ActionDescriptor(
            id="save", label="Save & Continue", color="primary", cancel=None
        )

    def test_pair_without_label_uses_id(self):
        (action,) = normalize_actions([["save"]])

        assert action.label == "save"

    def test_bare_value(self):
        (action,) = normalize_actions(["delete"])

        assert action.model_dump() == {
            "id": "delete",
            "label": "delete",
            "color": "primary",
            "cancel": None,
        }

    def test_object(self):
        (action,) = normalize_actions([{"id": "cancel", "label": "Cancel", "cancel": True}])

        assert action == ActionDescriptor(id="cancel", label="Cancel", color="primary", cancel=True)
        assert action.is_cancel

    def test_object_color(self):
        (action,) = normalize_actions([{"id": "drop", "label": "Drop", "color": "warn"}])

        assert action.color == "warn"
        assert action.cancel is None

    def test_object_empty_color_falls_back(self):
        (action,) = normalize_actions([{"id": "x", "color": ""}])

        assert action.color == "primary"

    def test_bare_and_pair_never_carry_cancel(self):
        """Only object entries read a cancel flag; others stay None."""
        actions = normalize_actions(["close", ["back", "Back"]])

        assert [a.cancel for a in actions] == [None, None]
        assert not any(a.is_cancel for a in actions)

    def test_order_preserved(self):
        actions = normalize_actions(["a", ["b"], {"id": "c"}])

        assert [a.id for a in actions] == ["a", "b", "c"]

    def test_numeric_bare_value(self):
        (action,) = normalize_actions([3])

        assert (action.id, action.label) == (3, 3)

    @pytest.mark.parametrize("actions", [None, []])
    def test_empty(self, actions):
        assert normalize_actions(actions) == []


class TestInvalidActions:
    @pytest.mark.parametrize("entry", [None, [], [None, "Label"], {"label": "No id"}])
    def test_invalid(self, entry):
        with pytest.raises(InvalidAction):
            normalize_actions(["ok", entry])
