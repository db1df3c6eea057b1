"""Tests for the live form model."""

from schemaform.core.form_model import FormModel, build_form
from schemaform.core.ir import ChoiceField, Group, StringField


class TestFormValue:
    def test_value_mirrors_tree(self, nested_layout):
        form = build_form(nested_layout)

        assert form.value == {
            "email": None,
            "generated_0": {"street": None, "generated_1": {"city": None, "zip": None}},
            "newsletter": None,
        }

    def test_flatten_round_trip(self, nested_layout):
        form = build_form(nested_layout)
        form.get("street").set_value("Main")
        form.get("zip").set_value("60200")

        assert form.flatten() == {
            "email": None,
            "street": "Main",
            "city": None,
            "zip": "60200",
            "newsletter": None,
        }

    def test_flat_layout_flatten_is_value(self, flat_layout):
        form = build_form(flat_layout)
        form.get("role").set_value("admin")

        assert form.flatten() == form.value

    def test_fresh_form_is_valid(self, nested_layout):
        form = build_form(nested_layout)

        assert form.valid
        assert all(not control.dirty for control in form.leaves)


class TestInitialData:
    def test_push_reaches_nested_leaves(self, nested_layout):
        form = build_form(nested_layout)

        form.push_initial_data({"email": "a@b.c", "city": "Brno", "newsletter": False})

        assert form.value["generated_0"]["generated_1"]["city"] == "Brno"
        assert form.get("email").value == "a@b.c"
        assert form.get("newsletter").value is False

    def test_unknown_keys_are_ignored(self):
        form = build_form([["email"]])

        form.push_initial_data({"email": "a@b.c", "id": 7, "generated_0": {}})

        assert form.value == {"email": "a@b.c"}

    def test_none_record_is_noop(self):
        form = build_form([["email"]])

        form.push_initial_data(None)

        assert form.value == {"email": None}


class TestFormControl:
    def test_mark_all_touched(self):
        form = build_form([["a"], [["b"]]])

        form.mark_all_touched()

        assert all(control.touched for control in form.leaves)

    def test_error_message_without_template(self):
        form = FormModel([ChoiceField(id="role")])
        control = form.get("role")
        control.errors = {"required": True}

        assert control.error_message == "True"

    def test_model_built_from_explicit_nodes(self):
        form = FormModel(
            [Group(id="generated_0", controls=[StringField(id="a")]), StringField(id="b")]
        )

        assert form.get("a") is not None
        assert form.flatten() == {"a": None, "b": None}


class TestLeafNamedLikeGroup:
    def test_flatten_keeps_leaf(self):
        form = build_form([["generated_7", "Code"], [["a"]]])
        form.push_initial_data({"generated_7": "X", "a": 1})

        assert form.flatten() == {"generated_7": "X", "a": 1}
