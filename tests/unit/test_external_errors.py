"""Tests for server error correlation."""

import threading

from schemaform.core.external_errors import ExternalErrorStore, external_validator
from schemaform.core.form_model import build_form


class TestExternalErrorStore:
    def test_take_returns_first_message_and_removes_id(self):
        store = ExternalErrorStore()
        store.merge({"email": ["Already taken", "Too long"]})

        assert store.take("email") == "Already taken"
        assert "email" not in store
        assert store.take("email") is None

    def test_merge_overwrites_stale_entries(self):
        store = ExternalErrorStore()
        store.merge({"email": ["Old"], "name": ["Required"]})
        store.merge({"email": ["New"]})

        assert store.pending() == {"email": ["New"], "name": ["Required"]}

    def test_bare_string_is_one_message(self):
        store = ExternalErrorStore()
        store.merge({"detail": "Not allowed"})

        assert store.take("detail") == "Not allowed"

    def test_empty_message_list_removes_entry(self):
        store = ExternalErrorStore()
        store.merge({"email": ["Old"]})
        store.merge({"email": []})

        assert len(store) == 0

    def test_clear(self):
        store = ExternalErrorStore()
        store.merge({"a": ["x"], "b": ["y"]})
        store.clear()

        assert store.pending() == {}

    def test_validator_consumes_once(self):
        store = ExternalErrorStore()
        validate = external_validator("email", store)
        store.merge({"email": ["Already taken"]})

        assert validate(None) == {"external_error": {"value": "Already taken"}}
        assert validate(None) is None

    def test_concurrent_takes_deliver_once(self):
        store = ExternalErrorStore()
        store.merge({"email": ["Already taken"]})
        results = []

        def worker():
            results.append(store.take("email"))

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert results.count("Already taken") == 1


class TestErrorDelivery:
    """Tests for ``FormModel.set_external_errors``."""

    def test_delivery_shows_message_once(self):
        form = build_form([["email", "E-mail"]])
        email = form.get("email")

        form.set_external_errors({"email": ["Already taken"]})

        assert email.errors == {"external_error": {"value": "Already taken"}}
        assert email.error_message == "Already taken"
        assert "email" not in form.external_errors

        email.update_validity()

        assert email.errors is None
        assert email.error_message is None

    def test_delivery_marks_dirty_and_touched(self):
        form = build_form([["email"]])

        form.set_external_errors({"email": ["Bad"]})

        assert form.get("email").dirty
        assert form.get("email").touched
        assert not form.valid

    def test_delivery_keeps_value(self):
        form = build_form([["email"]])
        form.push_initial_data({"email": "ada@example.com"})

        form.set_external_errors({"email": ["Bad"]})

        assert form.get("email").value == "ada@example.com"

    def test_redelivery_shows_message_again(self):
        form = build_form([["email"]])
        form.set_external_errors({"email": ["Already taken"]})
        form.get("email").set_value("other@example.com")
        assert form.get("email").errors is None

        form.set_external_errors({"email": ["Still taken"]})

        assert form.get("email").error_message == "Still taken"

    def test_nested_field_is_reached(self, nested_layout):
        form = build_form(nested_layout)

        form.set_external_errors({"city": ["Unknown city"]})

        assert form.get("city").error_message == "Unknown city"
        assert not form.root["generated_0"].valid

    def test_unmatched_ids_stay_pending(self, caplog):
        form = build_form([["email"]])

        unmatched = form.set_external_errors({"non_field_errors": ["Nope"], "email": ["Bad"]})

        assert unmatched == ["non_field_errors"]
        assert form.external_errors.pending() == {"non_field_errors": ["Nope"]}
        assert "non_field_errors" in caplog.text

    def test_radio_field_has_no_external_validator(self, nested_layout):
        form = build_form(nested_layout)

        form.set_external_errors({"newsletter": ["Pick one"]})

        assert form.get("newsletter").errors is None
        assert "newsletter" in form.external_errors

    def test_empty_map_clears_store(self):
        form = build_form([["email"], ["name"]])
        form.set_external_errors({"unknown": ["x"]})

        form.set_external_errors({})

        assert len(form.external_errors) == 0

    def test_none_clears_store(self):
        form = build_form([["email"]])
        form.set_external_errors({"unknown": ["x"]})

        assert form.set_external_errors(None) == []
        assert len(form.external_errors) == 0

    def test_recompiled_form_has_its_own_store(self):
        layout = [["email"]]
        old = build_form(layout)
        new = build_form(layout)

        old.set_external_errors({"unknown": ["x"]})

        assert len(new.external_errors) == 0
