"""Shared pytest fixtures for schemaform tests."""

from __future__ import annotations

from typing import Any

import pytest


@pytest.fixture
def flat_layout() -> list[Any]:
    """Layout with no fieldsets."""
    return [
        ["first_name", "First name"],
        ["email", "E-mail", "string"],
        {
            "id": "role",
            "label": "Role",
            "type": "choice",
            "choices": [
                {"display_name": "Admin", "value": "admin"},
                {"display_name": "User", "value": "user"},
            ],
        },
    ]


@pytest.fixture
def nested_layout() -> list[Any]:
    """Layout with a fieldset holding a nested fieldset."""
    return [
        ["email", "E-mail"],
        [
            "Address",
            ["street", "Street"],
            ["Location", ["city", "City"], ["zip", "ZIP"]],
        ],
        {
            "id": "newsletter",
            "label": "Newsletter",
            "type": "radio",
            "choices": [
                {"display_name": "Yes", "value": True},
                {"display_name": "No", "value": False},
            ],
        },
    ]


@pytest.fixture
def form_config(nested_layout: list[Any]) -> dict[str, Any]:
    """Form config as served by ``<url>/form/``."""
    return {
        "form_title": "Profile",
        "layout": nested_layout,
        "actions": [["save", "Save"], {"id": "cancel", "label": "Cancel", "cancel": True}],
        "method": "patch",
        "has_initial_data": True,
    }
