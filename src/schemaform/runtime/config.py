"""
Configuration models.

``FormConfig`` is what the remote service returns from ``<url>/form/``.
``ClientSettings`` is local: the ``[client]`` table of ``schemaform.toml``.

Example schemaform.toml:

    [client]
    base_url = "https://api.example.com/"
    timeout = 5

    [client.headers]
    Accept-Language = "en"
"""

from __future__ import annotations

import os
import tomllib
from enum import Enum
from pathlib import Path
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..core.errors import SettingsError

SETTINGS_FILE = "schemaform.toml"
ENV_BASE_URL = "SCHEMAFORM_BASE_URL"


class SubmitMethod(str, Enum):
    """HTTP methods a form may submit with."""

    POST = "post"
    PATCH = "patch"


class FormConfig(BaseModel):
    """
    Form description served by the remote endpoint.

    Attributes:
        form_title: Title shown above the form
        layout: Raw layout, compiled by ``compile_layout``
        actions: Raw action list, normalized by ``normalize_actions``
        method: ``post`` or ``patch``; checked when submitting
        has_initial_data: Whether ``GET <url>`` returns values to prefill
    """

    model_config = ConfigDict(extra="allow")

    form_title: str | None = None
    layout: list[Any] = Field(default_factory=list)
    actions: list[Any] | None = None
    method: str | None = None
    has_initial_data: bool = False


class ClientSettings(BaseModel):
    """HTTP client settings."""

    model_config = ConfigDict(extra="forbid")

    base_url: str | None = None
    timeout: float = Field(default=10.0, gt=0)
    headers: dict[str, str] = Field(default_factory=dict)
    cookies: dict[str, str] = Field(default_factory=dict)

    def create_client(self, **kwargs: Any) -> httpx.AsyncClient:
        """Create an ``httpx.AsyncClient`` carrying these settings."""
        options: dict[str, Any] = {
            "timeout": self.timeout,
            "headers": self.headers,
            "cookies": self.cookies,
        }
        if self.base_url:
            options["base_url"] = self.base_url
        options.update(kwargs)
        return httpx.AsyncClient(**options)


def load_settings(path: Path | None = None) -> ClientSettings:
    """
    Load client settings.

    Args:
        path: Settings file; defaults to ``schemaform.toml`` in the
            current directory. A missing file yields defaults.

    Returns:
        Settings, with ``SCHEMAFORM_BASE_URL`` overriding ``base_url``

    Raises:
        SettingsError: If the file is not valid TOML or holds invalid values
    """
    settings_path = path or Path(SETTINGS_FILE)
    data: dict[str, Any] = {}

    if settings_path.exists():
        try:
            with open(settings_path, "rb") as f:
                data = tomllib.load(f).get("client", {})
        except tomllib.TOMLDecodeError as e:
            raise SettingsError(f"Invalid TOML in {settings_path}: {e}") from e
        except OSError as e:
            raise SettingsError(f"Cannot read {settings_path}: {e}") from e

    env_base_url = os.environ.get(ENV_BASE_URL)
    if env_base_url:
        data["base_url"] = env_base_url

    try:
        return ClientSettings.model_validate(data)
    except ValidationError as e:
        raise SettingsError(f"Invalid settings in {settings_path}: {e}") from e
