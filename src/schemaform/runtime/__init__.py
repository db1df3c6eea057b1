"""
schemaform runtime: remote form sessions, HTTP transport and settings.
"""

from .config import ClientSettings, FormConfig, SubmitMethod, load_settings
from .session import CancelEvent, FormSession, SubmitEvent
from .transport import FormTransport, form_url

__all__ = [
    "CancelEvent",
    "ClientSettings",
    "FormConfig",
    "FormSession",
    "FormTransport",
    "SubmitEvent",
    "SubmitMethod",
    "form_url",
    "load_settings",
]
