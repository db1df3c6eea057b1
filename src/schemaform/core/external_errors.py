"""
Server-side error correlation.

After a rejected submission the remote service returns ``{field_id:
[message, ...]}``. The map is merged into an ``ExternalErrorStore`` owned
by one form model. Each string field is built with a validator bound to
that store; when the field validates it takes the first pending message
for its id and removes the id, so the message is shown once per delivery.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any

from .ir import EXTERNAL_ERROR

if TYPE_CHECKING:
    from .form_model import FormControl

logger = logging.getLogger(__name__)

ValidationErrors = dict[str, Any]
ValidatorFn = Callable[["FormControl"], ValidationErrors | None]


class ExternalErrorStore:
    """
    Pending server errors keyed by field id.

    All reads and writes go through ``lock`` (re-entrant), so a delivery
    that re-validates controls can consume entries while still holding it.
    """

    def __init__(self) -> None:
        self._pending: dict[str, list[str]] = {}
        self.lock = threading.RLock()

    def __contains__(self, field_id: object) -> bool:
        with self.lock:
            return field_id in self._pending

    def __len__(self) -> int:
        with self.lock:
            return len(self._pending)

    def merge(self, errors: Mapping[str, Any]) -> None:
        """Add entries, replacing stale ones for the same id."""
        with self.lock:
            for field_id, messages in errors.items():
                normalized = _messages(messages)
                if normalized:
                    self._pending[field_id] = normalized
                else:
                    self._pending.pop(field_id, None)

    def clear(self) -> None:
        with self.lock:
            self._pending.clear()

    def take(self, field_id: str) -> str | None:
        """Remove the entry for ``field_id`` and return its first message."""
        with self.lock:
            messages = self._pending.pop(field_id, None)
        if not messages:
            return None
        logger.debug("Consumed external error for %s", field_id)
        return messages[0]

    def pending(self) -> dict[str, list[str]]:
        """Snapshot of the store."""
        with self.lock:
            return {field_id: list(messages) for field_id, messages in self._pending.items()}


def _messages(raw: Any) -> list[str]:
    # DRF sends lists; a bare string ("detail") is tolerated
    if raw is None:
        return []
    if isinstance(raw, str):
        return [raw]
    if isinstance(raw, list | tuple):
        return [str(message) for message in raw]
    return [str(raw)]


def external_validator(field_id: str, store: ExternalErrorStore) -> ValidatorFn:
    """
    Build the validator that reports a pending server error for one field.

    Returns ``{"external_error": {"value": message}}`` the first time the
    field validates after a delivery, ``None`` otherwise.
    """

    def validate(control: FormControl) -> ValidationErrors | None:
        message = store.take(field_id)
        if message is None:
            return None
        return {EXTERNAL_ERROR: {"value": message}}

    return validate


VALIDATOR_FACTORIES: dict[str, Callable[[str, ExternalErrorStore], ValidatorFn]] = {
    EXTERNAL_ERROR: external_validator,
}
