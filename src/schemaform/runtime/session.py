"""
Form session: the lifecycle around one remote form.

A session obtains a form config (given inline or downloaded from
``<url>/form/``), compiles its layout into a ``FormModel``, optionally
prefills it from ``GET <url>``, and on submission flattens the form value,
sends it with the configured method and feeds any field errors in the
response back into the form.

Usage:
    async with httpx.AsyncClient() as client:
        session = FormSession(
            "https://api.example.com/users/7/",
            transport=FormTransport(client),
            on_submit=handle_saved,
        )
        await session.initialize()
        session.form.get("email").set_value("new@example.com")
        await session.submitted("save")
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

import httpx

from ..core.actions import normalize_actions
from ..core.errors import SubmissionRejected
from ..core.form_model import FormModel, build_form
from ..core.ir import ActionDescriptor
from .config import FormConfig
from .transport import FormTransport

logger = logging.getLogger(__name__)


@dataclass
class SubmitEvent:
    """Emitted after a successful submission (or a local one with no url)."""

    data: dict[str, Any]
    response: Any = None


@dataclass
class CancelEvent:
    """Emitted when a cancel action is used; nothing is sent."""

    data: dict[str, Any]


class FormSession:
    """
    Drives one form against one resource url.

    The form can be recompiled (new config) or given fresh errors while a
    submission is still in flight; whatever form is current when the
    response arrives receives its errors.
    """

    def __init__(
        self,
        url: str | None = None,
        *,
        transport: FormTransport | None = None,
        config: FormConfig | None = None,
        form_title: str | None = None,
        extra_form_data: Mapping[str, Any] | httpx.QueryParams | None = None,
        initial_data_transformation: Callable[[Any], Any] | None = None,
        on_submit: Callable[[SubmitEvent], Any] | None = None,
        on_cancel: Callable[[CancelEvent], Any] | None = None,
    ):
        self.url = url
        self.transport = transport
        self.config = config
        self.form_title = form_title
        self.extra_form_data = extra_form_data
        self.initial_data_transformation = initial_data_transformation
        self.on_submit = on_submit
        self.on_cancel = on_cancel

        self.form: FormModel | None = None
        self.actions: list[ActionDescriptor] = []
        self.initial_data: Any = None
        self.errors: dict[str, Any] | None = None
        self.loading = False

    def _require_transport(self) -> FormTransport:
        if self.transport is None:
            raise RuntimeError("FormSession needs a transport to talk to the server")
        return self.transport

    async def initialize(self) -> None:
        """Apply the inline config or download one, then load initial data."""
        if self.config is not None and self.config.layout:
            self.apply_config(self.config)
        elif self.url:
            self.loading = True
            try:
                config = await self._require_transport().fetch_form(
                    self.url, params=self._extra_params()
                )
            finally:
                self.loading = False
            self.apply_config(config)
        else:
            logger.debug("Nothing to initialize: no layout and no url")
            return

        if self.config is not None and self.config.has_initial_data:
            await self.load_initial_data()

    def apply_config(self, config: FormConfig) -> None:
        """Take a new config: normalize actions and recompile the layout."""
        self.config = config
        if not self.form_title:
            self.form_title = config.form_title
        self.actions = normalize_actions(config.actions)
        self.form = build_form(config.layout)
        self.form.mark_all_touched()
        self.form.push_initial_data(self.initial_data)

    async def load_initial_data(self) -> None:
        if not self.url:
            return
        self.loading = True
        try:
            response = await self._require_transport().fetch_initial_data(self.url)
        finally:
            self.loading = False
        if self.initial_data_transformation is not None:
            response = self.initial_data_transformation(response)
        self.set_initial_data(response)

    def set_initial_data(self, data: Any) -> None:
        self.initial_data = data
        if self.form is not None:
            self.form.push_initial_data(data)

    def set_errors(self, errors: Mapping[str, Any] | None) -> list[str]:
        """Deliver (or clear, with ``None``) server errors to the current form."""
        self.errors = dict(errors) if errors else None
        if self.form is None:
            return list(errors or ())
        return self.form.set_external_errors(errors)

    async def submitted(self, button_id: Any = None, is_cancel: bool = False) -> dict[str, Any]:
        """
        Handle an action button.

        The flattened form value gets ``{button_id: True}`` when a button
        id is given. Cancel actions emit a ``CancelEvent`` and send nothing.

        Returns:
            The submission record
        """
        data = self.form.flatten() if self.form is not None else {}
        if button_id:
            data[button_id] = True

        if is_cancel:
            if self.on_cancel is not None:
                self.on_cancel(CancelEvent(data=data))
            return data

        await self.submit(data)
        return data

    async def run_action(self, action: ActionDescriptor) -> dict[str, Any]:
        return await self.submitted(action.id, action.is_cancel)

    async def submit(self, data: dict[str, Any]) -> None:
        if not self.url:
            self._emit_submit(SubmitEvent(data=data))
            return

        payload = {**self._extra_params(), **data}
        method = self.config.method if self.config is not None else None
        try:
            response = await self._require_transport().submit(self.url, method, payload)
        except SubmissionRejected as e:
            logger.info("Submission to %s rejected: %s", self.url, ", ".join(e.errors))
            self.set_errors(e.errors)
            raise

        self.set_errors(None)
        logger.info("Saved")
        self._emit_submit(SubmitEvent(data=data, response=response))

    def _emit_submit(self, event: SubmitEvent) -> None:
        if self.on_submit is not None:
            self.on_submit(event)

    def _extra_params(self) -> dict[str, Any]:
        extra = self.extra_form_data
        if extra is None:
            return {}
        if isinstance(extra, httpx.QueryParams):
            return {key: extra.get(key) for key in extra.keys()}
        return dict(extra)
