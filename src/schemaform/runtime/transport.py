"""
HTTP transport for Django REST Framework form endpoints.

Endpoints, relative to a resource url:
- ``GET <url>/form/``: form config (layout, actions, method, ...)
- ``GET <url>``: initial data
- ``POST|PATCH <url>``: submission; a 4xx JSON object body carries field
  errors
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from ..core.errors import SubmissionRejected, TransportError, UnsupportedMethod
from .config import FormConfig, SubmitMethod

logger = logging.getLogger(__name__)


def form_url(url: str) -> str:
    """``<url>/form/`` with exactly one separating slash."""
    if not url.endswith("/"):
        url += "/"
    return url + "form/"


class FormTransport:
    """
    Thin async client around one ``httpx.AsyncClient``.

    The client is borrowed, not owned: the caller closes it.
    """

    def __init__(self, client: httpx.AsyncClient):
        self.client = client

    async def fetch_form(self, url: str, params: dict[str, Any] | None = None) -> FormConfig:
        target = form_url(url)
        logger.debug("Downloading form config from %s", target)
        response = await self._request("GET", target, params=params)
        self._raise_for_status(response)
        try:
            return FormConfig.model_validate(_json(response))
        except ValidationError as e:
            raise TransportError(f"Invalid form config from {target}: {e}") from e

    async def fetch_initial_data(self, url: str) -> Any:
        logger.debug("Downloading initial data from %s", url)
        response = await self._request("GET", url)
        self._raise_for_status(response)
        return _json(response)

    async def submit(self, url: str, method: str | None, payload: dict[str, Any]) -> Any:
        """
        Send a submission record.

        Raises:
            UnsupportedMethod: If ``method`` is not post or patch
            SubmissionRejected: On a 4xx response with a JSON object body
            TransportError: On any other failure
        """
        try:
            submit_method = SubmitMethod(method)
        except ValueError as e:
            raise UnsupportedMethod(f"Unimplemented method {method}") from e

        logger.info("Submitting %d field(s) to %s via %s", len(payload), url, submit_method.value)
        response = await self._request(submit_method.value.upper(), url, json=payload)

        if 400 <= response.status_code < 500:
            body = _json_or_none(response)
            if isinstance(body, dict):
                raise SubmissionRejected(body, status_code=response.status_code)
        self._raise_for_status(response)
        return _json_or_none(response)

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            return await self.client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %s", method, url, e)
            raise TransportError(f"{method} {url} failed: {e}") from e

    @staticmethod
    def _raise_for_status(response: httpx.Response) -> None:
        if response.is_error:
            raise TransportError(
                f"{response.request.method} {response.request.url} returned "
                f"{response.status_code}",
                status_code=response.status_code,
            )


def _json(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError as e:
        raise TransportError(
            f"Response from {response.request.url} is not JSON",
            status_code=response.status_code,
        ) from e


def _json_or_none(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return None
