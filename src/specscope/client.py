"""Send prepared requests and capture the response.

:class:`RequestClient` wraps :class:`httpx.Client`. Every HTTP status,
including 4xx and 5xx, is a normal :class:`~specscope.models.ApiResponse`
to be shown to the user; only failures to get a response at all raise
:class:`~specscope.exceptions.RequestError`. There is no retry.
"""

from __future__ import annotations

import json
import time
from datetime import datetime
from typing import Any, Optional

import httpx

from specscope.exceptions import RequestError
from specscope.models import ApiResponse, PreparedRequest, RequestConfig
from specscope.output import get_output


class RequestClient:
    """Synchronous client for requests built from a spec.

    Must be used as a context manager so the underlying transport is
    opened and closed.

    Args:
        config: Timeout and SSL settings.
        transport: Optional httpx transport, e.g. :class:`httpx.MockTransport`.

    Example::

        with RequestClient(RequestConfig()) as client:
            response = client.send(prepared)
    """

    def __init__(
        self,
        config: Optional[RequestConfig] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._config = config or RequestConfig()
        self._transport = transport
        self._client: Optional[httpx.Client] = None

    def __enter__(self) -> RequestClient:
        self._client = httpx.Client(
            timeout=self._config.timeout,
            verify=self._config.verify_ssl,
            follow_redirects=True,
            transport=self._transport,
        )
        return self

    def __exit__(self, *args: object) -> None:
        if self._client:
            self._client.close()
            self._client = None

    def send(self, prepared: PreparedRequest) -> ApiResponse:
        """Send *prepared* and return the captured response.

        Raises:
            RequestError: On network errors, timeouts and invalid URLs.
            RuntimeError: If used outside a ``with`` block.
        """
        if self._client is None:
            raise RuntimeError("RequestClient must be used as a context manager")

        output = get_output()
        output.debug(f"{prepared.method.value} {prepared.url}")

        started = time.perf_counter()
        try:
            response = self._client.request(
                prepared.method.value,
                prepared.url,
                params=prepared.params or None,
                headers=prepared.headers,
                content=prepared.body.encode("utf-8") if prepared.body is not None else None,
            )
        except httpx.InvalidURL as exc:
            raise RequestError(f"Invalid request URL {prepared.url!r}: {exc}") from exc
        except httpx.TimeoutException as exc:
            raise RequestError(
                f"Request to {prepared.url} timed out after {self._config.timeout}s"
            ) from exc
        except httpx.HTTPError as exc:
            raise RequestError(f"Request to {prepared.url} failed: {exc}") from exc
        elapsed_ms = (time.perf_counter() - started) * 1000

        output.debug(f"Response: {response.status_code} in {elapsed_ms:.0f}ms")
        return ApiResponse(
            status=response.status_code,
            status_text=response.reason_phrase,
            headers=dict(response.headers),
            body=_parse_body(response),
            raw_body=response.text,
            time=round(elapsed_ms, 2),
            size=len(response.content),
            timestamp=datetime.now(),
        )


def _parse_body(response: httpx.Response) -> Any:
    """Decoded JSON for JSON responses, otherwise the text (``None`` when empty)."""
    text = response.text
    if not text:
        return None
    if "json" in response.headers.get("content-type", ""):
        try:
            return json.loads(text)
        except json.JSONDecodeError:
            return text
    return text
