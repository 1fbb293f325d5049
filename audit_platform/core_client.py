"""HTTP client for a remote consensus core (``python -m core``)."""

from __future__ import annotations

import json
import logging
import socket
import time
from typing import Any
from urllib import error, request

from contracts.v1.schemas import ConsolidateRequest, ConsolidateResponse

from .config import ConsolidationSettings

logger = logging.getLogger(__name__)


class CoreClientError(Exception):
    """Base exception for Core client failures."""


class CoreClientHTTPError(CoreClientError):
    """Raised for non-success HTTP responses from Core."""

    def __init__(self, status_code: int, detail: str):
        super().__init__(f"Core API error {status_code}: {detail}")
        self.status_code = status_code
        self.detail = detail


class CoreClientConflictError(CoreClientHTTPError):
    """The remote core refused the batch because of a repeated ``(id, source)`` pair."""


class CoreClient:
    """Blocking adapter for the core's v1 HTTP API.

    Server errors (5xx) and connection failures are retried with linear backoff;
    anything else surfaces on the first attempt.
    """

    def __init__(
        self,
        *,
        base_url: str,
        timeout_seconds: float = 30.0,
        retry_attempts: int = 2,
        retry_backoff_seconds: float = 0.25,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.retry_attempts = max(1, retry_attempts)
        self.retry_backoff_seconds = max(0.0, retry_backoff_seconds)

    @classmethod
    def from_settings(cls, settings: ConsolidationSettings) -> "CoreClient | None":
        """Build a client when settings name a core URL, else None (run in-process)."""
        if not settings.core_url:
            return None
        return cls(base_url=settings.core_url)

    def health(self) -> dict[str, Any]:
        return self._call("GET", "/health")

    def consolidate(self, req: ConsolidateRequest) -> ConsolidateResponse:
        """``POST /v1/consolidate``; the reply is validated against the v1 contract."""
        data = self._call("POST", "/v1/consolidate", req.model_dump(mode="json"))
        return ConsolidateResponse.model_validate(data)

    def _call(self, method: str, path: str, payload: dict[str, Any] | None = None) -> dict[str, Any]:
        url = self.base_url + path
        body = None if payload is None else json.dumps(payload).encode("utf-8")

        attempt = 0
        while True:
            attempt += 1
            last_try = attempt >= self.retry_attempts
            outgoing = request.Request(
                url,
                data=body,
                headers={"Content-Type": "application/json", "Accept": "application/json"},
                method=method,
            )
            try:
                with request.urlopen(outgoing, timeout=self.timeout_seconds) as resp:
                    return self._decode(resp.read())
            except error.HTTPError as e:
                if e.code >= 500 and not last_try:
                    logger.warning("Core answered %d to %s %s; retrying.", e.code, method, path)
                    self._backoff(attempt)
                    continue
                raise self._http_error(e) from e
            except (error.URLError, TimeoutError, socket.timeout) as e:
                if not last_try:
                    logger.warning("Core unreachable on %s %s (%s); retrying.", method, path, e)
                    self._backoff(attempt)
                    continue
                raise CoreClientError(f"Core API request failed after retries: {e}") from e

    @staticmethod
    def _decode(raw: bytes) -> dict[str, Any]:
        text = raw.decode("utf-8")
        if not text:
            return {}
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise CoreClientError(f"Core API returned invalid JSON: {e}") from e

    @staticmethod
    def _http_error(exc: error.HTTPError) -> CoreClientHTTPError:
        detail = str(exc.reason or "HTTP error")
        try:
            body = exc.read().decode("utf-8") if exc.fp is not None else ""
        except OSError:
            body = ""
        if body:
            try:
                payload = json.loads(body)
            except json.JSONDecodeError:
                detail = body
            else:
                detail = str(payload["detail"]) if isinstance(payload, dict) and "detail" in payload else body
        error_cls = CoreClientConflictError if exc.code == 409 else CoreClientHTTPError
        return error_cls(exc.code, detail)

    def _backoff(self, attempt: int) -> None:
        if self.retry_backoff_seconds > 0:
            time.sleep(self.retry_backoff_seconds * attempt)
