"""HTTP plumbing shared by the content store clients.

Imports run one row at a time, so the client is synchronous; retries and
rate limiting live here rather than in the import engine.
"""

import threading
import time
from typing import Any
from urllib.parse import urljoin

import httpx

from press_import.client.exceptions import (
    APIError,
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NetworkError,
    NotFoundError,
    RateLimitError,
    ServerError,
)
from press_import.utils.logging import (
    get_logger,
    log_api_request,
    sanitize_payload,
    should_log_payloads,
    truncate_payload,
)
from press_import.utils.retry import TRANSIENT_ERRORS, retry_with_backoff

logger = get_logger(__name__)

CONFLICT_CODES = frozenset({"term_exists", "existing_user_login", "existing_user_email"})

STATUS_ERRORS: dict[int, tuple[type[APIError], str]] = {
    401: (AuthenticationError, "Authentication failed"),
    403: (AuthorizationError, "Authorization failed"),
    404: (NotFoundError, "Resource not found"),
}


class BaseAPIClient:
    """Synchronous JSON client for a content store API.

    Requests share one pooled ``httpx.Client``, are spaced out to respect
    ``rate_limit`` and are retried on transient failures. Error responses
    are raised as ``APIError`` subclasses.
    """

    def __init__(
        self,
        base_url: str,
        auth: httpx.Auth | tuple[str, str] | None = None,
        verify_ssl: bool = True,
        timeout: int = 30,
        rate_limit: int = 10,
        retry_attempts: int = 3,
        retry_backoff_min: float = 1,
        retry_backoff_max: float = 30,
        log_payloads: bool = False,
        max_payload_size: int = 10000,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize the client.

        Args:
            base_url: API root every endpoint is resolved against
            auth: httpx auth; a (user, application password) tuple for basic auth
            verify_ssl: Whether to verify SSL certificates
            timeout: Request timeout in seconds
            rate_limit: Maximum requests per second (0 disables spacing)
            retry_attempts: Attempts per request for transient failures
            retry_backoff_min: Minimum wait between attempts in seconds
            retry_backoff_max: Maximum wait between attempts in seconds
            log_payloads: Log sanitized request/response bodies at DEBUG
            max_payload_size: Characters of a body logged before truncation
            transport: httpx transport override, e.g. ``httpx.MockTransport``
        """
        self.base_url = base_url.rstrip("/")
        self.verify_ssl = verify_ssl
        self.log_payloads = log_payloads
        self.max_payload_size = max_payload_size

        self.retry_attempts = retry_attempts
        self.retry_backoff_min = retry_backoff_min
        self.retry_backoff_max = retry_backoff_max

        self.rate_limit = rate_limit
        self._min_request_interval = 1.0 / rate_limit if rate_limit > 0 else 0
        self._last_request_time = 0.0
        self._rate_limit_lock = threading.Lock()

        self.client = httpx.Client(
            headers={"Content-Type": "application/json", "Accept": "application/json"},
            auth=auth,
            timeout=httpx.Timeout(timeout, connect=10.0),
            verify=verify_ssl,
            follow_redirects=True,
            transport=transport,
        )

        logger.info("client_initialized", base_url=self.base_url, rate_limit=rate_limit)

    def _build_url(self, endpoint: str) -> str:
        return urljoin(f"{self.base_url}/", endpoint.lstrip("/"))

    def _rate_limit_wait(self) -> None:
        """Sleep until ``1 / rate_limit`` seconds passed since the last request."""
        if not self._min_request_interval:
            return
        with self._rate_limit_lock:
            elapsed = time.monotonic() - self._last_request_time
            if elapsed < self._min_request_interval:
                time.sleep(self._min_request_interval - elapsed)
            self._last_request_time = time.monotonic()

    def _handle_error_response(self, response: httpx.Response) -> None:
        """Raise the ``APIError`` subclass matching an error response.

        WordPress rejects duplicate term slugs and user logins with a 400 and
        a ``term_exists`` / ``existing_user_login`` code; those are reported
        as ``ConflictError`` like a 409.
        """
        status_code = response.status_code

        try:
            body = response.json()
        except ValueError:
            body = {"message": response.text}
        if not isinstance(body, dict):
            body = {"message": str(body)}

        message = body.get("message") or body.get("detail") or "Unknown error"
        code = str(body.get("code", ""))

        if status_code == 429:
            retry_after = response.headers.get("Retry-After", "")
            raise RateLimitError(
                message="Rate limit exceeded",
                status_code=status_code,
                response=body,
                retry_after=int(retry_after) if retry_after.isdigit() else None,
            )

        if status_code == 409 or code in CONFLICT_CODES:
            error_class, message = ConflictError, f"Resource conflict: {message}"
        elif status_code in STATUS_ERRORS:
            error_class, message = STATUS_ERRORS[status_code]
        elif status_code >= 500:
            error_class, message = ServerError, f"Server error: {message}"
        else:
            error_class, message = APIError, f"API error: {message}"

        raise error_class(message=message, status_code=status_code, response=body)

    def request(
        self,
        method: str,
        endpoint: str,
        params: dict[str, Any] | None = None,
        json_data: dict[str, Any] | None = None,
        retry_on: tuple = TRANSIENT_ERRORS,
    ) -> Any:
        """Make an HTTP request with rate limiting, retries and error handling.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE, etc.)
            endpoint: API endpoint path
            params: Query parameters
            json_data: JSON request body
            retry_on: Exception types that trigger another attempt

        Returns:
            Response JSON data

        Raises:
            NetworkError: For network-related errors
            Various APIError subclasses: For API errors
        """
        send = retry_with_backoff(
            max_attempts=self.retry_attempts,
            min_wait=self.retry_backoff_min,
            max_wait=self.retry_backoff_max,
            retry_on_exceptions=retry_on,
        )(self._send)
        return send(method, endpoint, params=params, json_data=json_data)

    def _send(
        self,
        method: str,
        endpoint: str,
        params: dict[str, Any] | None = None,
        json_data: dict[str, Any] | None = None,
    ) -> Any:
        url = self._build_url(endpoint)

        self._rate_limit_wait()

        if should_log_payloads(logger, self.log_payloads) and json_data is not None:
            logger.debug(
                "api_request_payload",
                method=method,
                url=url,
                payload=truncate_payload(sanitize_payload(json_data), self.max_payload_size),
                payload_size=len(str(json_data)),
            )

        started = time.perf_counter()

        try:
            response = self.client.request(method=method, url=url, params=params, json=json_data)
        except httpx.TimeoutException as e:
            logger.error("timeout_error", method=method, url=url, error=str(e))
            raise NetworkError(f"Request timeout: {str(e)}") from e
        except httpx.TransportError as e:
            logger.error("network_error", method=method, url=url, error=str(e))
            raise NetworkError(f"Network error: {str(e)}") from e

        log_api_request(
            logger,
            method=method,
            url=url,
            status_code=response.status_code,
            duration_ms=(time.perf_counter() - started) * 1000,
        )

        if should_log_payloads(logger, self.log_payloads) and response.text:
            try:
                payload = truncate_payload(sanitize_payload(response.json()), self.max_payload_size)
            except ValueError:
                payload = response.text[: self.max_payload_size]
            logger.debug(
                "api_response_payload",
                method=method,
                url=url,
                status_code=response.status_code,
                payload=payload,
                payload_size=len(response.text),
            )

        if response.status_code >= 400:
            self._handle_error_response(response)

        return response.json() if response.text else {}

    def post(
        self,
        endpoint: str,
        json_data: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Make a POST request.

        Writes are only retried when the server rejected them outright
        (rate limiting); a timed out write may already have been applied.

        Args:
            endpoint: API endpoint path
            json_data: JSON request body
            params: Query parameters

        Returns:
            Response JSON data
        """
        return self.request(
            "POST", endpoint, params=params, json_data=json_data, retry_on=(RateLimitError,)
        )

    def close(self) -> None:
        """Close the underlying connection pool."""
        self.client.close()

    def __enter__(self) -> "BaseAPIClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
