"""HTTP gateway to the classifier service."""

import logging
from typing import Any, Callable

import requests

from cardio_risk.errors import NetworkError, ServiceError

logger = logging.getLogger(__name__)

TokenProvider = Callable[[], str | None]

UNREACHABLE_HINT = (
    "Network error: Unable to reach the server. "
    "This may be a CORS issue or the server is not responding."
)


class RequestGateway:
    """Performs single JSON exchanges with the service and normalizes failures.

    Each call is one attempt: no retries, no backoff. A timeout is applied
    only when configured.

    Parameters
    ----------
    base_url : str
        Service origin, e.g. ``https://host``.
    token_provider : callable
        Returns the bearer token to send, or None for anonymous calls.
    session : requests.Session or None
        Session used for the exchanges; a new one is created if None.
    timeout : float or None
        Per-request timeout in seconds.
    """

    def __init__(
        self,
        base_url: str,
        token_provider: TokenProvider = lambda: None,
        session: requests.Session | None = None,
        timeout: float | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.token_provider = token_provider
        self._owns_session = session is None
        self.session = session or requests.Session()
        self.timeout = timeout

    def close(self) -> None:
        """Close the HTTP session if this gateway created it."""
        if self._owns_session:
            self.session.close()

    def __enter__(self) -> "RequestGateway":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _headers(self) -> dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        token = self.token_provider()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    @staticmethod
    def _service_error(response: requests.Response) -> ServiceError:
        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        message = body.get("message") or body.get("detail") or "Request failed"
        if not isinstance(message, str):
            message = str(message)
        code = body.get("code") or "UNKNOWN_ERROR"
        if not isinstance(code, str):
            code = str(code)
        return ServiceError(message=message, code=code, status_code=response.status_code)

    def send(self, path: str, method: str = "GET", body: Any = None) -> Any:
        """Send one request and return the decoded JSON body.

        Parameters
        ----------
        path : str
            Endpoint path appended to the base URL.
        method : str
            HTTP method.
        body : any
            JSON-serializable payload, or None for no body.

        Returns
        -------
        any
            Decoded JSON response.

        Raises
        ------
        NetworkError
            If no response was received.
        ServiceError
            If the service answered with a non-success status or a non-JSON body.
        """
        url = f"{self.base_url}{path}"
        logger.debug("%s %s", method, url)

        try:
            response = self.session.request(
                method,
                url,
                json=body,
                headers=self._headers(),
                timeout=self.timeout,
            )
        except requests.Timeout as e:
            logger.error("Request to %s timed out: %s", url, e)
            raise NetworkError(f"Network error: Request to {url} timed out.") from e
        except requests.ConnectionError as e:
            logger.error("Could not reach %s: %s", url, e)
            raise NetworkError(UNREACHABLE_HINT) from e
        except requests.RequestException as e:
            logger.error("Request to %s failed: %s", url, e)
            raise NetworkError(f"Network error: {e}") from e

        if not response.ok:
            error = self._service_error(response)
            logger.error("Service error from %s: %s", url, error)
            raise error

        try:
            data = response.json()
        except ValueError as e:
            raise ServiceError(
                message="Service returned a non-JSON response",
                code="INVALID_RESPONSE",
                status_code=response.status_code,
            ) from e

        logger.debug("Response from %s: %s", url, data)
        return data

    def post(self, path: str, body: Any) -> Any:
        return self.send(path, method="POST", body=body)
