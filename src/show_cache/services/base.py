"""Base HTTP client for the origin catalog API."""

from abc import ABC, abstractmethod
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)


class OriginError(Exception):
    """Raised when the origin API is unreachable, answers non-2xx or sends a malformed payload."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class RateLimitError(OriginError):
    """Raised when the origin rate limit is exceeded."""

    def __init__(self, message: str = "Rate limit exceeded", retry_after: int | None = None):
        super().__init__(message, status_code=429)
        self.retry_after = retry_after


class NotFoundError(OriginError):
    """Raised when the origin reports that a resource does not exist."""

    def __init__(self, message: str = "Resource not found"):
        super().__init__(message, status_code=404)


def is_transient(exc: BaseException) -> bool:
    """Whether an origin failure may succeed if the call is repeated."""
    return isinstance(exc, OriginError) and not isinstance(exc, NotFoundError)


class BaseAPIClient(ABC):
    """Abstract base class for origin API clients.

    Provides the HTTP plumbing, status code mapping and payload validation.
    There is deliberately no caching or retry at this level.
    """

    def __init__(self, base_url: str, timeout: float = 30.0) -> None:
        """Initialize the base API client.

        Args:
            base_url: The base URL for the API.
            timeout: Request timeout in seconds.
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client: httpx.AsyncClient | None = None

    @property
    @abstractmethod
    def default_headers(self) -> dict[str, str]:
        """Return default headers for API requests."""
        ...

    @property
    def default_params(self) -> dict[str, Any]:
        """Return query parameters sent with every request."""
        return {}

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers=self.default_headers,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def _request(
        self,
        method: str,
        endpoint: str,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Make an HTTP request to the API.

        Args:
            method: HTTP method (GET, POST, etc.).
            endpoint: API endpoint path.
            params: Query parameters, merged over ``default_params``.

        Returns:
            JSON response as a dictionary.

        Raises:
            NotFoundError: If the resource is not found (404).
            RateLimitError: If rate limit is exceeded (429).
            OriginError: For transport failures and other HTTP errors.
        """
        client = await self._get_client()
        url = endpoint.lstrip("/")

        request_params = dict(self.default_params)
        if params:
            request_params.update(params)

        try:
            response = await client.request(method=method, url=url, params=request_params)
        except httpx.TimeoutException as e:
            raise OriginError(f"Request timed out: {e}") from e
        except httpx.RequestError as e:
            raise OriginError(f"Request failed: {e}") from e

        return self._handle_response(response)

    def _handle_response(self, response: httpx.Response) -> dict[str, Any]:
        """Map the HTTP response to a payload or an origin error."""
        if response.status_code == 404:
            raise NotFoundError()

        if response.status_code == 429:
            retry_after = response.headers.get("Retry-After")
            raise RateLimitError(
                retry_after=int(retry_after) if retry_after and retry_after.isdigit() else None
            )

        if response.status_code >= 400:
            raise OriginError(
                f"Origin API error: {response.text}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise OriginError(f"Invalid JSON response: {e}") from e

        if not isinstance(data, dict):
            raise OriginError("Unexpected JSON payload: expected an object")
        return data

    async def get(self, endpoint: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        """Make a GET request to the API."""
        return await self._request("GET", endpoint, params=params)

    async def get_model(
        self,
        model: type[ModelT],
        endpoint: str,
        params: dict[str, Any] | None = None,
    ) -> ModelT:
        """Make a GET request and validate the payload into ``model``.

        Raises:
            OriginError: If the payload does not match the expected shape.
        """
        data = await self.get(endpoint, params=params)
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise OriginError(f"Malformed payload from {endpoint}: {e}") from e

    async def __aenter__(self) -> "BaseAPIClient":
        """Async context manager entry."""
        await self._get_client()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()
