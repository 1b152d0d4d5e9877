from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional

import httpx

from .errors import (
    TypesenseConflictError,
    TypesenseConnectionError,
    TypesenseNotFoundError,
    TypesenseRetryableError,
    TypesenseStatusError,
)
from .retry import RetryPolicy, Sleep, build_retrying

if TYPE_CHECKING:
    from question_search.config import Settings


logger = logging.getLogger(__name__)

API_KEY_HEADER = "X-TYPESENSE-API-KEY"


class TypesenseClient:
    """Async Typesense client; every call runs through the retry policy.

    Only the three endpoints the gateway needs are wrapped: collection
    lookup, collection creation and document search.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        *,
        policy: Optional[RetryPolicy] = None,
        timeout_s: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Optional[Sleep] = None,
    ) -> None:
        self.policy = policy or RetryPolicy()
        self._sleep = sleep
        self._http = httpx.AsyncClient(
            base_url=base_url,
            headers={API_KEY_HEADER: api_key},
            timeout=timeout_s,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> "TypesenseClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def retrieve_collection(self, name: str) -> Dict[str, Any]:
        return await self._request("GET", f"/collections/{name}")

    async def collection_exists(self, name: str) -> bool:
        try:
            await self.retrieve_collection(name)
        except TypesenseNotFoundError:
            return False
        return True

    async def create_collection(self, schema: Mapping[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", "/collections", json=dict(schema))

    async def search(
        self, collection: str, params: Mapping[str, str]
    ) -> List[Dict[str, Any]]:
        """Run a search and return the hit documents in ranked order."""
        body = await self._request(
            "GET", f"/collections/{collection}/documents/search", params=dict(params)
        )
        hits = body.get("hits") or []
        return [hit.get("document") or {} for hit in hits]

    async def _request(self, method: str, path: str, **kwargs: Any) -> Dict[str, Any]:
        async for attempt in build_retrying(self.policy, sleep=self._sleep):
            with attempt:
                response = await self._send(method, path, **kwargs)
        return response.json() if response.content else {}

    async def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._http.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            raise TypesenseConnectionError(
                f"{method} {path} failed: {str(e) or e.__class__.__name__}"
            ) from e
        if response.is_success:
            return response
        raise self._error_for(response)

    def _error_for(self, response: httpx.Response) -> TypesenseStatusError:
        status = response.status_code
        message = _error_message(response)
        if status in self.policy.retry_status:
            return TypesenseRetryableError(status, message)
        if status == 404:
            return TypesenseNotFoundError(status, message)
        if status == 409:
            return TypesenseConflictError(status, message)
        return TypesenseStatusError(status, message)


def _error_message(response: httpx.Response) -> str:
    # Typesense error bodies look like {"message": "..."}
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return response.text or f"HTTP {response.status_code}"


def get_typesense_client(
    settings: "Settings",
    policy: Optional[RetryPolicy] = None,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> TypesenseClient:
    """Create a Typesense client from application settings."""
    logger.debug("Creating Typesense client for %s", settings.base_url)
    return TypesenseClient(
        settings.base_url,
        settings.typesense_api_key,
        policy=policy,
        timeout_s=settings.request_timeout_s,
        transport=transport,
    )
