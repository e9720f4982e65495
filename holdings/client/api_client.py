"""HTTP client for the holdings REST API."""

import asyncio
import logging
import os
from typing import Any, Dict, List, Optional

import httpx

logger = logging.getLogger(__name__)

# Retry configuration for transient failures (connection errors, timeouts,
# and 5xx on reads). Mutations are never retried after reaching the server.
MAX_RETRIES = 3
RETRY_BASE_DELAY = 1.0  # seconds; exponential: 1s, 2s, 4s

# level -> (route, parent query parameter)
LEVEL_ROUTES: Dict[str, tuple] = {
    "shareholder": ("shareholders", None),
    "company": ("companies", "shareholder_id"),
    "project": ("projects", "company_id"),
    "table": ("tables", "project_id"),
    "view": ("views", "table_id"),
}

VIEW_ALREADY_SELECTED = "VIEW_ALREADY_SELECTED"


class ApiError(Exception):
    """Non-2xx response from the holdings API."""

    def __init__(self, status_code: int, error_code: Optional[str], message: str):
        super().__init__(f"{status_code} {error_code or 'ERROR'}: {message}")
        self.status_code = status_code
        self.error_code = error_code
        self.message = message


class ViewAlreadySelected(ApiError):
    """The view is already in the selected collection (409)."""


def _raise_for_error(resp: httpx.Response) -> None:
    if resp.is_success:
        return
    try:
        body = resp.json()
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}
    error_code = body.get("error")
    message = body.get("message") or body.get("detail") or resp.reason_phrase
    if not isinstance(message, str):
        message = str(message)
    if error_code == VIEW_ALREADY_SELECTED:
        raise ViewAlreadySelected(resp.status_code, error_code, message)
    raise ApiError(resp.status_code, error_code, message)


class HoldingsClient:
    """Async client wrapping the holdings backend REST API.

    Configuration via arguments or environment variables:
        HOLDINGS_API_URL     - Backend base URL (default: http://localhost:8000)
        HOLDINGS_API_TIMEOUT - Request timeout in seconds (default: 30)

    ``transport`` lets tests route requests straight into an ASGI app.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url or os.environ.get("HOLDINGS_API_URL", "http://localhost:8000")
        self.timeout = timeout if timeout is not None else float(os.environ.get("HOLDINGS_API_TIMEOUT", "30"))
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "HoldingsClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def _request_with_retry(
        self,
        method: str,
        path: str,
        **kwargs: Any,
    ) -> httpx.Response:
        """Execute an HTTP request with retry on transient failures.

        Connection errors and timeouts are retried for every method; 5xx
        responses only for GET. Other errors raise ``ApiError`` immediately.
        """
        client = await self._get_client()
        last_exc: Optional[Exception] = None

        for attempt in range(MAX_RETRIES):
            try:
                resp = await client.request(method, path, **kwargs)
                if resp.status_code < 500 or method != "GET":
                    _raise_for_error(resp)
                    return resp
                last_exc = ApiError(resp.status_code, None, f"Server error {resp.status_code}")
            except (httpx.ConnectError, httpx.TimeoutException) as exc:
                last_exc = exc

            if attempt < MAX_RETRIES - 1:
                delay = RETRY_BASE_DELAY * (2 ** attempt)
                logger.warning(
                    "Request %s %s failed (attempt %d/%d), retrying in %.1fs: %s",
                    method, path, attempt + 1, MAX_RETRIES, delay, last_exc,
                )
                await asyncio.sleep(delay)

        raise last_exc  # type: ignore[misc]

    # -- Hierarchy records ---------------------------------------------

    async def list_items(self, level: str, parent_id: Optional[str] = None) -> List[Dict[str, Any]]:
        """Folder tree of one level. Maps to GET /api/<route>?<parent_field>=<parent_id>."""
        route, parent_field = LEVEL_ROUTES[level]
        params: Dict[str, str] = {}
        if parent_field and parent_id:
            params[parent_field] = parent_id
        resp = await self._request_with_retry("GET", f"/api/{route}", params=params)
        return resp.json()

    async def create_item(self, level: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        route, _ = LEVEL_ROUTES[level]
        resp = await self._request_with_retry("POST", f"/api/{route}", json=payload)
        return resp.json()

    async def update_item(self, level: str, item_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        route, _ = LEVEL_ROUTES[level]
        resp = await self._request_with_retry("PUT", f"/api/{route}/{item_id}", json=payload)
        return resp.json()

    async def delete_item(self, level: str, item_id: str) -> None:
        route, _ = LEVEL_ROUTES[level]
        await self._request_with_retry("DELETE", f"/api/{route}/{item_id}")

    # -- Selected views ------------------------------------------------

    async def list_selected(self) -> List[Dict[str, Any]]:
        resp = await self._request_with_retry("GET", "/api/selected")
        return resp.json()

    async def select_view(self, view_id: str, folder_id: Optional[str] = None) -> Dict[str, Any]:
        """Add a view to the selected collection. Raises ``ViewAlreadySelected`` on 409."""
        resp = await self._request_with_retry(
            "POST", "/api/selected", json={"view_id": view_id, "folder_id": folder_id},
        )
        return resp.json()

    async def unselect_view(self, selected_id: str) -> None:
        await self._request_with_retry("DELETE", f"/api/selected/{selected_id}")

    async def check_selected(self, view_id: str) -> Dict[str, Any]:
        resp = await self._request_with_retry("GET", f"/api/selected/check/{view_id}")
        return resp.json()

    async def get_view_location(self, view_id: str) -> Optional[Dict[str, Any]]:
        """Ancestry of a view, or None if it cannot be resolved (logged)."""
        try:
            resp = await self._request_with_retry("GET", f"/api/views/{view_id}/location")
            return resp.json()
        except (ApiError, httpx.HTTPError) as exc:
            logger.warning("View location lookup failed for %s: %s", view_id, exc)
            return None

    # -- Folders -------------------------------------------------------

    async def list_folders(self, folder_type: str, owner_id: Optional[str] = None) -> List[Dict[str, Any]]:
        params = {"type": folder_type}
        if owner_id:
            params["owner_id"] = owner_id
        resp = await self._request_with_retry("GET", "/api/folders", params=params)
        return resp.json()

    async def create_folder(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        resp = await self._request_with_retry("POST", "/api/folders", json=payload)
        return resp.json()

    async def update_folder(self, folder_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        resp = await self._request_with_retry("PUT", f"/api/folders/{folder_id}", json=payload)
        return resp.json()

    async def delete_folder(self, folder_id: str) -> None:
        await self._request_with_retry("DELETE", f"/api/folders/{folder_id}")

    # -- Move / reorder ------------------------------------------------

    async def move_item(self, kind: str, item_id: str, folder_id: Optional[str]) -> None:
        await self._request_with_retry("PUT", f"/api/move/{kind}/{item_id}", json={"folder_id": folder_id})

    async def reorder_items(self, kind: str, items: List[Dict[str, Any]]) -> None:
        await self._request_with_retry("PUT", "/api/reorder", json={"type": kind, "items": items})

    # -- Settings ------------------------------------------------------

    async def fetch_settings(self) -> Dict[str, Any]:
        resp = await self._request_with_retry("GET", "/api/settings")
        return resp.json()

    async def save_settings(self, values: Dict[str, Any]) -> None:
        await self._request_with_retry("PUT", "/api/settings", json=values)

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
