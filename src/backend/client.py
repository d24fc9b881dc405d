from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx
from loguru import logger

from src.config import Settings


class BackendError(Exception):
    """Raised for any failed call to the entities API.

    ``status_code`` is None when the request never got a response.
    """

    def __init__(self, status_code: Optional[int], message: str):
        super().__init__(f"[{status_code}] {message}" if status_code else message)
        self.status_code = status_code
        self.message = message


def _encode(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class BackendClient:
    """Generic entity list/filter/get/update calls against the hosted app backend."""

    def __init__(self, settings: Settings, client: Optional[httpx.Client] = None):
        self.base_url = settings.backend_entities_url
        self._owns_client = client is None
        self.client = client or httpx.Client(
            timeout=settings.backend_timeout,
            headers={
                "api_key": settings.backend_api_key,
                "Content-Type": "application/json",
            },
        )

    def __enter__(self) -> "BackendClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self.client.close()

    def _request(
        self,
        method: str,
        entity: str,
        entity_id: Optional[str] = None,
        params: Optional[Dict[str, str]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> Any:
        url = f"{self.base_url}/{entity}"
        if entity_id is not None:
            url = f"{url}/{entity_id}"

        try:
            response = self.client.request(method, url, params=params, json=json)
        except httpx.RequestError as e:
            logger.error(f"Backend {method} {entity} failed: {e}")
            raise BackendError(None, f"{method} {entity} failed: {e}") from e

        if response.status_code < 200 or response.status_code >= 300:
            logger.error(
                f"Backend {method} {entity} error: {response.status_code} - {response.text}"
            )
            raise BackendError(response.status_code, response.text)

        if not response.content:
            return None
        return response.json()

    def list(self, entity: str) -> List[Dict[str, Any]]:
        return self._request("GET", entity) or []

    def filter(self, entity: str, **predicates: Any) -> List[Dict[str, Any]]:
        """List entities whose fields equal every given predicate."""
        params = {key: _encode(value) for key, value in predicates.items()}
        return self._request("GET", entity, params=params) or []

    def get(self, entity: str, entity_id: str) -> Dict[str, Any]:
        return self._request("GET", entity, entity_id)

    def update(self, entity: str, entity_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        """Overwrite only the given fields of one entity."""
        return self._request("PUT", entity, entity_id, json=fields)
