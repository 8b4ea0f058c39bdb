"""REST client for the notification endpoints."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from app.domain.exceptions import NotificationClientError

logger = logging.getLogger(__name__)


class NotificationApiClient:
    """Thin wrapper over ``httpx.Client`` that speaks the notification API."""

    def __init__(self, http_client: httpx.Client, token: str, *, prefix: str = "/notifications") -> None:
        self._http = http_client
        self._token = token
        self._prefix = prefix.rstrip("/")

    def list(self, page: int = 1, limit: int = 20, unread_only: bool = False) -> dict[str, Any]:
        return self._request(
            "GET",
            "/",
            params={
                "page": page,
                "limit": limit,
                "unreadOnly": str(unread_only).lower(),
            },
        )

    def mark_as_read(self, notification_id: int) -> dict[str, Any]:
        return self._request("PUT", f"/{notification_id}/read")

    def mark_all_as_read(self) -> dict[str, Any]:
        return self._request("PUT", "/read-all")

    def delete(self, notification_id: int) -> dict[str, Any]:
        return self._request("DELETE", f"/{notification_id}")

    def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        headers = {"Authorization": f"Bearer {self._token}"}
        try:
            response = self._http.request(method, self._prefix + path, headers=headers, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status_code = exc.response.status_code
            logger.error("Notification API %s %s failed with status %s", method, path, status_code)
            raise NotificationClientError(_error_detail(exc.response), status_code) from exc
        except httpx.HTTPError as exc:
            logger.error("Notification API %s %s failed: %s", method, path, exc)
            raise NotificationClientError(str(exc)) from exc
        return response.json()


def _error_detail(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(payload, dict):
        return str(payload.get("detail") or payload.get("message") or payload)
    return str(payload)


__all__ = ["NotificationApiClient"]
