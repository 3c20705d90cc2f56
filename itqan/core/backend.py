"""HTTP client for the Itqan backend API."""

from __future__ import annotations

from typing import Any

import httpx

from itqan.core.config import Settings, get_settings
from itqan.core.errors import ProfileCompletionError
from itqan.core.logging import get_logger
from itqan.schemas.user import BackendUser, CompleteProfileRequest

logger = get_logger(__name__)

COMPLETE_PROFILE_PATH = "/api/v1/auth/complete-profile/"


class BackendClient:
    def __init__(
        self,
        settings: Settings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self._client = client

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.settings.http_timeout)
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def complete_profile(
        self, access_token: str, payload: CompleteProfileRequest
    ) -> BackendUser:
        """POST the profile-completion form; raises ProfileCompletionError on a non-2xx reply.

        Transport failures (``httpx.HTTPError``) and undecodable success bodies
        (``ValueError``) propagate unchanged.
        """
        url = f"{self.settings.backend_url.rstrip('/')}{COMPLETE_PROFILE_PATH}"
        resp = await self.client.post(
            url,
            json=payload.model_dump(),
            headers={"Authorization": f"Bearer {access_token}"},
        )
        if resp.is_error:
            message = _error_message(resp)
            logger.warning(
                "Profile completion rejected",
                status=resp.status_code,
                auth0_id=payload.auth0_id,
                error=message,
            )
            raise ProfileCompletionError(message, status_code=resp.status_code)
        return BackendUser.model_validate(resp.json())


def _error_message(resp: httpx.Response) -> str:
    try:
        data: Any = resp.json()
    except ValueError:
        return ""
    if isinstance(data, dict):
        for key in ("error", "detail", "message"):
            value = data.get(key)
            if isinstance(value, str) and value:
                return value
    return ""
