from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

import httpx

from fieldops.core.pagination import PaginationMeta
from fieldops.core.settings import settings

"""
Client HTTP (httpx async).

Rôle (fonctionnel) :
- Consomme l’API fieldops comme le faisait la couche “services” du front :
  une méthode par verbe HTTP, réponse déjà dépliée en {success, message, data, meta}.
- Toute réponse en échec (success=false ou statut HTTP >= 400) lève ApiError avec le code,
  le message et le request_id renvoyés par l’API.

Notes :
- Les paramètres de requête vides / nuls / faux sont omis (query()).
- Le header X-Actor (optionnel) est transmis à chaque requête : c’est lui qui trace les validations.
"""

log = logging.getLogger("fieldops.client")


@dataclass
class ApiResponse:
    success: bool
    message: str
    data: Any = None
    meta: Optional[PaginationMeta] = None


class ApiError(Exception):
    """Erreur renvoyée par l’API (enveloppe success=false) ou réponse illisible."""

    def __init__(
        self,
        status: int,
        code: str,
        message: str,
        details: Any = None,
        request_id: Optional[str] = None,
    ):
        super().__init__(f"{status} {code}: {message}")
        self.status = status
        self.code = code
        self.message = message
        self.details = details
        self.request_id = request_id


def query(**params: Any) -> Dict[str, str]:
    """Paramètres de requête sans les valeurs vides (None, 0, "", False)."""
    return {key: str(value) for key, value in params.items() if value}


def parse_envelope(response: httpx.Response) -> ApiResponse:
    try:
        body = response.json()
    except ValueError:
        raise ApiError(response.status_code, "INVALID_RESPONSE", response.text[:200] or "Réponse vide")

    if not isinstance(body, dict):
        raise ApiError(response.status_code, "INVALID_RESPONSE", "Enveloppe de réponse inattendue")

    if response.status_code >= 400 or body.get("success") is False:
        error = body.get("error") or {}
        raise ApiError(
            status=int(error.get("status", response.status_code)),
            code=str(error.get("code", "HTTP_ERROR")),
            message=str(error.get("message", "Erreur HTTP")),
            details=error.get("details"),
            request_id=error.get("request_id") or response.headers.get("X-Request-Id"),
        )

    meta = body.get("meta")
    return ApiResponse(
        success=bool(body.get("success", True)),
        message=str(body.get("message", "")),
        data=body.get("data"),
        meta=PaginationMeta.model_validate(meta) if meta else None,
    )


class ApiClient:
    """
    Client async de l’API.

    Usage :
        async with ApiClient("http://localhost:8000", actor="dg@fieldops") as api:
            res = await api.get("/api/missions", params=query(page=1, limit=10))
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        timeout: Optional[float] = None,
        actor: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        headers = {"Accept": "application/json"}
        if actor:
            headers["X-Actor"] = actor

        self._client = httpx.AsyncClient(
            base_url=base_url or settings.API_BASE_URL,
            timeout=timeout or settings.API_TIMEOUT_S,
            headers=headers,
            transport=transport,
        )

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def request(
        self,
        method: str,
        url: str,
        *,
        params: Optional[Mapping[str, str]] = None,
        json: Any = None,
    ) -> ApiResponse:
        response = await self._client.request(method, url, params=params or None, json=json)
        if response.status_code >= 400:
            log.warning(
                "api error",
                extra={"method": method, "path": url, "status_code": response.status_code},
            )
        return parse_envelope(response)

    async def get(self, url: str, params: Optional[Mapping[str, str]] = None) -> ApiResponse:
        return await self.request("GET", url, params=params)

    async def post(self, url: str, data: Any = None) -> ApiResponse:
        return await self.request("POST", url, json=data)

    async def put(self, url: str, data: Any = None) -> ApiResponse:
        return await self.request("PUT", url, json=data)

    async def patch(self, url: str, data: Any = None) -> ApiResponse:
        return await self.request("PATCH", url, json=data)

    async def delete(self, url: str) -> ApiResponse:
        return await self.request("DELETE", url)
