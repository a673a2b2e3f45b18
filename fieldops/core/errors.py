from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import HTTPException

"""
Core Errors.

Rôle (fonctionnel) :
- Standardise le format des erreurs renvoyées par l’API (enveloppe homogène avec success=false).
- Fournit une exception applicative (AppHTTPException) pour lever des erreurs métier de façon cohérente.
- Facilite le debug via des champs stables : code, status, request_id, timestamp, details.

Convention de réponse (exemple) :
{
  "success": false,
  "error": {
    "code": "NOT_FOUND",
    "message": "Mission non trouvée",
    "status": 404,
    "request_id": "...",
    "timestamp": "...",
    "details": {...}
  }
}
"""


def now_iso() -> str:
    """Timestamp ISO-8601 en UTC (utilisé dans toutes les erreurs)."""
    return datetime.now(timezone.utc).isoformat()


def error_payload(
    *,
    code: str,
    message: str,
    status: int,
    request_id: str,
    details: Optional[Any] = None,
) -> Dict[str, Any]:
    """Construit un payload d’erreur homogène pour l’API."""
    payload: Dict[str, Any] = {
        "success": False,
        "error": {
            "code": code,
            "message": message,
            "status": status,
            "request_id": request_id,
            "timestamp": now_iso(),
        },
    }
    if details is not None:
        payload["error"]["details"] = details
    return payload


class AppHTTPException(HTTPException):
    """
    Exception applicative standardisée.

    Usage :
    - Lever une erreur “métier” avec un code stable et un message explicite.
    - Laisser la couche API produire une réponse cohérente.

    Exemple :
        raise AppHTTPException(404, "NOT_FOUND", "Client non trouvé")
    """

    def __init__(self, status_code: int, code: str, message: str, details: Any = None):
        super().__init__(status_code=status_code, detail={"code": code, "message": message, "details": details})


def not_found(message: str) -> AppHTTPException:
    """Raccourci 404 (ressource absente)."""
    return AppHTTPException(404, "NOT_FOUND", message)


def business_rule(message: str, details: Any = None) -> AppHTTPException:
    """Raccourci 400 (règle métier non respectée : suppression interdite, statut invalide…)."""
    return AppHTTPException(400, "BUSINESS_RULE", message, details=details)
