from __future__ import annotations

import uuid
from contextvars import ContextVar

"""
Core Request ID.

Rôle (fonctionnel) :
- Porte l’identifiant de requête (X-Request-Id) dans un ContextVar, propre à chaque requête async.
- Utilisé par le logging (champ request_id), les handlers d’erreurs (payload) et les logs
  d’allocation de numéros (corrélation d’un conflit avec la requête qui l’a subi).
"""

REQUEST_ID_HEADER = "X-Request-Id"

# Longueur max acceptée pour un id fourni par le client (au-delà : on en génère un)
_MAX_INCOMING_LEN = 64

_request_id: ContextVar[str | None] = ContextVar("request_id", default=None)


def set_request_id(rid: str | None) -> None:
    _request_id.set(rid)


def get_request_id() -> str | None:
    return _request_id.get()


def ensure_request_id(incoming: str | None = None) -> str:
    """
    Garantit un request_id pour le contexte courant.

    - Un id entrant non vide (et raisonnablement court) est nettoyé et réutilisé.
    - Sinon, un UUID4 est généré.
    """
    rid = (incoming or "").strip()
    if not rid or len(rid) > _MAX_INCOMING_LEN:
        rid = str(uuid.uuid4())
    set_request_id(rid)
    return rid
