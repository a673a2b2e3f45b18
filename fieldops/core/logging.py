from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import IO, Any, Optional

from .request_id import get_request_id

"""
Core Logging.

Rôle (fonctionnel) :
- Une ligne JSON par événement, pour l’API comme pour uvicorn.
- Chaque ligne porte le request_id courant : un conflit de numéro (attempt=2, reference=FAC-…)
  se relie ainsi à la requête HTTP qui l’a subi.
- Les extras connus sont recopiés tels quels ; les autres attributs du record sont ignorés.

Notes :
- setup_logging() remplace les handlers du root logger (pas de doublon avec --reload).
- `stream` est injectable : les tests lisent les lignes produites dans un StringIO.
"""

APP_FIELD = "fieldops"

# Extras reconnus (logger.info(..., extra={...})), par famille
HTTP_EXTRAS = ("method", "path", "status_code", "duration_ms", "client_ip")
DOCUMENT_EXTRAS = ("kind", "reference", "attempt")
WORKFLOW_EXTRAS = ("actor", "entity_id", "old_status", "new_status")

STRUCTURED_EXTRAS = HTTP_EXTRAS + DOCUMENT_EXTRAS + WORKFLOW_EXTRAS


class RequestIdFilter(logging.Filter):
    """request_id du contexte courant, '-' hors requête (scripts, démarrage)."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = get_request_id() or "-"
        return True


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "app": APP_FIELD,
            "level": record.levelname,
            "logger": record.name,
            "request_id": getattr(record, "request_id", "-"),
            "msg": record.getMessage(),
        }
        payload.update({key: getattr(record, key) for key in STRUCTURED_EXTRAS if hasattr(record, key)})

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        # default=str : Decimal (montants) et dates passés en extra
        return json.dumps(payload, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", stream: Optional[IO[str]] = None) -> logging.Handler:
    """
    Installe le handler JSON sur le root logger et y rattache uvicorn.

    Retourne le handler installé.
    """
    lvl = level.upper()

    root = logging.getLogger()
    root.setLevel(lvl)
    root.handlers.clear()

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(JsonFormatter())
    handler.addFilter(RequestIdFilter())
    root.addHandler(handler)

    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        server_log = logging.getLogger(name)
        server_log.handlers = [handler]
        server_log.propagate = False
        server_log.setLevel(lvl)

    return handler
