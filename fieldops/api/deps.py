from __future__ import annotations

from typing import Any, Iterable, Optional, Sequence

from fastapi import Depends, Query, Request
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from fieldops.core.pagination import Pagination, normalize, parse_int, summarize
from fieldops.db.session import get_db
from fieldops.db.store import SqlDocumentStore
from fieldops.schemas.common import Envelope
from fieldops.services.documents import number_generator
from fieldops.services.numbering import NumberGenerator

"""
Dépendances API.

Rôle (fonctionnel) :
- Centralise les dépendances réutilisables sur les routes :
  - pagination (page/limit permissifs, jamais rejetés),
  - store + générateur de numéros liés à la session de la requête,
  - acteur (header X-Actor) pour tracer les validations.
- Construit l’enveloppe de réponse {success, message, data, meta?}.
"""


def get_pagination(
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
) -> Pagination:
    # Lus en texte : une valeur non numérique retombe sur le défaut au lieu d’un 422
    return normalize(parse_int(page), parse_int(limit))


def get_store(db: AsyncSession = Depends(get_db)) -> SqlDocumentStore:
    return SqlDocumentStore(db)


def get_number_generator(db: AsyncSession = Depends(get_db)) -> NumberGenerator:
    return number_generator(db)


def get_actor(request: Request) -> str:
    return (request.headers.get("X-Actor") or "").strip() or "system"


# Dépendances prêtes à l’emploi
PaginationDep = Depends(get_pagination)
StoreDep = Depends(get_store)
GeneratorDep = Depends(get_number_generator)
ActorDep = Depends(get_actor)


def ok(data: Any, message: str = "Succès") -> Envelope:
    return Envelope(data=data, message=message)


def paginated(
    rows: Iterable[Any],
    schema: type[BaseModel],
    total: int,
    pagination: Pagination,
    message: str,
) -> Envelope:
    items: Sequence[BaseModel] = [schema.model_validate(r) for r in rows]
    return Envelope(
        data=items,
        message=message,
        meta=summarize(total, pagination.page, pagination.limit),
    )
