from __future__ import annotations

from typing import Any, Protocol

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from fieldops.models.devis import Devis
from fieldops.models.facture import Facture
from fieldops.models.mission import Mission

"""
DB Store (capacité injectable).

Rôle (fonctionnel) :
- Expose au générateur de numéros et aux listes paginées les deux seules requêtes dont ils ont besoin :
  - last_reference(kind, prefix) : numéro le plus grand commençant par `prefix` (tri descendant),
  - count(model, *criteria) : nombre de lignes correspondant à un filtre.
- Découple la logique (numérotation, pagination) de la session SQLAlchemy :
  en test, un faux store en mémoire suffit.
"""

# Colonne “référence” par type de document
REFERENCE_COLUMNS = {
    "mission": Mission.num_intervention,
    "devis": Devis.numero,
    "facture": Facture.numero,
}


class DocumentStore(Protocol):
    """Contrat minimal consommé par NumberGenerator et les handlers de liste."""

    async def last_reference(self, kind: str, prefix: str) -> str | None: ...

    async def count(self, model: Any, *criteria: Any) -> int: ...


class SqlDocumentStore:
    """Implémentation SQLAlchemy async du DocumentStore."""

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def last_reference(self, kind: str, prefix: str) -> str | None:
        column = REFERENCE_COLUMNS[str(kind)]
        stmt = (
            select(column)
            .where(column.startswith(prefix, autoescape=True))
            .order_by(column.desc())
            .limit(1)
        )
        return (await self._db.execute(stmt)).scalar_one_or_none()

    async def count(self, model: Any, *criteria: Any) -> int:
        stmt = select(func.count()).select_from(model)
        for c in criteria:
            stmt = stmt.where(c)
        return (await self._db.execute(stmt)).scalar_one()
