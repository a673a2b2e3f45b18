from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fieldops.api.deps import PaginationDep, StoreDep, ok, paginated
from fieldops.core.errors import business_rule, not_found
from fieldops.core.pagination import Pagination
from fieldops.db.session import get_db
from fieldops.db.store import SqlDocumentStore
from fieldops.models.facture import Facture
from fieldops.schemas.common import Envelope
from fieldops.schemas.factures import (
    UNPAID_STATUTS,
    FactureOut,
    FactureOverdueOut,
    FactureStatut,
    FactureUpdate,
)

"""
API Factures.

Rôle (fonctionnel) :
- Liste paginée (statut, clientId), détail, mise à jour (statut, paiement), suppression.
- Suivi des retards : factures émises/envoyées dont l’échéance est dépassée, avec le nombre de jours de retard.

Notes :
- Les factures ne sont pas créées ici : elles naissent de la conversion d’un devis (POST /api/devis/{id}/facture).
- Une facture payée ne peut pas être supprimée.
"""

router = APIRouter(prefix="/factures", tags=["factures"])
log = logging.getLogger("fieldops.factures")


async def _get_facture(db: AsyncSession, facture_id: int) -> Facture:
    facture = await db.get(Facture, facture_id, populate_existing=True)
    if not facture:
        raise not_found("Facture non trouvée")
    return facture


@router.get("", response_model=Envelope[List[FactureOut]])
async def list_factures(
    db: AsyncSession = Depends(get_db),
    store: SqlDocumentStore = StoreDep,
    pagination: Pagination = PaginationDep,
    statut: Optional[str] = None,
    client_id: Optional[int] = Query(None, alias="clientId"),
):
    criteria = []
    if statut:
        criteria.append(Facture.statut == statut)
    if client_id:
        criteria.append(Facture.client_id == client_id)

    total = await store.count(Facture, *criteria)
    stmt = (
        select(Facture)
        .where(*criteria)
        .order_by(Facture.date_emission.desc(), Facture.id.desc())
        .offset(pagination.skip)
        .limit(pagination.take)
    )
    rows = (await db.execute(stmt)).scalars().all()
    return paginated(rows, FactureOut, total, pagination, "Factures récupérées avec succès")


@router.get("/overdue", response_model=Envelope[List[FactureOverdueOut]])
async def list_overdue(db: AsyncSession = Depends(get_db)):
    today = date.today()
    stmt = (
        select(Facture)
        .where(Facture.statut.in_(UNPAID_STATUTS), Facture.date_echeance < today)
        .order_by(Facture.date_echeance.asc())
    )
    rows = (await db.execute(stmt)).scalars().all()

    data = [
        FactureOverdueOut.model_validate(
            {**FactureOut.model_validate(f).model_dump(), "jours_retard": (today - f.date_echeance).days}
        )
        for f in rows
    ]
    return ok(data, "Factures en retard récupérées avec succès")


@router.get("/{facture_id}", response_model=Envelope[FactureOut])
async def get_facture(facture_id: int, db: AsyncSession = Depends(get_db)):
    facture = await _get_facture(db, facture_id)
    return ok(FactureOut.model_validate(facture), "Facture récupérée avec succès")


@router.put("/{facture_id}", response_model=Envelope[FactureOut])
async def update_facture(facture_id: int, payload: FactureUpdate, db: AsyncSession = Depends(get_db)):
    facture = await _get_facture(db, facture_id)
    changes = payload.model_dump(exclude_unset=True)

    old_status = facture.statut
    for field, value in changes.items():
        if value is not None:
            setattr(facture, field, value)

    # Passage à “payee” sans date fournie : paiement daté de maintenant
    if facture.statut == FactureStatut.PAYEE.value and facture.date_paiement is None:
        facture.date_paiement = datetime.now(timezone.utc)

    await db.commit()

    if facture.statut != old_status:
        log.info(
            "facture status changed",
            extra={"reference": facture.numero, "old_status": old_status, "new_status": facture.statut},
        )

    facture = await _get_facture(db, facture_id)
    return ok(FactureOut.model_validate(facture), "Facture mise à jour avec succès")


@router.delete("/{facture_id}", response_model=Envelope[None])
async def delete_facture(facture_id: int, db: AsyncSession = Depends(get_db)):
    facture = await _get_facture(db, facture_id)
    if facture.statut == FactureStatut.PAYEE.value:
        raise business_rule("Impossible de supprimer une facture payée")

    await db.delete(facture)
    await db.commit()
    return ok(None, "Facture supprimée avec succès")
