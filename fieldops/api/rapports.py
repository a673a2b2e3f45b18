from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fieldops.api.deps import ActorDep, PaginationDep, StoreDep, ok, paginated
from fieldops.core.errors import not_found
from fieldops.core.pagination import Pagination
from fieldops.db.session import get_db
from fieldops.db.store import SqlDocumentStore
from fieldops.models.mission import Mission
from fieldops.models.rapport import Rapport, RapportImage
from fieldops.models.technicien import Technicien
from fieldops.schemas.common import Envelope
from fieldops.schemas.rapports import ImageIn, RapportCreate, RapportOut, RapportUpdate, RapportValidation

"""
API Rapports.

Rôle (fonctionnel) :
- Rapports d’intervention rédigés par un technicien pour une mission, avec images ordonnées.
- Liste paginée (statut, technicienId, missionId), détail, mise à jour, suppression.
- Validation : statut valide / rejete + commentaire, date de validation horodatée.
"""

router = APIRouter(prefix="/rapports", tags=["rapports"])
log = logging.getLogger("fieldops.rapports")


def _images(images: List[ImageIn]) -> List[RapportImage]:
    return [
        RapportImage(url=img.url, description=img.description, ordre=i)
        for i, img in enumerate(images, start=1)
    ]


async def _get_rapport(db: AsyncSession, rapport_id: int) -> Rapport:
    rapport = await db.get(Rapport, rapport_id, populate_existing=True)
    if not rapport:
        raise not_found("Rapport non trouvé")
    return rapport


@router.get("", response_model=Envelope[List[RapportOut]])
async def list_rapports(
    db: AsyncSession = Depends(get_db),
    store: SqlDocumentStore = StoreDep,
    pagination: Pagination = PaginationDep,
    statut: Optional[str] = None,
    technicien_id: Optional[int] = Query(None, alias="technicienId"),
    mission_id: Optional[int] = Query(None, alias="missionId"),
):
    criteria = []
    if statut:
        criteria.append(Rapport.statut == statut)
    if technicien_id:
        criteria.append(Rapport.technicien_id == technicien_id)
    if mission_id:
        criteria.append(Rapport.mission_id == mission_id)

    total = await store.count(Rapport, *criteria)
    stmt = (
        select(Rapport)
        .where(*criteria)
        .order_by(Rapport.created_at.desc(), Rapport.id.desc())
        .offset(pagination.skip)
        .limit(pagination.take)
    )
    rows = (await db.execute(stmt)).scalars().all()
    return paginated(rows, RapportOut, total, pagination, "Rapports récupérés avec succès")


@router.get("/{rapport_id}", response_model=Envelope[RapportOut])
async def get_rapport(rapport_id: int, db: AsyncSession = Depends(get_db)):
    rapport = await _get_rapport(db, rapport_id)
    return ok(RapportOut.model_validate(rapport), "Rapport récupéré avec succès")


@router.post("", response_model=Envelope[RapportOut], status_code=201)
async def create_rapport(payload: RapportCreate, db: AsyncSession = Depends(get_db)):
    if not await db.get(Mission, payload.mission_id):
        raise not_found("Mission non trouvée")
    if not await db.get(Technicien, payload.technicien_id):
        raise not_found("Technicien non trouvé")

    rapport = Rapport(
        titre=payload.titre,
        contenu=payload.contenu,
        mission_id=payload.mission_id,
        technicien_id=payload.technicien_id,
        images=_images(payload.images or []),
    )
    db.add(rapport)
    await db.commit()

    rapport = await _get_rapport(db, rapport.id)
    return ok(RapportOut.model_validate(rapport), "Rapport créé avec succès")


@router.put("/{rapport_id}", response_model=Envelope[RapportOut])
async def update_rapport(rapport_id: int, payload: RapportUpdate, db: AsyncSession = Depends(get_db)):
    rapport = await _get_rapport(db, rapport_id)

    if payload.titre is not None:
        rapport.titre = payload.titre
    if payload.contenu is not None:
        rapport.contenu = payload.contenu
    if payload.images is not None:
        rapport.images = _images(payload.images)

    await db.commit()

    rapport = await _get_rapport(db, rapport_id)
    return ok(RapportOut.model_validate(rapport), "Rapport mis à jour avec succès")


@router.patch("/{rapport_id}/validation", response_model=Envelope[RapportOut])
async def validate_rapport(
    rapport_id: int,
    payload: RapportValidation,
    db: AsyncSession = Depends(get_db),
    actor: str = ActorDep,
):
    rapport = await _get_rapport(db, rapport_id)
    old_status = rapport.statut

    rapport.statut = payload.statut
    rapport.commentaire = payload.commentaire
    rapport.date_validation = datetime.now(timezone.utc)
    await db.commit()

    log.info(
        "rapport status changed",
        extra={"entity_id": rapport_id, "actor": actor, "old_status": old_status, "new_status": payload.statut},
    )

    rapport = await _get_rapport(db, rapport_id)
    return ok(RapportOut.model_validate(rapport), "Rapport validé avec succès")


@router.delete("/{rapport_id}", response_model=Envelope[None])
async def delete_rapport(rapport_id: int, db: AsyncSession = Depends(get_db)):
    rapport = await _get_rapport(db, rapport_id)
    await db.delete(rapport)
    await db.commit()
    return ok(None, "Rapport supprimé avec succès")
