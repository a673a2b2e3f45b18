from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from fieldops.api.deps import PaginationDep, StoreDep, ok, paginated
from fieldops.core.errors import business_rule, not_found
from fieldops.core.pagination import Pagination
from fieldops.db.session import get_db
from fieldops.db.store import SqlDocumentStore
from fieldops.models.intervention import InterventionTechnicien
from fieldops.models.rapport import Rapport
from fieldops.models.specialite import Specialite
from fieldops.models.technicien import Technicien
from fieldops.schemas.common import Envelope
from fieldops.schemas.techniciens import TechnicienCreate, TechnicienOut, TechnicienUpdate

"""
API Techniciens.

Rôle (fonctionnel) :
- CRUD des techniciens, liste paginée triée par nom puis prénom.
- Filtres : specialiteId, search (nom, prénom, contact).
- Suppression refusée si le technicien a rédigé des rapports ou est affecté à des interventions.
"""

router = APIRouter(prefix="/techniciens", tags=["techniciens"])


async def _get_technicien(db: AsyncSession, technicien_id: int) -> Technicien:
    technicien = await db.get(Technicien, technicien_id, populate_existing=True)
    if not technicien:
        raise not_found("Technicien non trouvé")
    return technicien


async def _ensure_specialite(db: AsyncSession, specialite_id: int) -> None:
    if not await db.get(Specialite, specialite_id):
        raise not_found("Spécialité non trouvée")


@router.get("", response_model=Envelope[List[TechnicienOut]])
async def list_techniciens(
    db: AsyncSession = Depends(get_db),
    store: SqlDocumentStore = StoreDep,
    pagination: Pagination = PaginationDep,
    specialite_id: Optional[int] = Query(None, alias="specialiteId"),
    search: Optional[str] = None,
):
    criteria = []
    if specialite_id:
        criteria.append(Technicien.specialite_id == specialite_id)
    if search:
        pattern = f"%{search.strip()}%"
        criteria.append(
            or_(Technicien.nom.ilike(pattern), Technicien.prenom.ilike(pattern), Technicien.contact.ilike(pattern))
        )

    total = await store.count(Technicien, *criteria)
    stmt = (
        select(Technicien)
        .where(*criteria)
        .order_by(Technicien.nom, Technicien.prenom)
        .offset(pagination.skip)
        .limit(pagination.take)
    )
    rows = (await db.execute(stmt)).scalars().all()
    return paginated(rows, TechnicienOut, total, pagination, "Techniciens récupérés avec succès")


@router.get("/{technicien_id}", response_model=Envelope[TechnicienOut])
async def get_technicien(technicien_id: int, db: AsyncSession = Depends(get_db)):
    technicien = await _get_technicien(db, technicien_id)
    return ok(TechnicienOut.model_validate(technicien), "Technicien récupéré avec succès")


@router.post("", response_model=Envelope[TechnicienOut], status_code=201)
async def create_technicien(payload: TechnicienCreate, db: AsyncSession = Depends(get_db)):
    await _ensure_specialite(db, payload.specialite_id)

    technicien = Technicien(**payload.model_dump())
    db.add(technicien)
    await db.commit()

    technicien = await _get_technicien(db, technicien.id)
    return ok(TechnicienOut.model_validate(technicien), "Technicien créé avec succès")


@router.put("/{technicien_id}", response_model=Envelope[TechnicienOut])
async def update_technicien(technicien_id: int, payload: TechnicienUpdate, db: AsyncSession = Depends(get_db)):
    technicien = await _get_technicien(db, technicien_id)
    changes = payload.model_dump(exclude_unset=True)

    if changes.get("specialite_id") is not None:
        await _ensure_specialite(db, changes["specialite_id"])

    for field, value in changes.items():
        if value is not None:
            setattr(technicien, field, value)
    await db.commit()

    technicien = await _get_technicien(db, technicien_id)
    return ok(TechnicienOut.model_validate(technicien), "Technicien mis à jour avec succès")


@router.delete("/{technicien_id}", response_model=Envelope[None])
async def delete_technicien(
    technicien_id: int,
    db: AsyncSession = Depends(get_db),
    store: SqlDocumentStore = StoreDep,
):
    technicien = await _get_technicien(db, technicien_id)

    linked = {
        "rapports": await store.count(Rapport, Rapport.technicien_id == technicien_id),
        "interventions": await store.count(
            InterventionTechnicien, InterventionTechnicien.technicien_id == technicien_id
        ),
    }
    if any(linked.values()):
        raise business_rule(
            "Impossible de supprimer un technicien ayant des rapports ou des interventions associés",
            details=linked,
        )

    await db.delete(technicien)
    await db.commit()
    return ok(None, "Technicien supprimé avec succès")
