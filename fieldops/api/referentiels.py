from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from fieldops.api.deps import PaginationDep, StoreDep, ok, paginated
from fieldops.core.errors import business_rule
from fieldops.core.pagination import Pagination
from fieldops.db.session import get_db
from fieldops.db.store import SqlDocumentStore
from fieldops.models.specialite import Specialite
from fieldops.models.type_paiement import TypePaiement
from fieldops.schemas.common import Envelope
from fieldops.schemas.referentiels import (
    SpecialiteCreate,
    SpecialiteOut,
    TypePaiementCreate,
    TypePaiementOut,
)

"""
API Référentiels.

Rôle (fonctionnel) :
- Types de paiement (délai en jours utilisé pour l’échéance des factures).
- Spécialités des techniciens.
"""

router = APIRouter(tags=["referentiels"])


@router.get("/types-paiement", response_model=Envelope[List[TypePaiementOut]])
async def list_types_paiement(
    db: AsyncSession = Depends(get_db),
    store: SqlDocumentStore = StoreDep,
    pagination: Pagination = PaginationDep,
):
    total = await store.count(TypePaiement)
    stmt = select(TypePaiement).order_by(TypePaiement.libelle).offset(pagination.skip).limit(pagination.take)
    rows = (await db.execute(stmt)).scalars().all()
    return paginated(rows, TypePaiementOut, total, pagination, "Types de paiement récupérés avec succès")


@router.post("/types-paiement", response_model=Envelope[TypePaiementOut], status_code=201)
async def create_type_paiement(payload: TypePaiementCreate, db: AsyncSession = Depends(get_db)):
    tp = TypePaiement(**payload.model_dump())
    db.add(tp)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise business_rule("Un type de paiement avec ce libellé existe déjà")
    await db.refresh(tp)
    return ok(TypePaiementOut.model_validate(tp), "Type de paiement créé avec succès")


@router.get("/specialites", response_model=Envelope[List[SpecialiteOut]])
async def list_specialites(
    db: AsyncSession = Depends(get_db),
    store: SqlDocumentStore = StoreDep,
    pagination: Pagination = PaginationDep,
):
    total = await store.count(Specialite)
    stmt = select(Specialite).order_by(Specialite.libelle).offset(pagination.skip).limit(pagination.take)
    rows = (await db.execute(stmt)).scalars().all()
    return paginated(rows, SpecialiteOut, total, pagination, "Spécialités récupérées avec succès")


@router.post("/specialites", response_model=Envelope[SpecialiteOut], status_code=201)
async def create_specialite(payload: SpecialiteCreate, db: AsyncSession = Depends(get_db)):
    specialite = Specialite(**payload.model_dump())
    db.add(specialite)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise business_rule("Une spécialité avec ce libellé existe déjà")
    await db.refresh(specialite)
    return ok(SpecialiteOut.model_validate(specialite), "Spécialité créée avec succès")
