from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from fieldops.api.deps import PaginationDep, StoreDep, ok, paginated
from fieldops.core.errors import business_rule, not_found
from fieldops.core.pagination import Pagination
from fieldops.db.session import get_db
from fieldops.db.store import SqlDocumentStore
from fieldops.models.client import Client
from fieldops.models.devis import Devis
from fieldops.models.facture import Facture
from fieldops.models.mission import Mission
from fieldops.models.type_paiement import TypePaiement
from fieldops.schemas.clients import ClientCreate, ClientOut, ClientUpdate
from fieldops.schemas.common import Envelope

"""
API Clients.

Rôle (fonctionnel) :
- CRUD des clients, liste paginée avec recherche (nom, email, entreprise).
- Email unique (doublon => 400), téléphone normalisé par le schéma d’entrée.
- Suppression refusée tant que des missions, devis ou factures y sont rattachés.
"""

router = APIRouter(prefix="/clients", tags=["clients"])
log = logging.getLogger("fieldops.clients")

# Colonnes NOT NULL : un null explicite dans un PUT est ignoré (valeur conservée)
REQUIRED_FIELDS = {"nom", "email", "type_de_cart", "statut"}


async def _get_client(db: AsyncSession, client_id: int) -> Client:
    client = await db.get(Client, client_id, populate_existing=True)
    if not client:
        raise not_found("Client non trouvé")
    return client


async def _ensure_email_free(db: AsyncSession, email: str, exclude_id: int | None = None) -> None:
    stmt = select(Client.id).where(Client.email == email)
    if exclude_id is not None:
        stmt = stmt.where(Client.id != exclude_id)
    if (await db.execute(stmt)).first():
        raise business_rule("Un client avec cet email existe déjà")


async def _ensure_type_paiement(db: AsyncSession, type_paiement_id: int | None) -> None:
    if type_paiement_id is not None and not await db.get(TypePaiement, type_paiement_id):
        raise not_found("Type de paiement non trouvé")


@router.get("", response_model=Envelope[List[ClientOut]])
async def list_clients(
    db: AsyncSession = Depends(get_db),
    store: SqlDocumentStore = StoreDep,
    pagination: Pagination = PaginationDep,
    search: Optional[str] = None,
    statut: Optional[str] = None,
):
    criteria = []
    if search:
        pattern = f"%{search.strip()}%"
        criteria.append(
            or_(Client.nom.ilike(pattern), Client.email.ilike(pattern), Client.entreprise.ilike(pattern))
        )
    if statut:
        criteria.append(Client.statut == statut)

    total = await store.count(Client, *criteria)
    stmt = (
        select(Client)
        .where(*criteria)
        .order_by(Client.date_inscription.desc(), Client.id.desc())
        .offset(pagination.skip)
        .limit(pagination.take)
    )
    rows = (await db.execute(stmt)).scalars().all()
    return paginated(rows, ClientOut, total, pagination, "Clients récupérés avec succès")


@router.get("/{client_id}", response_model=Envelope[ClientOut])
async def get_client(client_id: int, db: AsyncSession = Depends(get_db)):
    client = await _get_client(db, client_id)
    return ok(ClientOut.model_validate(client), "Client récupéré avec succès")


@router.post("", response_model=Envelope[ClientOut], status_code=201)
async def create_client(payload: ClientCreate, db: AsyncSession = Depends(get_db)):
    await _ensure_email_free(db, payload.email)
    await _ensure_type_paiement(db, payload.type_paiement_id)

    client = Client(**payload.model_dump())
    db.add(client)
    await db.commit()

    client = await _get_client(db, client.id)
    log.info("client created", extra={"entity_id": client.id})
    return ok(ClientOut.model_validate(client), "Client créé avec succès")


@router.put("/{client_id}", response_model=Envelope[ClientOut])
async def update_client(client_id: int, payload: ClientUpdate, db: AsyncSession = Depends(get_db)):
    client = await _get_client(db, client_id)
    changes = {
        field: value
        for field, value in payload.model_dump(exclude_unset=True).items()
        if value is not None or field not in REQUIRED_FIELDS
    }

    if changes.get("email") and changes["email"] != client.email:
        await _ensure_email_free(db, changes["email"], exclude_id=client_id)
    if "type_paiement_id" in changes:
        await _ensure_type_paiement(db, changes["type_paiement_id"])

    for field, value in changes.items():
        setattr(client, field, value)
    await db.commit()

    client = await _get_client(db, client_id)
    return ok(ClientOut.model_validate(client), "Client mis à jour avec succès")


@router.delete("/{client_id}", response_model=Envelope[None])
async def delete_client(
    client_id: int,
    db: AsyncSession = Depends(get_db),
    store: SqlDocumentStore = StoreDep,
):
    client = await _get_client(db, client_id)

    linked = {
        "missions": await store.count(Mission, Mission.client_id == client_id),
        "devis": await store.count(Devis, Devis.client_id == client_id),
        "factures": await store.count(Facture, Facture.client_id == client_id),
    }
    if any(linked.values()):
        raise business_rule("Impossible de supprimer un client ayant des documents associés", details=linked)

    await db.delete(client)
    await db.commit()
    log.info("client deleted", extra={"entity_id": client_id})
    return ok(None, "Client supprimé avec succès")
