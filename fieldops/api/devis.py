from __future__ import annotations

import logging
from datetime import date, datetime, timedelta, timezone
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from fieldops.api.deps import ActorDep, GeneratorDep, PaginationDep, StoreDep, ok, paginated
from fieldops.core.errors import business_rule, not_found
from fieldops.core.pagination import Pagination
from fieldops.core.settings import settings
from fieldops.db.session import get_db
from fieldops.db.store import SqlDocumentStore
from fieldops.models.client import Client
from fieldops.models.devis import Devis, DevisLigne
from fieldops.models.facture import Facture, FactureLigne
from fieldops.models.mission import Mission
from fieldops.schemas.common import Envelope
from fieldops.schemas.devis import (
    CONVERTIBLE_STATUTS,
    EDITABLE_STATUTS,
    DevisCreate,
    DevisOut,
    DevisStatut,
    DevisUpdate,
    DevisValidation,
    LigneIn,
)
from fieldops.schemas.factures import FactureOut
from fieldops.services.devis_calculator import calculate_montants
from fieldops.services.documents import persist_with_reference
from fieldops.services.numbering import DocumentKind, NumberGenerator

"""
API Devis.

Rôle (fonctionnel) :
- Crée un devis numéroté DEV-… ; les montants HT/TVA/TTC sont recalculés côté serveur à partir des lignes.
- Liste paginée (statut, clientId, missionId, search), détail, mise à jour (brouillon / en_attente uniquement),
  suppression (refusée une fois facturé).
- Workflow de validation DG / PDG / client (acteur tracé via header X-Actor).
- Conversion d’un devis accepté en facture FAC-… : lignes recopiées, échéance = aujourd’hui + délai
  de paiement du client, devis passé au statut “facture” dans la même transaction.
"""

router = APIRouter(prefix="/devis", tags=["devis"])
log = logging.getLogger("fieldops.devis")


def _lignes(lignes: List[LigneIn], montants_ht: List) -> List[DevisLigne]:
    return [
        DevisLigne(
            designation=li.designation,
            quantite=li.quantite,
            prix_unitaire=li.prix_unitaire,
            montant_ht=montant,
            ordre=i,
        )
        for i, (li, montant) in enumerate(zip(lignes, montants_ht), start=1)
    ]


async def _get_devis(db: AsyncSession, devis_id: int) -> Devis:
    devis = await db.get(Devis, devis_id, populate_existing=True)
    if not devis:
        raise not_found("Devis non trouvé")
    return devis


@router.get("", response_model=Envelope[List[DevisOut]])
async def list_devis(
    db: AsyncSession = Depends(get_db),
    store: SqlDocumentStore = StoreDep,
    pagination: Pagination = PaginationDep,
    statut: Optional[str] = None,
    client_id: Optional[int] = Query(None, alias="clientId"),
    mission_id: Optional[int] = Query(None, alias="missionId"),
    search: Optional[str] = None,
):
    criteria = []
    if statut:
        criteria.append(Devis.statut == statut)
    if client_id:
        criteria.append(Devis.client_id == client_id)
    if mission_id:
        criteria.append(Devis.mission_id == mission_id)
    if search:
        pattern = f"%{search.strip()}%"
        criteria.append(or_(Devis.numero.ilike(pattern), Devis.titre.ilike(pattern)))

    total = await store.count(Devis, *criteria)
    stmt = (
        select(Devis)
        .where(*criteria)
        .order_by(Devis.date_creation.desc(), Devis.id.desc())
        .offset(pagination.skip)
        .limit(pagination.take)
    )
    rows = (await db.execute(stmt)).scalars().all()
    return paginated(rows, DevisOut, total, pagination, "Devis récupérés avec succès")


@router.get("/{devis_id}", response_model=Envelope[DevisOut])
async def get_devis(devis_id: int, db: AsyncSession = Depends(get_db)):
    devis = await _get_devis(db, devis_id)
    return ok(DevisOut.model_validate(devis), "Devis récupéré avec succès")


@router.post("", response_model=Envelope[DevisOut], status_code=201)
async def create_devis(
    payload: DevisCreate,
    db: AsyncSession = Depends(get_db),
    generator: NumberGenerator = GeneratorDep,
):
    if not await db.get(Client, payload.client_id):
        raise not_found("Client non trouvé")
    if payload.mission_id is not None and not await db.get(Mission, payload.mission_id):
        raise not_found("Mission non trouvée")

    montants = calculate_montants(payload.lignes, payload.taux_tva)

    def build(reference: str) -> Devis:
        return Devis(
            numero=reference,
            client_id=payload.client_id,
            mission_id=payload.mission_id,
            titre=payload.titre,
            description=payload.description,
            taux_tva=payload.taux_tva,
            montant_ht=montants.montant_ht,
            montant_tva=montants.montant_tva,
            montant_ttc=montants.montant_ttc,
            date_validite=payload.date_validite,
            lignes=_lignes(payload.lignes, montants.lignes_ht),
        )

    devis = await persist_with_reference(db, generator, DocumentKind.DEVIS, build)
    devis = await _get_devis(db, devis.id)
    return ok(DevisOut.model_validate(devis), "Devis créé avec succès")


@router.put("/{devis_id}", response_model=Envelope[DevisOut])
async def update_devis(devis_id: int, payload: DevisUpdate, db: AsyncSession = Depends(get_db)):
    devis = await _get_devis(db, devis_id)
    if devis.statut not in EDITABLE_STATUTS:
        raise business_rule(
            "Seuls les devis en brouillon ou en attente peuvent être modifiés",
            details={"statut": devis.statut},
        )

    changes = payload.model_dump(exclude_unset=True, exclude={"lignes"})
    for field, value in changes.items():
        if value is not None:
            setattr(devis, field, value)

    # Recalcul si les lignes ou la TVA changent
    if payload.lignes is not None or payload.taux_tva is not None:
        source = payload.lignes if payload.lignes is not None else list(devis.lignes)
        montants = calculate_montants(source, devis.taux_tva)
        if payload.lignes is not None:
            devis.lignes = _lignes(payload.lignes, montants.lignes_ht)
        devis.montant_ht = montants.montant_ht
        devis.montant_tva = montants.montant_tva
        devis.montant_ttc = montants.montant_ttc

    await db.commit()

    devis = await _get_devis(db, devis_id)
    return ok(DevisOut.model_validate(devis), "Devis mis à jour avec succès")


@router.patch("/{devis_id}/validation", response_model=Envelope[DevisOut])
async def validate_devis(
    devis_id: int,
    payload: DevisValidation,
    db: AsyncSession = Depends(get_db),
    actor: str = ActorDep,
):
    devis = await _get_devis(db, devis_id)
    if devis.statut == DevisStatut.FACTURE.value:
        raise business_rule("Un devis facturé ne peut plus changer de statut")

    old_status = devis.statut
    now = datetime.now(timezone.utc)
    devis.statut = payload.statut

    if payload.statut in (DevisStatut.VALIDE_DG.value, DevisStatut.REFUSE_DG.value):
        devis.date_validation_dg = now
        devis.valide_par = actor
        devis.commentaire_dg = payload.commentaire_dg
    elif payload.statut in (DevisStatut.VALIDE_PDG.value, DevisStatut.REFUSE_PDG.value):
        devis.date_validation_pdg = now
        devis.valide_par_pdg = actor
        devis.commentaire_pdg = payload.commentaire_pdg

    await db.commit()
    log.info(
        "devis status changed",
        extra={
            "reference": devis.numero,
            "actor": actor,
            "old_status": old_status,
            "new_status": payload.statut,
        },
    )

    devis = await _get_devis(db, devis_id)
    return ok(DevisOut.model_validate(devis), "Statut du devis mis à jour avec succès")


async def _ensure_not_invoiced(db: AsyncSession, devis_id: int) -> None:
    existing = (await db.execute(select(Facture.id).where(Facture.devis_id == devis_id))).first()
    if existing:
        raise business_rule("Ce devis a déjà été converti en facture")


@router.post("/{devis_id}/facture", response_model=Envelope[FactureOut], status_code=201)
async def convert_to_facture(
    devis_id: int,
    db: AsyncSession = Depends(get_db),
    generator: NumberGenerator = GeneratorDep,
):
    devis = await _get_devis(db, devis_id)
    if devis.statut not in CONVERTIBLE_STATUTS:
        raise business_rule(
            "Seuls les devis acceptés par le client ou validés par le PDG peuvent être facturés",
            details={"statut": devis.statut},
        )
    await _ensure_not_invoiced(db, devis_id)

    # Instantané : après un rollback (retry), les attributs du devis sont expirés
    type_paiement = devis.client.type_paiement
    delai = (type_paiement.delai_paiement if type_paiement else None) or settings.DEFAULT_DELAI_PAIEMENT
    snapshot = {
        "devis_id": devis.id,
        "client_id": devis.client_id,
        "montant_ht": devis.montant_ht,
        "taux_tva": devis.taux_tva,
        "montant_ttc": devis.montant_ttc,
        "date_echeance": date.today() + timedelta(days=delai),
    }
    lignes = [
        (li.designation, li.quantite, li.prix_unitaire, li.montant_ht, li.ordre) for li in devis.lignes
    ]

    def build(reference: str) -> Facture:
        return Facture(
            numero=reference,
            lignes=[
                FactureLigne(
                    designation=designation,
                    quantite=quantite,
                    prix_unitaire=prix_unitaire,
                    montant_ht=montant_ht,
                    ordre=ordre,
                )
                for designation, quantite, prix_unitaire, montant_ht, ordre in lignes
            ],
            **snapshot,
        )

    def mark_invoiced(_: Facture) -> None:
        devis.statut = DevisStatut.FACTURE.value

    async def already_invoiced() -> None:
        # Conversion concurrente : c’est factures.devis_id (UNIQUE) qui a refusé, pas le numéro
        await _ensure_not_invoiced(db, devis_id)

    facture = await persist_with_reference(
        db, generator, DocumentKind.FACTURE, build, before_commit=mark_invoiced, on_conflict=already_invoiced
    )

    facture = await db.get(Facture, facture.id, populate_existing=True)
    log.info("devis converted", extra={"reference": facture.numero, "entity_id": devis_id})
    return ok(FactureOut.model_validate(facture), "Facture créée avec succès")


@router.delete("/{devis_id}", response_model=Envelope[None])
async def delete_devis(devis_id: int, db: AsyncSession = Depends(get_db)):
    devis = await _get_devis(db, devis_id)
    if devis.statut == DevisStatut.FACTURE.value:
        raise business_rule("Impossible de supprimer un devis déjà facturé")

    await db.delete(devis)
    await db.commit()
    return ok(None, "Devis supprimé avec succès")
