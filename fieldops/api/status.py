from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from fieldops.db.session import get_db
from fieldops.db.store import SqlDocumentStore
from fieldops.models.devis import Devis
from fieldops.models.facture import Facture
from fieldops.models.mission import Mission

"""
API System Status.

Rôle (fonctionnel) :
- Expose un endpoint de statut pour la supervision.
- Vérifie la disponibilité de la base (requête simple).
- Donne le volume de documents numérotés (missions, devis, factures) et le dernier numéro
  de mission attribué.
"""

router = APIRouter(prefix="/system", tags=["system"])


@router.get("/status")
async def system_status(db: AsyncSession = Depends(get_db)):
    # 1) DB check (requête minimale)
    db_ok = True
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError:
        db_ok = False

    # 2) Compteurs (uniquement si la base répond)
    counts = None
    last_mission = None
    if db_ok:
        store = SqlDocumentStore(db)
        counts = {
            "missions": await store.count(Mission),
            "devis": await store.count(Devis),
            "factures": await store.count(Facture),
        }
        last_mission = await store.last_reference("mission", "INT-")

    return {
        "ok": db_ok,
        "db": {"ok": db_ok},
        "documents": counts,
        "last_mission": last_mission,
        "ts": datetime.now(timezone.utc).isoformat(),
    }
