from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from fieldops.api.deps import ok
from fieldops.db.session import get_db
from fieldops.schemas.common import Envelope
from fieldops.schemas.dashboard import DashboardStatsOut
from fieldops.services.dashboard import get_dashboard_stats

"""
API Dashboard.

Rôle (fonctionnel) :
- Expose les statistiques de synthèse du tableau de bord (compteurs + répartition par statut).
"""

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/stats", response_model=Envelope[DashboardStatsOut])
async def dashboard_stats(db: AsyncSession = Depends(get_db)):
    stats = await get_dashboard_stats(db)
    return ok(stats, "Statistiques récupérées avec succès")
