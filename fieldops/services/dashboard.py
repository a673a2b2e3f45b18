from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from enum import Enum
from typing import Dict, Optional, Type

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from fieldops.models.client import Client
from fieldops.models.devis import Devis
from fieldops.models.facture import Facture
from fieldops.models.intervention import Intervention
from fieldops.models.mission import Mission
from fieldops.models.rapport import Rapport
from fieldops.models.technicien import Technicien
from fieldops.schemas.dashboard import DashboardStatsOut, DashboardTotals
from fieldops.schemas.devis import DevisStatut
from fieldops.schemas.factures import UNPAID_STATUTS, FactureStatut
from fieldops.schemas.missions import MissionStatut
from fieldops.schemas.rapports import RapportStatut

"""
Dashboard Service.

Rôle (fonctionnel) :
- Calcule la vue agrégée du tableau de bord (1 endpoint = 1 payload complet) :
  - compteurs globaux (clients, techniciens, missions, interventions),
  - files de travail (devis à valider, factures échues non réglées, rapports à relire),
  - répartition par statut des missions, devis, factures et rapports.

Notes :
- “Aujourd’hui” est le jour UTC courant ; `today` est injectable pour les tests.
- Une facture est impayée si elle est émise ou envoyée et que son échéance est dépassée.
"""

# Devis en attente d’une décision (DG puis PDG)
_DEVIS_A_VALIDER = (DevisStatut.EN_ATTENTE.value, DevisStatut.VALIDE_DG.value)


async def _count(db: AsyncSession, model, *criteria) -> int:
    stmt = select(func.count(model.id)).where(*criteria)
    return int((await db.execute(stmt)).scalar() or 0)


async def count_by_statut(db: AsyncSession, model, statuts: Type[Enum]) -> Dict[str, int]:
    """Nombre de lignes par statut ; chaque valeur de l’enum est présente (0 par défaut)."""
    stmt = select(model.statut, func.count(model.id)).group_by(model.statut)
    counts = {s.value: 0 for s in statuts}
    for statut, cnt in (await db.execute(stmt)).all():
        counts[statut] = int(cnt)
    return counts


async def get_dashboard_stats(db: AsyncSession, *, today: Optional[date] = None) -> DashboardStatsOut:
    today = today or datetime.now(timezone.utc).date()
    day_start = datetime.combine(today, time.min, tzinfo=timezone.utc)
    day_end = day_start + timedelta(days=1)

    missions = await count_by_statut(db, Mission, MissionStatut)
    devis = await count_by_statut(db, Devis, DevisStatut)
    factures = await count_by_statut(db, Facture, FactureStatut)
    rapports = await count_by_statut(db, Rapport, RapportStatut)

    totals = DashboardTotals(
        clients=await _count(db, Client),
        clients_actifs=await _count(db, Client, Client.statut == "active"),
        techniciens=await _count(db, Technicien),
        missions=sum(missions.values()),
        interventions=await _count(db, Intervention),
        interventions_aujourdhui=await _count(
            db,
            Intervention,
            Intervention.date_heure_debut >= day_start,
            Intervention.date_heure_debut < day_end,
        ),
        devis_en_attente=sum(devis[s] for s in _DEVIS_A_VALIDER),
        factures_impayees=await _count(
            db,
            Facture,
            Facture.statut.in_(UNPAID_STATUTS),
            Facture.date_echeance < today,
        ),
        rapports_en_attente=rapports[RapportStatut.SOUMIS.value],
    )

    return DashboardStatsOut(
        totals=totals,
        missions_par_statut=missions,
        devis_par_statut=devis,
        factures_par_statut=factures,
        rapports_par_statut=rapports,
    )
