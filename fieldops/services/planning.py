from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fieldops.models.intervention import Intervention, InterventionTechnicien

"""
Planning Service (disponibilité des techniciens).

Rôle (fonctionnel) :
- Retrouve les interventions d’un technicien dont le créneau chevauche une période donnée.

Règle de chevauchement (bornes incluses) :
- [debut_i, fin_i] et [debut, fin] se chevauchent si debut_i <= fin et fin_i >= debut.
  Une intervention qui finit exactement quand la période commence est donc en conflit.
- Les interventions sans début ou sans fin ne sont jamais en conflit.
"""


async def find_conflicts(
    db: AsyncSession,
    technicien_id: int,
    debut: datetime,
    fin: datetime,
    *,
    exclude_id: Optional[int] = None,
) -> List[Intervention]:
    affectees = select(InterventionTechnicien.intervention_id).where(
        InterventionTechnicien.technicien_id == technicien_id
    )
    stmt = (
        select(Intervention)
        .where(
            Intervention.id.in_(affectees),
            Intervention.date_heure_debut <= fin,
            Intervention.date_heure_fin >= debut,
        )
        .order_by(Intervention.date_heure_debut)
    )
    if exclude_id is not None:
        stmt = stmt.where(Intervention.id != exclude_id)

    return list((await db.execute(stmt)).scalars().all())
