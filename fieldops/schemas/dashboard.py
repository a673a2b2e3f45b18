from __future__ import annotations

from typing import Dict

from pydantic import BaseModel, ConfigDict

"""
Schemas Dashboard (Pydantic).

Rôle (fonctionnel) :
- Contrat de réponse de /dashboard/stats : compteurs globaux + répartition par statut.

Notes :
- DTO de lecture : valeurs agrégées, pas des lignes DB.
- Les répartitions listent tous les statuts connus (0 compris) pour un affichage stable côté front.
"""


class DashboardTotals(BaseModel):
    """Compteurs globaux et files de travail."""
    clients: int
    clients_actifs: int
    techniciens: int
    missions: int
    interventions: int
    interventions_aujourdhui: int
    devis_en_attente: int
    factures_impayees: int
    rapports_en_attente: int


class DashboardStatsOut(BaseModel):
    model_config = ConfigDict(extra="forbid")

    totals: DashboardTotals
    missions_par_statut: Dict[str, int]
    devis_par_statut: Dict[str, int]
    factures_par_statut: Dict[str, int]
    rapports_par_statut: Dict[str, int]
