from __future__ import annotations

from datetime import date, datetime, timezone
from enum import Enum
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from fieldops.schemas.clients import ClientBrief
from fieldops.schemas.devis import LigneOut


class FactureStatut(str, Enum):
    EMISE = "emise"
    ENVOYEE = "envoyee"
    PAYEE = "payee"
    ANNULEE = "annulee"


# Statuts comptés comme “non réglés” pour le suivi des retards
UNPAID_STATUTS = (FactureStatut.EMISE.value, FactureStatut.ENVOYEE.value)


class FactureUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid", use_enum_values=True)

    statut: Optional[FactureStatut] = None
    date_paiement: Optional[datetime] = None
    mode_paiement: Optional[str] = Field(default=None, min_length=2, max_length=50)
    reference_transaction: Optional[str] = Field(default=None, min_length=2, max_length=100)

    @field_validator("date_paiement")
    @classmethod
    def _utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v


class FactureOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    numero: str
    devis_id: Optional[int] = None
    statut: str

    montant_ht: Decimal
    taux_tva: Decimal
    montant_ttc: Decimal

    date_emission: datetime
    date_echeance: date
    date_paiement: Optional[datetime] = None
    mode_paiement: Optional[str] = None
    reference_transaction: Optional[str] = None

    client: ClientBrief
    lignes: List[LigneOut] = []


class FactureOverdueOut(FactureOut):
    """Facture non réglée dont l’échéance est dépassée (+ nombre de jours de retard)."""
    jours_retard: int
