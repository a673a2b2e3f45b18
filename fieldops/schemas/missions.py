from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from fieldops.schemas.clients import ClientBrief

"""
Schemas Missions (Pydantic).

Rôle (fonctionnel) :
- Contrat HTTP des missions (fiches d’intervention).
- Le numéro `num_intervention` n’est jamais fourni par le client : il est attribué par l’API.
- Le statut initial n’est pas saisi : il découle de la date de sortie de fiche
  (date passée ou présente => en_cours, future => planifiee).
- Dates sans fuseau : considérées UTC.
"""


class Priorite(str, Enum):
    NORMALE = "normale"
    URGENTE = "urgente"


class MissionStatut(str, Enum):
    PLANIFIEE = "planifiee"
    EN_COURS = "en_cours"
    TERMINEE = "terminee"
    ANNULEE = "annulee"


def _as_utc(v: Optional[datetime]) -> Optional[datetime]:
    if v is not None and v.tzinfo is None:
        return v.replace(tzinfo=timezone.utc)
    return v


class MissionCreate(BaseModel):
    model_config = ConfigDict(extra="forbid", use_enum_values=True)

    nature_intervention: str = Field(..., min_length=3, max_length=255)
    objectif_du_contrat: str = Field(..., min_length=3, max_length=5000)
    description: Optional[str] = Field(default=None, max_length=5000)
    priorite: Priorite = Priorite.NORMALE.value
    date_sortie_fiche_intervention: datetime
    client_id: int

    @field_validator("date_sortie_fiche_intervention")
    @classmethod
    def _utc(cls, v: datetime) -> datetime:
        return _as_utc(v)

    @field_validator("nature_intervention", "objectif_du_contrat", mode="before")
    @classmethod
    def _strip(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip()
        return v


class MissionUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid", use_enum_values=True)

    nature_intervention: Optional[str] = Field(default=None, min_length=3, max_length=255)
    objectif_du_contrat: Optional[str] = Field(default=None, min_length=3, max_length=5000)
    description: Optional[str] = Field(default=None, max_length=5000)
    priorite: Optional[Priorite] = None
    statut: Optional[MissionStatut] = None
    date_sortie_fiche_intervention: Optional[datetime] = None
    client_id: Optional[int] = None

    @field_validator("date_sortie_fiche_intervention")
    @classmethod
    def _utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return _as_utc(v)


class MissionBrief(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    num_intervention: str
    nature_intervention: str
    statut: str


class MissionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    num_intervention: str
    nature_intervention: str
    objectif_du_contrat: str
    description: Optional[str] = None
    priorite: str
    statut: str
    date_sortie_fiche_intervention: datetime
    created_at: datetime
    client: ClientBrief
