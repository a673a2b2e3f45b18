from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from fieldops.schemas.missions import MissionBrief
from fieldops.schemas.techniciens import TechnicienBrief

"""
Schemas Interventions (Pydantic).

Rôle (fonctionnel) :
- Contrat HTTP des interventions : créneau, durée (minutes), techniciens affectés avec leur rôle.
- Contrôle de disponibilité : un technicien + une période -> disponible ou non, avec la liste
  des interventions en conflit.

Règles :
- Au moins un technicien par intervention, sans doublon.
- Fin strictement après début quand les deux sont fournis.
- Dates ramenées en UTC (sans fuseau : considérées UTC).
"""


class RoleTechnicien(str, Enum):
    PRINCIPAL = "principal"
    ASSISTANT = "assistant"
    EXPERT = "expert"


def to_utc(v: Optional[datetime]) -> Optional[datetime]:
    if v is None:
        return v
    if v.tzinfo is None:
        return v.replace(tzinfo=timezone.utc)
    return v.astimezone(timezone.utc)


class AffectationIn(BaseModel):
    model_config = ConfigDict(extra="forbid", use_enum_values=True)

    technicien_id: int = Field(..., ge=1)
    role: RoleTechnicien = RoleTechnicien.PRINCIPAL.value
    commentaire: Optional[str] = Field(default=None, max_length=500)


class _CreneauFields(BaseModel):
    model_config = ConfigDict(extra="forbid")

    @field_validator("date_heure_debut", "date_heure_fin", check_fields=False)
    @classmethod
    def _utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_utc(v)

    @field_validator("techniciens", check_fields=False)
    @classmethod
    def _distinct(cls, v: Optional[List[AffectationIn]]) -> Optional[List[AffectationIn]]:
        if v is not None:
            ids = [a.technicien_id for a in v]
            if len(ids) != len(set(ids)):
                raise ValueError("un technicien ne peut être affecté qu’une fois")
        return v

    @model_validator(mode="after")
    def _ordre_creneau(self):
        debut, fin = self.date_heure_debut, self.date_heure_fin
        if debut is not None and fin is not None and fin <= debut:
            raise ValueError("la date de fin doit être postérieure à la date de début")
        return self


class InterventionCreate(_CreneauFields):
    mission_id: int
    date_heure_debut: Optional[datetime] = None
    date_heure_fin: Optional[datetime] = None
    duree: Optional[int] = Field(default=None, ge=1)
    techniciens: List[AffectationIn] = Field(..., min_length=1)


class InterventionUpdate(_CreneauFields):
    date_heure_debut: Optional[datetime] = None
    date_heure_fin: Optional[datetime] = None
    duree: Optional[int] = Field(default=None, ge=1)
    # Liste fournie => remplace toutes les affectations
    techniciens: Optional[List[AffectationIn]] = Field(default=None, min_length=1)


class AvailabilityCheck(BaseModel):
    model_config = ConfigDict(extra="forbid")

    technicien_id: int
    date_heure_debut: datetime
    date_heure_fin: datetime
    # Intervention en cours d’édition : ignorée dans la recherche de conflits
    exclude_intervention_id: Optional[int] = None

    @field_validator("date_heure_debut", "date_heure_fin")
    @classmethod
    def _utc(cls, v: datetime) -> datetime:
        return to_utc(v)


class AffectationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    role: str
    commentaire: Optional[str] = None
    technicien: TechnicienBrief


class InterventionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    date_heure_debut: Optional[datetime] = None
    date_heure_fin: Optional[datetime] = None
    duree: Optional[int] = None
    created_at: datetime
    mission: MissionBrief
    techniciens: List[AffectationOut] = []

    @field_validator("date_heure_debut", "date_heure_fin")
    @classmethod
    def _utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_utc(v)


class ConflitOut(BaseModel):
    id: int
    mission: str
    client: str
    date_debut: Optional[datetime] = None
    date_fin: Optional[datetime] = None

    @field_validator("date_debut", "date_fin")
    @classmethod
    def _utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_utc(v)


class AvailabilityOut(BaseModel):
    technicien_id: int
    technicien: str
    specialite: str
    available: bool
    debut: datetime
    fin: datetime
    conflits: List[ConflitOut] = []
