from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from fieldops.schemas.missions import MissionBrief
from fieldops.schemas.techniciens import TechnicienBrief


class RapportStatut(str, Enum):
    SOUMIS = "soumis"
    VALIDE = "valide"
    REJETE = "rejete"


class ImageIn(BaseModel):
    model_config = ConfigDict(extra="forbid")

    url: str = Field(..., min_length=1, max_length=500)
    description: Optional[str] = Field(default=None, max_length=2000)


class RapportCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    titre: str = Field(..., min_length=3, max_length=255)
    contenu: str = Field(..., min_length=10)
    mission_id: int
    technicien_id: int
    images: Optional[List[ImageIn]] = None


class RapportUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    titre: Optional[str] = Field(default=None, min_length=3, max_length=255)
    contenu: Optional[str] = Field(default=None, min_length=10)
    # Liste fournie => remplace toutes les images existantes
    images: Optional[List[ImageIn]] = None


class RapportValidation(BaseModel):
    model_config = ConfigDict(extra="forbid", use_enum_values=True)

    statut: RapportStatut
    commentaire: Optional[str] = Field(default=None, max_length=2000)

    @field_validator("statut")
    @classmethod
    def _decision(cls, v: RapportStatut) -> RapportStatut:
        if v == RapportStatut.SOUMIS:
            raise ValueError("le statut doit être \"valide\" ou \"rejete\"")
        return v


class ImageOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    url: str
    description: Optional[str] = None
    ordre: int


class RapportOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    titre: str
    contenu: str
    statut: str
    commentaire: Optional[str] = None
    date_validation: Optional[datetime] = None
    created_at: datetime
    mission: MissionBrief
    technicien: TechnicienBrief
    images: List[ImageOut] = []
