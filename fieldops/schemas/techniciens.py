from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from fieldops.schemas.referentiels import SpecialiteOut


class TechnicienCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    nom: str = Field(..., min_length=2, max_length=100)
    prenom: str = Field(..., min_length=2, max_length=100)
    contact: str = Field(..., min_length=5, max_length=100)
    specialite_id: int


class TechnicienUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    nom: Optional[str] = Field(default=None, min_length=2, max_length=100)
    prenom: Optional[str] = Field(default=None, min_length=2, max_length=100)
    contact: Optional[str] = Field(default=None, min_length=5, max_length=100)
    specialite_id: Optional[int] = None


class TechnicienBrief(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    nom: str
    prenom: str


class TechnicienOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    nom: str
    prenom: str
    contact: str
    created_at: datetime
    specialite: SpecialiteOut
