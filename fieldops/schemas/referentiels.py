from __future__ import annotations

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

"""
Schemas Référentiels : types de paiement et spécialités.
"""


class TypePaiementCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    libelle: str = Field(..., min_length=2, max_length=100)
    description: Optional[str] = Field(default=None, max_length=2000)
    delai_paiement: int = Field(default=30, ge=0, le=365)
    taux_remise: Decimal = Field(default=Decimal("0"), ge=Decimal("0"), le=Decimal("100"))
    actif: bool = True


class TypePaiementOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    libelle: str
    description: Optional[str] = None
    delai_paiement: int
    taux_remise: Decimal
    actif: bool


class SpecialiteCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    libelle: str = Field(..., min_length=2, max_length=100)
    description: Optional[str] = Field(default=None, max_length=2000)


class SpecialiteOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    libelle: str
    description: Optional[str] = None
