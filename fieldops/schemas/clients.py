from __future__ import annotations

import re
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from fieldops.schemas.referentiels import TypePaiementOut

"""
Schemas Clients (Pydantic).

Rôle (fonctionnel) :
- Contrat HTTP de création / mise à jour / lecture d’un client.
- Normalisation à l’entrée :
  - téléphone regroupé par paires de chiffres (10 chiffres : "07 12 34 56 78", 8 chiffres : "07 12 34 56"),
    laissé tel quel sinon (numéros internationaux),
  - email en minuscules, chaînes nettoyées.
"""

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"

_NON_DIGITS = re.compile(r"[^\d]")


def format_telephone(value: Optional[str]) -> Optional[str]:
    """Regroupe les chiffres par paires pour les numéros locaux (8 ou 10 chiffres)."""
    if not value:
        return value
    digits = _NON_DIGITS.sub("", value)
    if len(digits) in (8, 10):
        return " ".join(digits[i:i + 2] for i in range(0, len(digits), 2))
    return value.strip()


class _ClientFields(BaseModel):
    model_config = ConfigDict(extra="forbid")

    @field_validator("telephone", mode="before", check_fields=False)
    @classmethod
    def _telephone(cls, v: Any) -> Any:
        if isinstance(v, str):
            return format_telephone(v)
        return v

    @field_validator("email", mode="before", check_fields=False)
    @classmethod
    def _email_lower(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("nom", "entreprise", "localisation", mode="before", check_fields=False)
    @classmethod
    def _strip(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip()
        return v


class ClientCreate(_ClientFields):
    nom: str = Field(..., min_length=2, max_length=255)
    email: str = Field(..., max_length=255, pattern=EMAIL_PATTERN)
    telephone: Optional[str] = Field(default=None, max_length=30)
    entreprise: Optional[str] = Field(default=None, max_length=255)
    type_de_cart: str = Field(default="Standard", max_length=50)
    type_paiement_id: Optional[int] = None
    localisation: Optional[str] = Field(default=None, max_length=255)


class ClientUpdate(_ClientFields):
    nom: Optional[str] = Field(default=None, min_length=2, max_length=255)
    email: Optional[str] = Field(default=None, max_length=255, pattern=EMAIL_PATTERN)
    telephone: Optional[str] = Field(default=None, max_length=30)
    entreprise: Optional[str] = Field(default=None, max_length=255)
    type_de_cart: Optional[str] = Field(default=None, max_length=50)
    type_paiement_id: Optional[int] = None
    statut: Optional[str] = Field(default=None, pattern=r"^(active|inactive)$")
    localisation: Optional[str] = Field(default=None, max_length=255)


class ClientBrief(BaseModel):
    """Client embarqué dans les missions / devis / factures."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    nom: str
    email: str
    entreprise: Optional[str] = None


class ClientOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    nom: str
    email: str
    telephone: Optional[str] = None
    entreprise: Optional[str] = None
    type_de_cart: str
    statut: str
    localisation: Optional[str] = None
    date_inscription: datetime
    type_paiement: Optional[TypePaiementOut] = None
