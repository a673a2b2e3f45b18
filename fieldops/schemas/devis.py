from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from fieldops.schemas.clients import ClientBrief
from fieldops.schemas.missions import MissionBrief

"""
Schemas Devis (Pydantic).

Rôle (fonctionnel) :
- Contrat HTTP des devis et de leurs lignes.
- Validation des lignes : désignation >= 3 caractères, quantité > 0, prix unitaire >= 0,
  au moins une ligne ; TVA entre 0 et 100 %.
- Les montants (HT, TVA, TTC) ne sont jamais saisis : ils sont calculés côté serveur.
"""


class DevisStatut(str, Enum):
    BROUILLON = "brouillon"
    EN_ATTENTE = "en_attente"
    VALIDE_DG = "valide_dg"
    REFUSE_DG = "refuse_dg"
    VALIDE_PDG = "valide_pdg"
    REFUSE_PDG = "refuse_pdg"
    ACCEPTE_CLIENT = "accepte_client"
    REFUSE_CLIENT = "refuse_client"
    FACTURE = "facture"


# Statuts dans lesquels un devis reste modifiable
EDITABLE_STATUTS = {DevisStatut.BROUILLON.value, DevisStatut.EN_ATTENTE.value}

# Statuts autorisant la conversion en facture
CONVERTIBLE_STATUTS = {DevisStatut.ACCEPTE_CLIENT.value, DevisStatut.VALIDE_PDG.value}


class LigneIn(BaseModel):
    model_config = ConfigDict(extra="forbid")

    designation: str = Field(..., min_length=3, max_length=255)
    quantite: Decimal = Field(..., gt=Decimal("0"))
    prix_unitaire: Decimal = Field(..., ge=Decimal("0"))

    @field_validator("designation", mode="before")
    @classmethod
    def _strip(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip()
        return v


class DevisCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    client_id: int
    mission_id: Optional[int] = None
    titre: str = Field(..., min_length=3, max_length=255)
    description: Optional[str] = Field(default=None, max_length=5000)
    taux_tva: Decimal = Field(..., ge=Decimal("0"), le=Decimal("100"))
    date_validite: date
    lignes: List[LigneIn] = Field(..., min_length=1)


class DevisUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    titre: Optional[str] = Field(default=None, min_length=3, max_length=255)
    description: Optional[str] = Field(default=None, max_length=5000)
    taux_tva: Optional[Decimal] = Field(default=None, ge=Decimal("0"), le=Decimal("100"))
    date_validite: Optional[date] = None
    lignes: Optional[List[LigneIn]] = Field(default=None, min_length=1)


class DevisValidation(BaseModel):
    """Décision DG / PDG / client sur un devis."""
    model_config = ConfigDict(extra="forbid", use_enum_values=True)

    statut: DevisStatut
    commentaire_dg: Optional[str] = Field(default=None, max_length=2000)
    commentaire_pdg: Optional[str] = Field(default=None, max_length=2000)

    @field_validator("statut")
    @classmethod
    def _not_facture(cls, v: DevisStatut) -> DevisStatut:
        if v in (DevisStatut.FACTURE, DevisStatut.BROUILLON):
            raise ValueError("statut non autorisé pour une validation")
        return v


class LigneOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    designation: str
    quantite: Decimal
    prix_unitaire: Decimal
    montant_ht: Decimal
    ordre: int


class DevisOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    numero: str
    titre: str
    description: Optional[str] = None
    statut: str

    taux_tva: Decimal
    montant_ht: Decimal
    montant_tva: Decimal
    montant_ttc: Decimal

    date_creation: datetime
    date_validite: date

    date_validation_dg: Optional[datetime] = None
    valide_par: Optional[str] = None
    commentaire_dg: Optional[str] = None
    date_validation_pdg: Optional[datetime] = None
    valide_par_pdg: Optional[str] = None
    commentaire_pdg: Optional[str] = None

    client: ClientBrief
    mission: Optional[MissionBrief] = None
    lignes: List[LigneOut] = []
