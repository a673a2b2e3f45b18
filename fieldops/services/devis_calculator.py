from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, List, Protocol

"""
Devis Calculator.

Rôle (fonctionnel) :
- Calcule les montants d’un devis à partir de ses lignes et du taux de TVA (en %) :
  - montant HT de chaque ligne = quantité x prix unitaire, arrondi au centime,
  - HT total = somme des lignes,
  - TVA = HT x taux / 100, arrondie au centime,
  - TTC = HT + TVA.
- Arrondi commercial (demi vers le haut) en Decimal : pas d’erreur de flottant sur les montants.
"""

CENT = Decimal("0.01")
HUNDRED = Decimal("100")


class LigneLike(Protocol):
    quantite: Decimal
    prix_unitaire: Decimal


def to_cents(value: Decimal) -> Decimal:
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def montant_ligne(ligne: LigneLike) -> Decimal:
    return to_cents(Decimal(ligne.quantite) * Decimal(ligne.prix_unitaire))


@dataclass(frozen=True)
class Montants:
    montant_ht: Decimal
    montant_tva: Decimal
    montant_ttc: Decimal
    lignes_ht: List[Decimal] = field(default_factory=list)


def calculate_montants(lignes: Iterable[LigneLike], taux_tva: Decimal) -> Montants:
    lignes_ht = [montant_ligne(li) for li in lignes]
    ht = to_cents(sum(lignes_ht, Decimal("0")))
    tva = to_cents(ht * Decimal(taux_tva) / HUNDRED)
    return Montants(montant_ht=ht, montant_tva=tva, montant_ttc=to_cents(ht + tva), lignes_ht=lignes_ht)

