"""Devis amounts: per-line HT, VAT and TTC rounded half-up to the cent."""

from dataclasses import dataclass
from decimal import Decimal

from fieldops.services.devis_calculator import calculate_montants, montant_ligne, to_cents


@dataclass
class Ligne:
    quantite: Decimal
    prix_unitaire: Decimal


def test_amounts_from_lines():
    lignes = [Ligne(Decimal("2"), Decimal("45.50")), Ligne(Decimal("1"), Decimal("100"))]

    m = calculate_montants(lignes, Decimal("20"))

    assert m.lignes_ht == [Decimal("91.00"), Decimal("100.00")]
    assert m.montant_ht == Decimal("191.00")
    assert m.montant_tva == Decimal("38.20")
    assert m.montant_ttc == Decimal("229.20")


def test_half_cent_rounds_up():
    assert to_cents(Decimal("0.005")) == Decimal("0.01")
    assert to_cents(Decimal("2.675")) == Decimal("2.68")


def test_line_amount_is_rounded_before_summing():
    # 3 x 0.335 = 1.005 -> 1.01 per line
    lignes = [Ligne(Decimal("3"), Decimal("0.335"))] * 2
    assert montant_ligne(lignes[0]) == Decimal("1.01")
    assert calculate_montants(lignes, Decimal("0")).montant_ht == Decimal("2.02")


def test_zero_vat():
    m = calculate_montants([Ligne(Decimal("1.5"), Decimal("10"))], Decimal("0"))
    assert m.montant_tva == Decimal("0.00")
    assert m.montant_ttc == m.montant_ht == Decimal("15.00")
