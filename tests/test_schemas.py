"""Input normalization and validation rules carried by the Pydantic schemas."""

import pytest
from pydantic import ValidationError

from fieldops.schemas.clients import ClientCreate, format_telephone
from fieldops.schemas.devis import DevisValidation, LigneIn
from fieldops.schemas.missions import MissionCreate
from fieldops.schemas.rapports import RapportValidation


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("0712345678", "07 12 34 56 78"),
        ("07.12.34.56.78", "07 12 34 56 78"),
        ("07123456", "07 12 34 56"),
        ("+225 07 12 34 56 78", "+225 07 12 34 56 78"),
        ("  123  ", "123"),
        (None, None),
    ],
)
def test_format_telephone(raw, expected):
    assert format_telephone(raw) == expected


def test_client_create_normalizes_fields():
    c = ClientCreate(nom="  Awa Traoré ", email=" Awa@Example.COM ", telephone="0102030405")
    assert c.nom == "Awa Traoré"
    assert c.email == "awa@example.com"
    assert c.telephone == "01 02 03 04 05"
    assert c.type_de_cart == "Standard"


def test_client_create_rejects_bad_email_and_extra_fields():
    with pytest.raises(ValidationError):
        ClientCreate(nom="Awa", email="not-an-email")
    with pytest.raises(ValidationError):
        ClientCreate(nom="Awa", email="awa@example.com", statut="active")


def test_mission_naive_date_is_taken_as_utc():
    m = MissionCreate(
        nature_intervention="Dépannage",
        objectif_du_contrat="Rétablir le courant",
        date_sortie_fiche_intervention="2025-06-01T08:00:00",
        client_id=1,
    )
    assert m.date_sortie_fiche_intervention.utcoffset().total_seconds() == 0
    assert m.priorite == "normale"


@pytest.mark.parametrize("ligne", [
    {"designation": "ab", "quantite": 1, "prix_unitaire": 10},
    {"designation": "Pièce", "quantite": 0, "prix_unitaire": 10},
    {"designation": "Pièce", "quantite": 1, "prix_unitaire": -1},
])
def test_invalid_devis_lines(ligne):
    with pytest.raises(ValidationError):
        LigneIn(**ligne)


@pytest.mark.parametrize("statut", ["facture", "brouillon", "inconnu"])
def test_devis_validation_rejects_non_decision_statuses(statut):
    with pytest.raises(ValidationError):
        DevisValidation(statut=statut)


def test_devis_validation_keeps_plain_status_value():
    assert DevisValidation(statut="valide_dg").statut == "valide_dg"


def test_rapport_validation_requires_a_decision():
    with pytest.raises(ValidationError):
        RapportValidation(statut="soumis")
    assert RapportValidation(statut="rejete", commentaire="Photos floues").statut == "rejete"
