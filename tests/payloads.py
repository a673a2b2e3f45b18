"""Request bodies shared by the API tests."""

from datetime import date, datetime, timedelta, timezone


def mission_payload(client_id: int, *, days: int = -1, **overrides) -> dict:
    payload = {
        "nature_intervention": "Maintenance climatisation",
        "objectif_du_contrat": "Contrat annuel de maintenance",
        "date_sortie_fiche_intervention": (datetime.now(timezone.utc) + timedelta(days=days)).isoformat(),
        "client_id": client_id,
    }
    payload.update(overrides)
    return payload


def devis_payload(client_id: int, **overrides) -> dict:
    payload = {
        "client_id": client_id,
        "titre": "Remplacement compresseur",
        "taux_tva": "20",
        "date_validite": (date.today() + timedelta(days=30)).isoformat(),
        "lignes": [
            {"designation": "Main d'oeuvre", "quantite": 2, "prix_unitaire": "45.50"},
            {"designation": "Compresseur", "quantite": 1, "prix_unitaire": "100"},
        ],
    }
    payload.update(overrides)
    return payload


def rapport_payload(mission_id: int, technicien_id: int, **overrides) -> dict:
    payload = {
        "titre": "Rapport de visite",
        "contenu": "Filtres nettoyés, pression vérifiée, unité remise en service.",
        "mission_id": mission_id,
        "technicien_id": technicien_id,
    }
    payload.update(overrides)
    return payload


def intervention_payload(mission_id: int, technicien_id: int, *, debut: str, fin: str, **overrides) -> dict:
    payload = {
        "mission_id": mission_id,
        "date_heure_debut": debut,
        "date_heure_fin": fin,
        "duree": 120,
        "techniciens": [{"technicien_id": technicien_id}],
    }
    payload.update(overrides)
    return payload
