"""
fieldops.models

Package ORM (SQLAlchemy) : entités persistées en base.

Rôle (fonctionnel) :
- Référentiels : TypePaiement, Specialite.
- Acteurs : Client, Technicien.
- Documents métier numérotés : Mission (INT-…), Devis (DEV-…), Facture (FAC-…).
- Rapports de mission (+ images).
- Interventions (créneaux) et affectations des techniciens.
- Expose explicitement l’API publique du package via __all__.
"""

from fieldops.models.type_paiement import TypePaiement
from fieldops.models.client import Client
from fieldops.models.specialite import Specialite
from fieldops.models.technicien import Technicien
from fieldops.models.mission import Mission
from fieldops.models.devis import Devis, DevisLigne
from fieldops.models.facture import Facture, FactureLigne
from fieldops.models.rapport import Rapport, RapportImage
from fieldops.models.intervention import Intervention, InterventionTechnicien

__all__ = [
    "TypePaiement",
    "Client",
    "Specialite",
    "Technicien",
    "Mission",
    "Devis",
    "DevisLigne",
    "Facture",
    "FactureLigne",
    "Rapport",
    "RapportImage",
    "Intervention",
    "InterventionTechnicien",
]
