"""
fieldops.services

Package “services” : logique applicative indépendante des endpoints HTTP.

Rôle (fonctionnel) :
- numbering : calcul des numéros de documents (INT / DEV / FAC), à partir d’un store injectable.
- documents : persistance d’un document numéroté avec retry borné sur conflit d’unicité.
- devis_calculator : montants HT / TVA / TTC d’un devis (Decimal, arrondi au centime).
- planning : conflits de créneaux d’un technicien (contrôle de disponibilité).
- dashboard : compteurs agrégés par statut pour l’écran d’accueil.

Principe :
- fieldops.api = transport HTTP (routes, validation, dépendances)
- fieldops.services = orchestration métier (réutilisable, testable sans HTTP)
- fieldops.models / fieldops.schemas = persistance et contrats
"""
