"""
fieldops

Package racine de l’application backend de gestion d’interventions terrain.

Rôle (fonctionnel) :
- Contient tout le code applicatif (API, logique métier, accès DB, schémas, client HTTP).
- Sert de point d’ancrage pour les imports : `from fieldops...`

Organisation (haute-level) :
- fieldops.api      : routes FastAPI (contrats HTTP, dépendances, enveloppe de réponse)
- fieldops.core     : briques transverses (settings, errors, logs, request_id, pagination)
- fieldops.db       : base SQLAlchemy + session async + store injectable
- fieldops.models   : modèles ORM (clients, techniciens, missions, devis, factures, rapports)
- fieldops.schemas  : schémas Pydantic (entrées/sorties API)
- fieldops.services : logique métier (numérotation des documents, calcul des devis)
- fieldops.client   : client HTTP (httpx) consommant l’API, façon couche “services” du front
"""
