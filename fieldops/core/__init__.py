"""
fieldops.core

Package “cœur” de l’application : tout ce qui est transversal et ne dépend pas d’un domaine
métier (missions, devis, factures…).

- settings
  Configuration par variables d’environnement (DB, CORS, politique de numérotation, délais).

- errors
  Format d’erreur API uniforme (code, message, status, request_id, timestamp) et
  AppHTTPException pour les erreurs métier.

- logging
  Logs JSON (un event = une ligne) enrichis du request_id et d’extras structurés.

- request_id
  Identifiant de corrélation par requête (X-Request-Id), porté par un ContextVar.

- pagination
  Normalisation page/limit et métadonnées de liste (total, page, limit, totalPages).
"""
