"""
fieldops.api

Routes FastAPI regroupées par domaine ; point d’entrée : fieldops.api.router.api_router.
"""
