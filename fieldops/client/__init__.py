"""
fieldops.client

Client HTTP de l’API (httpx async) : ApiClient + services par ressource.
"""

from fieldops.client.api import ApiClient, ApiError, ApiResponse, query
from fieldops.client.services import (
    ClientService,
    DashboardService,
    DevisService,
    FactureService,
    InterventionService,
    MissionService,
    RapportService,
    TechnicienService,
)

__all__ = [
    "ApiClient",
    "ApiError",
    "ApiResponse",
    "query",
    "ClientService",
    "DashboardService",
    "DevisService",
    "FactureService",
    "InterventionService",
    "MissionService",
    "RapportService",
    "TechnicienService",
]
