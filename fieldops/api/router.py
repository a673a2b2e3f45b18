from fastapi import APIRouter

from fieldops.api.clients import router as clients_router
from fieldops.api.dashboard import router as dashboard_router
from fieldops.api.devis import router as devis_router
from fieldops.api.factures import router as factures_router
from fieldops.api.health import router as health_router
from fieldops.api.interventions import router as interventions_router
from fieldops.api.missions import router as missions_router
from fieldops.api.rapports import router as rapports_router
from fieldops.api.referentiels import router as referentiels_router
from fieldops.api.status import router as status_router
from fieldops.api.techniciens import router as techniciens_router

"""
Router principal de l’API.

Rôle (fonctionnel) :
- Regroupe les routeurs par domaine (référentiels, clients, techniciens, missions, devis, factures, rapports,
  interventions, tableau de bord).
- Les routes métier sont servies sous /api ; health et status restent à la racine (supervision).
"""

business_router = APIRouter(prefix="/api")

business_router.include_router(referentiels_router)
business_router.include_router(clients_router)
business_router.include_router(techniciens_router)
business_router.include_router(missions_router)
business_router.include_router(devis_router)
business_router.include_router(factures_router)
business_router.include_router(rapports_router)
business_router.include_router(interventions_router)
business_router.include_router(dashboard_router)

api_router = APIRouter()

api_router.include_router(health_router, tags=["health"])
api_router.include_router(status_router)
api_router.include_router(business_router)
