from fastapi import APIRouter

from fieldops.core.settings import settings

"""
API Health.

Rôle (fonctionnel) :
- Endpoint simple pour vérifier que l’API répond.
- Expose l’environnement et la politique de numérotation des missions active.
"""

router = APIRouter()


@router.get("/health")
def health():
    return {
        "status": "ok",
        "env": settings.ENV,
        "mission_number_policy": settings.MISSION_NUMBER_POLICY,
    }
