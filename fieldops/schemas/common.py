from __future__ import annotations

from typing import Generic, Optional, TypeVar

from pydantic import BaseModel

from fieldops.core.pagination import PaginationMeta

"""
Schemas communs.

Enveloppe de réponse unique côté API :
{
  "success": true,
  "message": "Missions récupérées avec succès",
  "data": [...],
  "meta": {"total": 95, "page": 2, "limit": 10, "totalPages": 10}   # listes paginées uniquement
}
"""

T = TypeVar("T")


class Envelope(BaseModel, Generic[T]):
    success: bool = True
    message: str = "Succès"
    data: T
    meta: Optional[PaginationMeta] = None
