from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

"""
Core Pagination.

Rôle (fonctionnel) :
- Normalise les paramètres page/limit reçus du client en un couple offset/limit borné.
- Produit les métadonnées de pagination renvoyées dans le champ `meta` des listes.

Politique :
- Permissive : toute valeur (absente, nulle, négative, trop grande) est ramenée dans les bornes,
  jamais rejetée.
- Les paramètres de requête sont lus comme un parseInt : chiffres en tête (“12abc” => 12),
  sinon valeur absente (“abc” => défaut).
- summarize() ne re-borne pas `limit` : il doit avoir été normalisé avant (limit=0 => ZeroDivisionError).
"""

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


@dataclass(frozen=True)
class Pagination:
    """Résultat de normalisation : offset (skip) + taille (take) + rappel page/limit."""
    skip: int
    take: int
    page: int
    limit: int


class PaginationMeta(BaseModel):
    """Métadonnées de pagination exposées au front (clé JSON `totalPages`)."""
    model_config = ConfigDict(populate_by_name=True)

    total: int
    page: int
    limit: int
    total_pages: int = Field(serialization_alias="totalPages", validation_alias="totalPages")


def parse_int(value: Optional[str]) -> Optional[int]:
    """Entier en tête de chaîne, None si la chaîne n’en commence pas par un."""
    if value is None:
        return None
    m = _LEADING_INT.match(value)
    return int(m.group(1)) if m else None


def normalize(page: Optional[int] = None, limit: Optional[int] = None) -> Pagination:
    """
    Ramène (page, limit) dans les bornes et calcule l’offset.

    - page : max(1, page) ; absente ou 0 => 1
    - limit : borné à [1, 100] ; absent ou 0 => 10
    """
    p = max(1, page or DEFAULT_PAGE)
    lim = min(MAX_LIMIT, max(1, limit or DEFAULT_LIMIT))
    return Pagination(skip=(p - 1) * lim, take=lim, page=p, limit=lim)


def summarize(total: int, page: int, limit: int) -> PaginationMeta:
    """Métadonnées après comptage : totalPages = ceil(total / limit)."""
    return PaginationMeta(total=total, page=page, limit=limit, total_pages=math.ceil(total / limit))
