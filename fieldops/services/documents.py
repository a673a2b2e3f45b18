from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, TypeVar

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from fieldops.core.errors import AppHTTPException
from fieldops.core.settings import settings
from fieldops.db.store import SqlDocumentStore
from fieldops.services.numbering import DocumentKind, NumberGenerator

"""
Documents Service (allocation des numéros à l’écriture).

Rôle (fonctionnel) :
- Relie le générateur de numéros à la persistance :
  numéro calculé -> objet construit -> commit.
- Si le commit échoue sur la contrainte UNIQUE (deux requêtes ont calculé le même numéro,
  ou collision de la variante aléatoire), rollback puis nouvelle tentative avec un numéro recalculé.
- Au-delà de NUMBER_MAX_ATTEMPTS tentatives : 409 REFERENCE_CONFLICT.

Notes :
- `build(reference)` doit construire un objet neuf à chaque tentative : après rollback,
  les objets ajoutés à la session sont détachés.
- Une autre contrainte UNIQUE que le numéro peut être violée (ex : devis déjà facturé par une requête
  concurrente) : `on_conflict()` est appelé après chaque rollback pour la détecter et lever l’erreur métier
  adaptée, au lieu de retenter jusqu’au 409.
"""

log = logging.getLogger("fieldops.documents")

T = TypeVar("T")


def number_generator(db: AsyncSession) -> NumberGenerator:
    """Générateur configuré depuis les settings (politique missions)."""
    return NumberGenerator(SqlDocumentStore(db), mission_policy=settings.MISSION_NUMBER_POLICY)


async def persist_with_reference(
    db: AsyncSession,
    generator: NumberGenerator,
    kind: DocumentKind,
    build: Callable[[str], T],
    *,
    max_attempts: int | None = None,
    before_commit: Callable[[T], Any] | None = None,
    on_conflict: Callable[[], Awaitable[None]] | None = None,
) -> T:
    """
    Persiste un document numéroté avec retry borné sur conflit d’unicité.

    - before_commit(obj) : hook optionnel (ex : rattacher la facture au devis dans la même transaction).
    - on_conflict() : vérification après rollback ; lève si le conflit ne vient pas du numéro.
    """
    attempts = max(1, max_attempts or settings.NUMBER_MAX_ATTEMPTS)

    for attempt in range(1, attempts + 1):
        reference = await generator.generate(kind)
        obj = build(reference)
        db.add(obj)
        if before_commit is not None:
            before_commit(obj)

        try:
            await db.commit()
        except IntegrityError:
            await db.rollback()
            if on_conflict is not None:
                await on_conflict()
            log.warning(
                "reference conflict",
                extra={"kind": str(kind), "reference": reference, "attempt": attempt},
            )
            continue

        log.info("document created", extra={"kind": str(kind), "reference": reference, "attempt": attempt})
        return obj

    raise AppHTTPException(
        409,
        "REFERENCE_CONFLICT",
        f"Impossible de générer un numéro de {kind} unique",
        details={"attempts": attempts},
    )
