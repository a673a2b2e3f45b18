from __future__ import annotations

import logging
import random
import re
from datetime import date
from enum import Enum
from typing import Callable, Optional

from fieldops.db.store import DocumentStore

"""
Numbering Service (numéros de documents métier).

Rôle (fonctionnel) :
- Produit le prochain numéro lisible d’un document : <PREFIXE>-<PERIODE>-<SEQUENCE>.
  - mission : INT, devis : DEV, facture : FAC
  - période : année (YYYY) ; séquence : entier complété à 4 chiffres.
- Variante “daily_random” (missions uniquement, opt-in) : INT-YYYYMMDD-NNNN avec NNNN tiré au hasard
  dans [0, 9999]. Deux appels le même jour peuvent produire le même numéro : ce n’est pas détecté ici.

Comportement :
- 1 lecture par appel (dernier numéro du préfixe, tri descendant), aucune écriture.
- Premier document de la période => séquence 1.
- Ancien numéro illisible (3e segment non numérique) => traité comme 0, donc séquence 1.
- Le numéro n’est pas réservé : deux requêtes simultanées peuvent calculer le même “suivant”.
  L’unicité réelle vient de la contrainte UNIQUE en base (voir services.documents).
- Les erreurs du store remontent telles quelles (pas de retry ici).
"""

log = logging.getLogger("fieldops.numbering")

SEQUENCE_WIDTH = 4
RANDOM_SUFFIX_MAX = 9999

_LEADING_DIGITS = re.compile(r"\s*(\d+)")


class DocumentKind(str, Enum):
    MISSION = "mission"
    DEVIS = "devis"
    FACTURE = "facture"

    def __str__(self) -> str:
        return self.value


class NumberPolicy(str, Enum):
    SEQUENTIAL = "sequential"
    DAILY_RANDOM = "daily_random"


PREFIXES = {
    DocumentKind.MISSION: "INT",
    DocumentKind.DEVIS: "DEV",
    DocumentKind.FACTURE: "FAC",
}


def parse_sequence(reference: Optional[str]) -> int:
    """
    Extrait la séquence (3e segment séparé par '-') d’un numéro existant.

    Lecture permissive : chiffres en tête du segment ("0007" -> 7, "12b" -> 12),
    0 si le segment est absent ou ne commence pas par un chiffre.
    """
    if not reference:
        return 0
    parts = reference.split("-")
    if len(parts) < 3:
        return 0
    m = _LEADING_DIGITS.match(parts[2])
    return int(m.group(1)) if m else 0


def format_reference(prefix: str, sequence: int) -> str:
    return f"{prefix}{sequence:0{SEQUENCE_WIDTH}d}"


def yearly_prefix(kind: DocumentKind, today: date) -> str:
    return f"{PREFIXES[kind]}-{today.year}-"


def daily_prefix(kind: DocumentKind, today: date) -> str:
    return f"{PREFIXES[kind]}-{today:%Y%m%d}-"


class NumberGenerator:
    """
    Générateur de numéros, lié à un store.

    - clock : fournit la date courante (injectable en test), date.today par défaut.
    - rng : source aléatoire de la variante daily_random.
    - mission_policy : politique choisie pour les missions (une seule à la fois, jamais mélangées).
    """

    def __init__(
        self,
        store: DocumentStore,
        *,
        mission_policy: NumberPolicy | str = NumberPolicy.SEQUENTIAL,
        clock: Callable[[], date] = date.today,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._store = store
        self._clock = clock
        self._rng = rng or random.Random()
        self.mission_policy = NumberPolicy(mission_policy)

    def policy_for(self, kind: DocumentKind) -> NumberPolicy:
        if kind is DocumentKind.MISSION:
            return self.mission_policy
        return NumberPolicy.SEQUENTIAL

    async def generate(self, kind: DocumentKind | str) -> str:
        kind = DocumentKind(kind)
        today = self._clock()

        if self.policy_for(kind) is NumberPolicy.DAILY_RANDOM:
            return self.random_reference(kind, today)
        return await self.sequential_reference(kind, today)

    async def sequential_reference(self, kind: DocumentKind, today: date) -> str:
        prefix = yearly_prefix(kind, today)
        last = await self._store.last_reference(kind.value, prefix)
        reference = format_reference(prefix, parse_sequence(last) + 1)
        log.debug("next reference", extra={"kind": kind.value, "reference": reference})
        return reference

    def random_reference(self, kind: DocumentKind, today: date) -> str:
        return format_reference(daily_prefix(kind, today), self._rng.randint(0, RANDOM_SUFFIX_MAX))
