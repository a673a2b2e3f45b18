"""Number generator: sequential references per kind/year + opt-in daily random missions."""

import random
import re
from datetime import date

import pytest

from fieldops.services.numbering import (
    DocumentKind,
    NumberGenerator,
    NumberPolicy,
    format_reference,
    parse_sequence,
)

TODAY = date(2025, 3, 14)


class FakeStore:
    """In-memory store: remembers every lookup, answers like an ORDER BY ... DESC LIMIT 1."""

    def __init__(self, references=()):
        self.references = list(references)
        self.calls = []

    async def last_reference(self, kind, prefix):
        self.calls.append((kind, prefix))
        matching = sorted(r for r in self.references if r.startswith(prefix))
        return matching[-1] if matching else None

    async def count(self, model, *criteria):
        return len(self.references)


class BrokenStore(FakeStore):
    async def last_reference(self, kind, prefix):
        raise RuntimeError("db down")


def make_generator(store, **kwargs):
    return NumberGenerator(store, clock=lambda: TODAY, **kwargs)


async def test_first_mission_of_the_year_starts_at_one():
    store = FakeStore()
    assert await make_generator(store).generate(DocumentKind.MISSION) == "INT-2025-0001"
    assert store.calls == [("mission", "INT-2025-")]


async def test_next_reference_follows_the_highest_existing_one():
    store = FakeStore(["INT-2025-0007", "INT-2025-0042", "INT-2025-0013"])
    assert await make_generator(store).generate(DocumentKind.MISSION) == "INT-2025-0043"


async def test_previous_year_does_not_continue_the_sequence():
    store = FakeStore(["INT-2024-0099"])
    assert await make_generator(store).generate(DocumentKind.MISSION) == "INT-2025-0001"


@pytest.mark.parametrize(
    "kind, existing, expected",
    [
        (DocumentKind.DEVIS, ["DEV-2025-0009"], "DEV-2025-0010"),
        (DocumentKind.FACTURE, [], "FAC-2025-0001"),
        (DocumentKind.FACTURE, ["DEV-2025-0500", "FAC-2025-0002"], "FAC-2025-0003"),
    ],
)
async def test_each_kind_has_its_own_prefix_and_sequence(kind, existing, expected):
    assert await make_generator(FakeStore(existing)).generate(kind) == expected


async def test_kind_can_be_passed_as_string():
    assert await make_generator(FakeStore()).generate("devis") == "DEV-2025-0001"


async def test_malformed_last_reference_restarts_at_one():
    store = FakeStore(["INT-2025-abc"])
    assert await make_generator(store).generate(DocumentKind.MISSION) == "INT-2025-0001"


async def test_store_errors_propagate():
    with pytest.raises(RuntimeError):
        await make_generator(BrokenStore()).generate(DocumentKind.MISSION)


async def test_daily_random_missions_do_not_query_the_store():
    store = FakeStore()
    gen = make_generator(store, mission_policy="daily_random", rng=random.Random(7))

    reference = await gen.generate(DocumentKind.MISSION)

    assert re.fullmatch(r"INT-20250314-\d{4}", reference)
    assert store.calls == []


async def test_daily_random_is_reproducible_with_a_seeded_rng():
    a = make_generator(FakeStore(), mission_policy=NumberPolicy.DAILY_RANDOM, rng=random.Random(3))
    b = make_generator(FakeStore(), mission_policy=NumberPolicy.DAILY_RANDOM, rng=random.Random(3))
    assert await a.generate(DocumentKind.MISSION) == await b.generate(DocumentKind.MISSION)


class FixedRandom(random.Random):
    """Always draws the same suffix."""

    def randint(self, a, b):
        return 42


async def test_daily_random_can_repeat_a_reference_on_the_same_day():
    gen = make_generator(FakeStore(), mission_policy="daily_random", rng=FixedRandom())

    first = await gen.generate(DocumentKind.MISSION)
    second = await gen.generate(DocumentKind.MISSION)

    # aucun contrôle d’unicité dans le générateur : c’est la contrainte UNIQUE qui tranche
    assert first == second == "INT-20250314-0042"


async def test_daily_random_policy_only_applies_to_missions():
    gen = make_generator(FakeStore(), mission_policy="daily_random", rng=random.Random(1))
    assert await gen.generate(DocumentKind.DEVIS) == "DEV-2025-0001"


def test_unknown_policy_is_rejected():
    with pytest.raises(ValueError):
        NumberGenerator(FakeStore(), mission_policy="per_client")


@pytest.mark.parametrize(
    "reference, expected",
    [
        (None, 0),
        ("", 0),
        ("INT-2025", 0),
        ("INT-2025-0042", 42),
        ("INT-2025-12b", 12),
        ("INT-2025-x12", 0),
        ("INT-20250314-0815", 815),
    ],
)
def test_parse_sequence(reference, expected):
    assert parse_sequence(reference) == expected


def test_format_reference_pads_to_four_digits_without_truncating():
    assert format_reference("INT-2025-", 7) == "INT-2025-0007"
    assert format_reference("INT-2025-", 12345) == "INT-2025-12345"
