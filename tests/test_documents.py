"""Reference allocation at write time: UNIQUE conflict -> rollback + retry, bounded."""

from datetime import date, datetime, timezone

import pytest
from sqlalchemy import func, select

from fieldops.core.errors import AppHTTPException, business_rule
from fieldops.db.store import SqlDocumentStore
from fieldops.models import Mission
from fieldops.services.documents import persist_with_reference
from fieldops.services.numbering import DocumentKind, NumberGenerator

TODAY = date(2025, 6, 1)


class StaleStore:
    """Always answers with a stale "last reference", as a concurrent writer would see it."""

    def __init__(self, answers):
        self.answers = list(answers)

    async def last_reference(self, kind, prefix):
        return self.answers.pop(0) if len(self.answers) > 1 else self.answers[0]

    async def count(self, model, *criteria):
        return 0


def build_mission(client_id):
    def build(reference):
        return Mission(
            num_intervention=reference,
            nature_intervention="Dépannage",
            objectif_du_contrat="Rétablir le courant",
            date_sortie_fiche_intervention=datetime(2025, 6, 1, 8, 0, tzinfo=timezone.utc),
            client_id=client_id,
        )

    return build


async def test_conflicting_reference_is_retried_with_the_next_one(test_db, client_row):
    test_db.add(build_mission(client_row.id)("INT-2025-0001"))
    await test_db.commit()

    # 1st attempt computes 0001 (stale read) and collides, 2nd reads 0001 and gets 0002
    generator = NumberGenerator(StaleStore([None, "INT-2025-0001"]), clock=lambda: TODAY)
    mission = await persist_with_reference(test_db, generator, DocumentKind.MISSION, build_mission(client_row.id))

    assert mission.num_intervention == "INT-2025-0002"
    total = (await test_db.execute(select(func.count()).select_from(Mission))).scalar_one()
    assert total == 2


async def test_exhausted_attempts_raise_reference_conflict(test_db, client_row):
    test_db.add(build_mission(client_row.id)("INT-2025-0001"))
    await test_db.commit()

    generator = NumberGenerator(StaleStore([None]), clock=lambda: TODAY)
    with pytest.raises(AppHTTPException) as exc:
        await persist_with_reference(
            test_db, generator, DocumentKind.MISSION, build_mission(client_row.id), max_attempts=3
        )

    assert exc.value.status_code == 409
    assert exc.value.detail["code"] == "REFERENCE_CONFLICT"
    assert exc.value.detail["details"] == {"attempts": 3}


async def test_sql_store_reads_highest_reference_for_prefix(test_db, client_row):
    build = build_mission(client_row.id)
    for ref in ("INT-2025-0003", "INT-2025-0010", "INT-2024-0099"):
        test_db.add(build(ref))
    await test_db.commit()

    store = SqlDocumentStore(test_db)

    assert await store.last_reference("mission", "INT-2025-") == "INT-2025-0010"
    assert await store.last_reference("mission", "INT-2026-") is None
    assert await store.count(Mission) == 3
    assert await store.count(Mission, Mission.num_intervention.startswith("INT-2025-")) == 2


async def test_sequential_numbers_against_the_database(test_db, client_row):
    generator = NumberGenerator(SqlDocumentStore(test_db), clock=lambda: TODAY)
    build = build_mission(client_row.id)

    refs = [
        (await persist_with_reference(test_db, generator, DocumentKind.MISSION, build)).num_intervention
        for _ in range(3)
    ]

    assert refs == ["INT-2025-0001", "INT-2025-0002", "INT-2025-0003"]


async def test_conflict_hook_can_turn_the_conflict_into_a_business_error(test_db, client_row):
    test_db.add(build_mission(client_row.id)("INT-2025-0001"))
    await test_db.commit()
    checks = []

    async def on_conflict():
        checks.append(True)
        raise business_rule("Document déjà créé")

    generator = NumberGenerator(StaleStore([None]), clock=lambda: TODAY)
    with pytest.raises(AppHTTPException) as exc:
        await persist_with_reference(
            test_db, generator, DocumentKind.MISSION, build_mission(client_row.id), on_conflict=on_conflict
        )

    assert exc.value.status_code == 400
    assert exc.value.detail["code"] == "BUSINESS_RULE"
    assert len(checks) == 1


async def test_conflict_hook_is_not_called_without_conflict(test_db, client_row):
    checks = []

    async def on_conflict():
        checks.append(True)

    generator = NumberGenerator(SqlDocumentStore(test_db), clock=lambda: TODAY)
    await persist_with_reference(
        test_db, generator, DocumentKind.MISSION, build_mission(client_row.id), on_conflict=on_conflict
    )

    assert checks == []
