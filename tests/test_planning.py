"""Slot conflicts for a technician: inclusive bounds, undated interventions ignored."""

from datetime import datetime, timezone

from fieldops.models import Intervention, InterventionTechnicien
from fieldops.services.planning import find_conflicts


def at(hour: int, minute: int = 0) -> datetime:
    return datetime(2026, 3, 14, hour, minute, tzinfo=timezone.utc)


async def add_intervention(db, mission_id, technicien_id, debut=None, fin=None):
    row = Intervention(
        mission_id=mission_id,
        date_heure_debut=debut,
        date_heure_fin=fin,
        techniciens=[InterventionTechnicien(technicien_id=technicien_id)],
    )
    db.add(row)
    await db.commit()
    return row


async def test_bounds_are_inclusive(test_db, mission, technicien_row):
    row = await add_intervention(test_db, mission["id"], technicien_row.id, at(8), at(10))

    ending = await find_conflicts(test_db, technicien_row.id, at(10), at(11))
    starting = await find_conflicts(test_db, technicien_row.id, at(7), at(8))
    after = await find_conflicts(test_db, technicien_row.id, at(10, 1), at(11))

    assert [i.id for i in ending] == [row.id]
    assert [i.id for i in starting] == [row.id]
    assert after == []


async def test_results_are_ordered_and_exclusion_applies(test_db, mission, technicien_row):
    late = await add_intervention(test_db, mission["id"], technicien_row.id, at(14), at(16))
    early = await add_intervention(test_db, mission["id"], technicien_row.id, at(8), at(10))

    day = await find_conflicts(test_db, technicien_row.id, at(0), at(23))
    without_early = await find_conflicts(test_db, technicien_row.id, at(0), at(23), exclude_id=early.id)

    assert [i.id for i in day] == [early.id, late.id]
    assert [i.id for i in without_early] == [late.id]


async def test_undated_intervention_never_conflicts(test_db, mission, technicien_row):
    await add_intervention(test_db, mission["id"], technicien_row.id)

    assert await find_conflicts(test_db, technicien_row.id, at(0), at(23)) == []
