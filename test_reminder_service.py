import logging
from datetime import date, datetime, timezone

import pytest
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from chanjo import crud
from chanjo.core.exceptions import NotFoundError
from chanjo.models import Reminder
from chanjo.reminders import repository
from chanjo.reminders.service import ReminderService, build_reminders, regenerate_reminders, reminder_time
from chanjo.reminders.projection import DueDose
from conftest import JAN_1, make_baby


def _reminders(db, baby_id):
    db.expire_all()
    return db.query(Reminder).filter(Reminder.baby_id == baby_id).order_by(Reminder.scheduled_at, Reminder.type).all()


def _fingerprint(reminders):
    return sorted(
        (r.type, r.mother_id, r.baby_id, r.vaccine, r.vaccination_date, r.scheduled_at, r.sent) for r in reminders
    )


def test_reminder_time_is_fixed_at_two_pm():
    assert reminder_time(date(2024, 2, 12), 7) == datetime(2024, 2, 5, 14, 0)
    assert reminder_time(date(2024, 2, 12), 1) == datetime(2024, 2, 11, 14, 0)


def test_build_reminders_emits_weekly_then_daily_per_dose():
    rows = build_reminders("m1", "b1", [DueDose("OPV 1", date(2024, 2, 12)), DueDose("MR 1", date(2024, 9, 27))])
    assert [(r.type, r.vaccine) for r in rows] == [
        ("weekly", "OPV 1"),
        ("daily", "OPV 1"),
        ("weekly", "MR 1"),
        ("daily", "MR 1"),
    ]
    assert all(r.sent is False for r in rows)


def test_end_to_end_six_week_dose(db, mother, baby):
    crud.vaccination_schedule.seed(db, [("6 weeks", "BCG", "Tuberculosis")])

    regenerate_reminders(db, mother.id, baby.id, JAN_1)

    weekly, daily = sorted(_reminders(db, baby.id), key=lambda r: r.scheduled_at)
    assert weekly.type == "weekly"
    assert weekly.vaccination_date == date(2024, 2, 12)
    assert weekly.scheduled_at == datetime(2024, 2, 5, 14, 0)
    assert daily.type == "daily"
    assert daily.vaccination_date == date(2024, 2, 12)
    assert daily.scheduled_at == datetime(2024, 2, 11, 14, 0)
    assert weekly.sent is False and daily.sent is False
    assert weekly.mother_id == mother.id and weekly.baby_id == baby.id


def test_every_reminder_is_scheduled_at_two_pm(db, mother, baby, schedule):
    reminders = regenerate_reminders(db, mother.id, baby.id, JAN_1)

    assert reminders
    for r in reminders:
        assert (r.scheduled_at.hour, r.scheduled_at.minute, r.scheduled_at.second) == (14, 0, 0)
        lead = 7 if r.type == "weekly" else 1
        assert (r.vaccination_date - r.scheduled_at.date()).days == lead


def test_past_due_doses_get_no_reminders(db, mother, baby, schedule):
    regenerate_reminders(db, mother.id, baby.id, datetime(2024, 3, 1))

    vaccines = {r.vaccine for r in _reminders(db, baby.id)}
    assert vaccines == {"Pentavalent 3", "Measles-Rubella 1"}


def test_regenerate_is_idempotent(db, mother, baby, schedule):
    regenerate_reminders(db, mother.id, baby.id, JAN_1)
    first = _fingerprint(_reminders(db, baby.id))

    regenerate_reminders(db, mother.id, baby.id, JAN_1)
    regenerate_reminders(db, mother.id, baby.id, JAN_1)
    second = _fingerprint(_reminders(db, baby.id))

    assert first == second
    assert len(second) == 6


def test_regenerate_replaces_sent_history(db, mother, baby, schedule):
    regenerate_reminders(db, mother.id, baby.id, JAN_1)
    db.query(Reminder).filter(Reminder.baby_id == baby.id).update({"sent": True})
    db.commit()

    regenerate_reminders(db, mother.id, baby.id, JAN_1)

    reminders = _reminders(db, baby.id)
    assert len(reminders) == 6
    assert not any(r.sent for r in reminders)


def test_birth_date_correction_recomputes(db, mother, baby, schedule):
    now = datetime(2024, 3, 1)
    regenerate_reminders(db, mother.id, baby.id, now)
    assert len(_reminders(db, baby.id)) == 4

    crud.mother.update_birth_date(db, mother_id=mother.id, baby_id=baby.id, date_of_birth=date(2024, 2, 1))
    ReminderService(db).materialize(baby, now)
    db.commit()

    reminders = _reminders(db, baby.id)
    assert len(reminders) == 6
    opv = [r for r in reminders if r.vaccine == "OPV 1"]
    assert {r.vaccination_date for r in opv} == {date(2024, 3, 14)}


def test_other_babies_are_untouched(db, mother, baby, schedule):
    sibling = make_baby(db, mother, name="Baraka", dob=date(2024, 1, 1), gender="male")
    regenerate_reminders(db, mother.id, sibling.id, JAN_1)
    regenerate_reminders(db, mother.id, baby.id, JAN_1)

    regenerate_reminders(db, mother.id, baby.id, datetime(2024, 3, 1))

    assert len(_reminders(db, sibling.id)) == 6
    assert len(_reminders(db, baby.id)) == 4


def test_all_past_due_writes_nothing(db, mother, schedule):
    old = make_baby(db, mother, name="Imani", dob=date(2020, 1, 1))
    assert regenerate_reminders(db, mother.id, old.id, JAN_1) == []
    assert _reminders(db, old.id) == []


def test_unknown_baby_raises_not_found(db, mother, schedule):
    with pytest.raises(NotFoundError):
        regenerate_reminders(db, mother.id, "does-not-exist", JAN_1)


def test_unknown_mother_raises_not_found(db, baby, schedule):
    with pytest.raises(NotFoundError):
        regenerate_reminders(db, "nobody", baby.id, JAN_1)


def test_baby_of_another_mother_raises_not_found(db, mother, other_mother, baby, schedule):
    with pytest.raises(NotFoundError):
        regenerate_reminders(db, other_mother.id, baby.id, JAN_1)


def test_store_rejects_duplicate_unsent_reminder(db, mother, baby):
    row = dict(
        type="weekly",
        mother_id=mother.id,
        baby_id=baby.id,
        vaccine="OPV 1",
        vaccination_date=date(2024, 2, 12),
        scheduled_at=datetime(2024, 2, 5, 14),
    )
    db.add(Reminder(**row, sent=True))
    db.add(Reminder(**row, sent=False))
    db.commit()

    db.add(Reminder(**row, sent=False))
    with pytest.raises(IntegrityError):
        db.commit()
    db.rollback()


def test_timezone_aware_now_is_read_as_local_wall_clock(db, mother, baby, schedule):
    regenerate_reminders(db, mother.id, baby.id, datetime(2024, 1, 1, tzinfo=timezone.utc))
    assert len(_reminders(db, baby.id)) == 6

    # 22:00 UTC on Feb 11 is already Feb 12 in Nairobi, so the 6-week dose is past
    regenerate_reminders(db, mother.id, baby.id, datetime(2024, 2, 11, 22, 0, tzinfo=timezone.utc))
    assert {r.vaccine for r in _reminders(db, baby.id)} == {"Pentavalent 3", "Measles-Rubella 1"}


def test_failed_insert_keeps_previous_reminders(db, mother, baby, schedule, monkeypatch):
    regenerate_reminders(db, mother.id, baby.id, JAN_1)
    before = _fingerprint(_reminders(db, baby.id))

    def broken_insert(*args, **kwargs):
        raise SQLAlchemyError("disk I/O error")

    monkeypatch.setattr(repository, "insert_many", broken_insert)

    with pytest.raises(SQLAlchemyError):
        regenerate_reminders(db, mother.id, baby.id, datetime(2024, 3, 1))

    assert _fingerprint(_reminders(db, baby.id)) == before


def test_seeding_warns_about_unrecognised_ages(db, caplog):
    with caplog.at_level(logging.WARNING, logger="chanjo.crud.vaccination_schedule"):
        crud.vaccination_schedule.seed(db, [("6 weeks", "OPV 1", "Polio"), ("at school entry", "Td", "Tetanus")])

    warnings = [r.getMessage() for r in caplog.records if r.name == "chanjo.crud.vaccination_schedule"]
    assert len(warnings) == 1
    assert "'at school entry'" in warnings[0]
