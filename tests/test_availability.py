from datetime import UTC, date, datetime, time, timedelta

from agendatop.models.appointment import Appointment, AppointmentStatus
from agendatop.services import working_hours as wh
from agendatop.services.availability import available_slots
from agendatop.services.slot_grid import SLOT_LABELS
from agendatop.utils.tz import CIVIL_TZ, weekday_number

# domingo, 10/03/2024
DAY = date(2024, 3, 10)
BEFORE_DAY = datetime(2024, 3, 1, 8, 0, tzinfo=CIVIL_TZ)


def _appointment(db, company, customer, service, day, hhmm, status):
    ap = Appointment(
        company_id=company.id,
        customer_id=customer.id,
        service_id=service.id,
        date=day,
        time=time.fromisoformat(hhmm),
        status=status,
    )
    db.add(ap)
    db.commit()
    return ap


def test_full_week_returns_canonical_grid(db_session, open_week):
    slots = available_slots(db_session, open_week.id, DAY, now=BEFORE_DAY)
    assert slots == list(SLOT_LABELS)
    assert len(slots) == 33


def test_inactive_weekday_has_no_slots(db_session, company):
    wh.set_day_active(db_session, company.id, 1, True)  # só segunda
    assert available_slots(db_session, company.id, DAY, now=BEFORE_DAY) == []
    monday = DAY + timedelta(days=1)
    assert weekday_number(monday) == 1
    assert len(available_slots(db_session, company.id, monday, now=BEFORE_DAY)) == 33


def test_occupied_slots_are_excluded(db_session, open_week, customer, service):
    _appointment(db_session, open_week, customer, service, DAY, "09:00", AppointmentStatus.PENDING)
    _appointment(db_session, open_week, customer, service, DAY, "10:30", AppointmentStatus.CONFIRMED)

    slots = available_slots(db_session, open_week.id, DAY, now=BEFORE_DAY)
    assert "09:00" not in slots
    assert "10:30" not in slots
    assert len(slots) == 31
    assert slots == sorted(slots)


def test_cancelled_and_finalized_free_the_slot(db_session, open_week, customer, service):
    _appointment(db_session, open_week, customer, service, DAY, "09:00", AppointmentStatus.CANCELLED)
    _appointment(db_session, open_week, customer, service, DAY, "09:30", AppointmentStatus.DONE)

    slots = available_slots(db_session, open_week.id, DAY, now=BEFORE_DAY)
    assert "09:00" in slots
    assert "09:30" in slots


def test_other_dates_do_not_interfere(db_session, open_week, customer, service):
    _appointment(
        db_session, open_week, customer, service, DAY + timedelta(days=7), "09:00",
        AppointmentStatus.PENDING,
    )
    assert "09:00" in available_slots(db_session, open_week.id, DAY, now=BEFORE_DAY)


def test_today_drops_past_slots(db_session, open_week):
    now = datetime(2024, 3, 10, 14, 10, tzinfo=CIVIL_TZ)
    slots = available_slots(db_session, open_week.id, DAY, now=now)
    assert "14:00" not in slots
    assert "14:30" in slots
    assert slots[0] == "14:30"


def test_today_keeps_slot_starting_exactly_now(db_session, open_week):
    now = datetime(2024, 3, 10, 14, 0, tzinfo=CIVIL_TZ)
    slots = available_slots(db_session, open_week.id, DAY, now=now)
    assert slots[0] == "14:00"


def test_now_in_utc_is_converted_to_civil_time(db_session, open_week):
    # 17:10 UTC == 14:10 em São Paulo
    slots = available_slots(
        db_session, open_week.id, DAY, now=datetime(2024, 3, 10, 17, 10, tzinfo=UTC)
    )
    assert slots[0] == "14:30"


def test_past_date_returns_empty(db_session, open_week):
    now = datetime(2024, 3, 11, 8, 0, tzinfo=CIVIL_TZ)
    assert available_slots(db_session, open_week.id, DAY, now=now) == []


def test_other_company_appointments_do_not_block(db_session, open_week, other_company, service, customer):
    wh.set_day_active(db_session, other_company.id, 0, True)
    _appointment(db_session, open_week, customer, service, DAY, "09:00", AppointmentStatus.PENDING)
    assert "09:00" in available_slots(db_session, other_company.id, DAY, now=BEFORE_DAY)
