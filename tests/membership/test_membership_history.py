import logging
from datetime import date, datetime

import pytest

from src.meal_billing.meal_billing.core.enums import MembershipStatus
from src.meal_billing.meal_billing.core.exceptions import (
    DegradedDataWarning,
    NotFoundError,
    StorageError,
    ValidationError,
)
from src.meal_billing.meal_billing.membership.history import MembershipHistory
from src.meal_billing.meal_billing.membership.model import MembershipStatusChange

ACTIVE = MembershipStatus.ACTIVE
INACTIVE = MembershipStatus.INACTIVE


def test_defaults_to_active_from_creation(history, members):
    members.add(1, created=datetime(2025, 1, 5, 9, 0))

    assert history.status_on(1, date(2025, 1, 4)) == INACTIVE
    assert history.status_on(1, date(2025, 1, 5)) == ACTIVE
    assert history.status_on(1, date(2025, 3, 1)) == ACTIVE


def test_change_applies_to_its_whole_day(history, members, set_status):
    members.add(1, created=datetime(2025, 1, 1, 9, 0))
    set_status(1, INACTIVE, datetime(2025, 1, 10, 14, 0))

    assert history.status_on(1, date(2025, 1, 9)) == ACTIVE
    assert history.status_on(1, date(2025, 1, 10)) == INACTIVE
    assert history.status_on(1, date(2025, 1, 11)) == INACTIVE


def test_active_day_count_follows_transitions(history, members, set_status):
    members.add(1, created=datetime(2025, 1, 1, 9, 0))
    set_status(1, INACTIVE, datetime(2025, 1, 10, 14, 0))
    set_status(1, ACTIVE, datetime(2025, 1, 20, 8, 0))

    # 1..9 and 20..31
    assert history.active_day_count(1, date(2025, 1, 1), date(2025, 1, 31)) == 21


def test_single_day_window_counts_one(history, members):
    members.add(1, created=datetime(2025, 1, 1, 23, 59))
    assert history.active_day_count(1, date(2025, 1, 1), date(2025, 1, 1)) == 1


def test_single_inactive_day_counts_zero(history, members, set_status):
    members.add(1, created=datetime(2025, 1, 1, 9, 0))
    set_status(1, INACTIVE, datetime(2025, 1, 10, 14, 0))

    assert history.active_day_count(1, date(2025, 1, 10), date(2025, 1, 10)) == 0
    assert history.active_day_count(1, date(2025, 1, 9), date(2025, 1, 9)) == 1


def test_count_starts_at_creation(history, members):
    members.add(1, created=datetime(2025, 1, 15, 12, 0))
    assert history.active_day_count(1, date(2025, 1, 1), date(2025, 1, 31)) == 17


def test_changes_after_window_are_ignored(history, members, set_status):
    members.add(1, created=datetime(2025, 1, 1, 9, 0))
    set_status(1, INACTIVE, datetime(2025, 2, 3, 9, 0))

    assert history.active_day_count(1, date(2025, 1, 1), date(2025, 1, 31)) == 31


def test_timeline_reads_the_log_once(history, members, changes, set_status):
    members.add(1, created=datetime(2025, 1, 1, 9, 0))
    set_status(1, INACTIVE, datetime(2025, 1, 10, 14, 0))

    timeline = history.timeline(1, date(2025, 1, 31))
    assert timeline.active_days(date(2025, 1, 1), date(2025, 1, 31)) == 9
    assert [timeline.is_active(date(2025, 1, d)) for d in (9, 10)] == [True, False]
    assert timeline.last_change().status == INACTIVE
    assert not timeline.approximate
    assert changes.list_calls == 1

    with pytest.raises(ValueError):
        timeline.status_on(date(2025, 2, 1))


def test_unknown_user(history):
    with pytest.raises(NotFoundError):
        history.status_on(404, date(2025, 1, 1))


def test_degraded_mode_uses_current_status_and_warns(members, changes, caplog):
    members.add(1, created=datetime(2025, 1, 1, 9, 0), status=INACTIVE)
    history = MembershipHistory(members, changes, history_available=False)

    with caplog.at_level(logging.WARNING):
        timeline = history.timeline(1, date(2025, 1, 31))

    assert timeline.approximate
    assert isinstance(timeline.warning, DegradedDataWarning)
    assert timeline.status_on(date(2025, 1, 2)) == INACTIVE
    assert timeline.active_days(date(2025, 1, 1), date(2025, 1, 31)) == 0
    assert changes.list_calls == 0
    assert any("membership history unavailable" in r.getMessage() for r in caplog.records)


def test_record_change_appends_and_updates_status(history, members, changes):
    members.add(1, created=datetime(2025, 1, 1, 9, 0))

    change_id = history.record_change(1, INACTIVE, 99, changed_at=datetime(2025, 1, 10, 14, 0))
    assert change_id == 1
    assert members.get_by_id(1).status == INACTIVE
    assert changes.changes[0].changed_by == 99

    assert history.record_change(1, INACTIVE, 99, changed_at=datetime(2025, 1, 11, 9, 0)) is None
    assert len(changes.changes) == 1


def test_record_change_guards(members, changes):
    members.add(1, created=datetime(2025, 1, 10, 9, 0))
    history = MembershipHistory(members, changes)

    with pytest.raises(ValidationError):
        history.record_change(1, INACTIVE, None, changed_at=datetime(2025, 1, 9, 9, 0))

    degraded = MembershipHistory(members, changes, history_available=False)
    with pytest.raises(StorageError):
        degraded.record_change(1, INACTIVE, None)


def test_record_change_rejects_backdated_change(history, members, changes):
    members.add(1, created=datetime(2025, 1, 1, 9, 0))
    history.record_change(1, INACTIVE, 99, changed_at=datetime(2025, 1, 10, 14, 0))
    history.record_change(1, ACTIVE, 99, changed_at=datetime(2025, 1, 20, 8, 0))

    with pytest.raises(ValidationError):
        history.record_change(1, INACTIVE, 99, changed_at=datetime(2025, 1, 5, 9, 0))

    assert len(changes.changes) == 2
    assert members.get_by_id(1).status == ACTIVE
    assert history.status_on(1, date(2025, 1, 31)) == members.get_by_id(1).status


def test_record_change_compares_against_latest_logged_status(history, members, changes):
    # Current status column lags the log: the log decides what is a no-op.
    members.add(1, created=datetime(2025, 1, 1, 9, 0), status=INACTIVE)
    changes.changes.append(
        MembershipStatusChange(change_id=1, user_id=1, status=ACTIVE, changed_at=datetime(2025, 1, 5, 9, 0))
    )

    assert history.record_change(1, ACTIVE, 99, changed_at=datetime(2025, 1, 6, 9, 0)) is None
    assert history.record_change(1, INACTIVE, 99, changed_at=datetime(2025, 1, 7, 9, 0)) == 2
