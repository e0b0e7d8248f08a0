from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from src.meal_billing.meal_billing.attendance.model import AttendanceRecord
from src.meal_billing.meal_billing.billing.model import GuestCharge, Payment
from src.meal_billing.meal_billing.core.enums import MembershipStatus
from src.meal_billing.meal_billing.core.exceptions import OverlapError
from src.meal_billing.meal_billing.membership.history import MembershipHistory
from src.meal_billing.meal_billing.membership.model import Member, MembershipStatusChange
from src.meal_billing.meal_billing.settings.catalog import DEFAULT_DEFINITIONS
from src.meal_billing.meal_billing.settings.service import TemporalSettingsStore


class FakeSettingsRepo:
    def __init__(self, definitions=DEFAULT_DEFINITIONS):
        self._defs = {d.key: d for d in definitions}
        self.rows: list[dict] = []
        self._next_id = 1
        self._clock = datetime(2025, 1, 1, 8, 0, 0)

    def get_definition(self, key):
        return self._defs.get(key)

    def list_definitions(self):
        return list(self._defs.values())

    def list_versions(self, key=None):
        rows = [dict(r) for r in self.rows if key is None or r["setting_key"] == key]
        return sorted(rows, key=lambda r: (r["effective_from"], r["created_at"], r["version_id"]), reverse=True)

    def insert_version(self, *, key, value, effective_from, created_by, close_version_id=None, close_effective_to=None):
        if close_version_id is not None:
            row = next(r for r in self.rows if r["version_id"] == close_version_id)
            if row["effective_to"] is not None:
                raise OverlapError("already closed")
            row["effective_to"] = close_effective_to

        vid = self._next_id
        self._next_id += 1
        self._clock += timedelta(minutes=1)
        self.rows.append(
            {
                "version_id": vid,
                "setting_key": key,
                "value": value,
                "effective_from": effective_from,
                "effective_to": None,
                "created_by": created_by,
                "created_at": self._clock,
            }
        )
        return vid


class FakeMemberRepo:
    def __init__(self):
        self.members: dict[int, Member] = {}

    def add(self, user_id, *, created, status=MembershipStatus.ACTIVE, updated=None, full_name=None):
        self.members[user_id] = Member(
            user_id=user_id,
            full_name=full_name or f"User {user_id}",
            email=f"user{user_id}@mess.local",
            status=status,
            created_at=created,
            updated_at=updated or created,
        )
        return self.members[user_id]

    def get_by_id(self, user_id):
        return self.members.get(int(user_id))

    def list_created_before(self, until):
        return sorted(
            (m for m in self.members.values() if m.created_at <= until),
            key=lambda m: m.created_at,
        )


class FakeStatusChangeRepo:
    def __init__(self, members: FakeMemberRepo):
        self._members = members
        self.changes: list[MembershipStatusChange] = []
        self.list_calls = 0

    def list_for_user(self, user_id, *, until):
        self.list_calls += 1
        return sorted(
            (c for c in self.changes if c.user_id == user_id and c.changed_at <= until),
            key=lambda c: (c.changed_at, c.change_id),
        )

    def latest_for_user(self, user_id):
        mine = [c for c in self.changes if c.user_id == user_id]
        return max(mine, key=lambda c: (c.changed_at, c.change_id)) if mine else None

    def append(self, *, user_id, status, changed_at, changed_by):
        newest = self.latest_for_user(user_id)
        change_id = len(self.changes) + 1
        self.changes.append(
            MembershipStatusChange(
                change_id=change_id,
                user_id=user_id,
                status=status,
                changed_at=changed_at,
                changed_by=changed_by,
            )
        )
        if newest is None or changed_at >= newest.changed_at:
            m = self._members.members[user_id]
            self._members.members[user_id] = replace(m, status=status, updated_at=changed_at)
        return change_id


class FakeAttendanceRepo:
    def __init__(self):
        self.records: list[AttendanceRecord] = []

    def add(self, user_id, day, status, is_open, fine="0"):
        self.records.append(
            AttendanceRecord(
                attendance_id=len(self.records) + 1,
                user_id=user_id,
                meal_date=day,
                status=status,
                is_open=is_open,
                fine_amount=Decimal(fine),
            )
        )

    def list_for_user(self, user_id, *, start, end):
        return self.list_range(start=start, end=end, user_id=user_id)

    def list_range(self, *, start, end, user_id=None):
        return [
            r
            for r in self.records
            if start <= r.meal_date <= end and (user_id is None or r.user_id == user_id)
        ]


class FakeLedgerRepo:
    def __init__(self):
        self.guests: list[GuestCharge] = []
        self.payments: list[Payment] = []

    def add_guest(self, inviter_id, day, amount):
        self.guests.append(GuestCharge(len(self.guests) + 1, inviter_id, day, Decimal(amount)))

    def add_payment(self, user_id, amount, when=datetime(2025, 1, 15, 10, 0)):
        self.payments.append(Payment(len(self.payments) + 1, user_id, Decimal(amount), when))

    def list_guest_charges(self, *, start, end, inviter_id=None):
        return [
            g
            for g in self.guests
            if start <= g.guest_date <= end and (inviter_id is None or g.inviter_id == inviter_id)
        ]

    def list_payments(self, *, user_id=None):
        return [p for p in self.payments if user_id is None or p.user_id == user_id]


@pytest.fixture
def settings_repo():
    return FakeSettingsRepo()


@pytest.fixture
def store(settings_repo):
    return TemporalSettingsStore(settings_repo)


@pytest.fixture
def members():
    return FakeMemberRepo()


@pytest.fixture
def changes(members):
    return FakeStatusChangeRepo(members)


@pytest.fixture
def history(members, changes):
    return MembershipHistory(members, changes)


@pytest.fixture
def attendance():
    return FakeAttendanceRepo()


@pytest.fixture
def ledger():
    return FakeLedgerRepo()


@pytest.fixture
def set_status(changes):
    """Append a raw status change, bypassing MembershipHistory's checks."""

    def _set(user_id, status, when):
        changes.append(user_id=user_id, status=MembershipStatus(status), changed_at=when, changed_by=None)

    return _set
