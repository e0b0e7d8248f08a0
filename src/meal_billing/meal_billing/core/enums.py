from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for authorization."""

    SUPER_ADMIN = "super_admin"
    ADMIN = "admin"
    USER = "user"


class ValueType(str, Enum):
    """Declared type of a setting value."""

    NUMBER = "number"
    TIME = "time"
    BOOLEAN = "boolean"
    STRING = "string"


class MembershipStatus(str, Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"


class AttendanceStatus(str, Enum):
    """Attendance marked for a meal. A missing mark is stored as NULL."""

    PRESENT = "Present"
    ABSENT = "Absent"


class Remark(str, Enum):
    """Disciplinary label derived from attendance status and the open flag."""

    ALL_CLEAR = "All Clear"
    UNCLOSED = "Unclosed"
    UNOPENED = "Unopened"
