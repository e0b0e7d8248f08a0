from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import now_local, parse_iso_date
from ..common.money import format_money
from ..common.web import error_response, login_required
from ..core.enums import AttendanceStatus
from ..core.exceptions import DomainError, ValidationError
from ..container import Container

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


def register(app: Flask, container: Container) -> None:
    assessor = container.attendance_assessor

    @app.route("/api/attendance/assessment", methods=["GET"], endpoint="attendance_assessment")
    @login_required
    def attendance_assessment():
        """Preview the remark and fine a meal record would carry on a given day."""
        try:
            meal_date = parse_iso_date(request.args.get("date", ""), field_name="date")

            status_s = request.args.get("status")
            try:
                status = AttendanceStatus(status_s) if status_s else None
            except ValueError:
                raise ValidationError("status must be Present or Absent")

            is_open_s = (request.args.get("isOpen") or "true").strip().lower()
            if is_open_s not in _TRUTHY | _FALSY:
                raise ValidationError("isOpen must be a boolean")

            result = assessor.assess(status, is_open_s in _TRUTHY, meal_date)
            return jsonify(
                {
                    "date": meal_date.strftime("%Y-%m-%d"),
                    "remark": result.remark.value if result.remark else None,
                    "fine_amount": format_money(result.fine_amount),
                    "guest_meal_amount": format_money(assessor.guest_charge_amount(meal_date)),
                    "can_change_meal": assessor.can_change_meal(meal_date, now_local()),
                }
            )
        except DomainError as e:
            return error_response(e)
