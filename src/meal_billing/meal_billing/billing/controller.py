from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.money import format_money
from ..common.web import admin_required, current_user_id, error_response, is_admin, login_required
from ..core.exceptions import AuthorizationError, DomainError, ValidationError
from ..container import Container
from .model import PayableBreakdown


def _window_from_args():
    start_s = request.args.get("startDate")
    end_s = request.args.get("endDate")
    if not start_s or not end_s:
        raise ValidationError("startDate and endDate are required")
    return parse_iso_date(start_s, field_name="startDate"), parse_iso_date(end_s, field_name="endDate")


def _breakdown_json(b: PayableBreakdown) -> dict:
    return {
        "user_id": b.user_id,
        "start": b.window_start.strftime("%Y-%m-%d"),
        "end": b.window_end.strftime("%Y-%m-%d"),
        "active_days": b.active_days,
        "base_expense": format_money(b.base_expense),
        "fines": format_money(b.fines),
        "guest_expenses": format_money(b.guest_expenses),
        "payments": format_money(b.payments),
        "total_payable": format_money(b.total_payable),
        "approximate": b.approximate,
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/users/<int:user_id>/payable", methods=["GET"], endpoint="billing_payable")
    @login_required
    def billing_payable(user_id: int):
        try:
            if not is_admin() and current_user_id() != user_id:
                raise AuthorizationError("You can only view your own payable")
            start, end = _window_from_args()
            return jsonify(_breakdown_json(container.payable_aggregator.payable_for(user_id, start, end)))
        except DomainError as e:
            return error_response(e)

    @app.route("/api/admin/reports", methods=["GET"], endpoint="billing_report")
    @admin_required
    def billing_report():
        try:
            start, end = _window_from_args()
            report = container.billing_report.build(start=start, end=end)
            return jsonify({"data": report.rows, "stats": report.stats, "approximate": report.approximate})
        except DomainError as e:
            return error_response(e)
