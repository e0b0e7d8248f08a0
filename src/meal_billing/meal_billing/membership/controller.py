from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.web import admin_required, current_user_id, error_response, is_admin, login_required
from ..core.enums import MembershipStatus
from ..core.exceptions import AuthorizationError, DomainError, ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    membership = container.membership_history

    @app.route("/api/users/<int:user_id>/status", methods=["GET"], endpoint="membership_status")
    @login_required
    def membership_status(user_id: int):
        try:
            if not is_admin() and current_user_id() != user_id:
                raise AuthorizationError("You can only view your own status")
            day = parse_iso_date(request.args.get("date", ""), field_name="date")
            timeline = membership.timeline(user_id, day)
            return jsonify(
                {
                    "user_id": user_id,
                    "date": day.strftime("%Y-%m-%d"),
                    "status": timeline.status_on(day).value,
                    "approximate": timeline.approximate,
                }
            )
        except DomainError as e:
            return error_response(e)

    @app.route("/api/users/<int:user_id>/status", methods=["PATCH"], endpoint="membership_change_status")
    @admin_required
    def membership_change_status(user_id: int):
        body = request.get_json(silent=True)
        if not isinstance(body, dict):
            return jsonify({"error": "Invalid JSON in request body"}), 400

        try:
            try:
                status = MembershipStatus(body.get("status"))
            except ValueError:
                raise ValidationError("status must be Active or Inactive")
            change_id = membership.record_change(user_id, status, current_user_id())
            return jsonify({"success": True, "changed": change_id is not None, "change_id": change_id})
        except DomainError as e:
            return error_response(e)
