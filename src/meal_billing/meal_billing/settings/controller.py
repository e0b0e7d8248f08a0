from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date, today_local
from ..common.validators import require_non_empty
from ..common.web import admin_required, current_user_id, error_response, login_required
from ..core.exceptions import DomainError, ValidationError
from ..container import Container
from .model import SettingVersion


def register(app: Flask, container: Container) -> None:
    store = container.settings_store

    def _version_json(v: SettingVersion) -> dict:
        return {
            "id": v.version_id,
            "setting_key": v.setting_key,
            "value": store.render(v.setting_key, v.value),
            "effective_from": v.effective_from.strftime("%Y-%m-%d"),
            "effective_to": v.effective_to.strftime("%Y-%m-%d") if v.effective_to else None,
            "created_by": v.created_by,
            "created_at": v.created_at.isoformat(),
            "is_active": v.is_open,
        }

    @app.route("/api/settings/types", methods=["GET"], endpoint="settings_types")
    @login_required
    def settings_types():
        try:
            today = today_local()
            return jsonify(
                [
                    {
                        "key": d.key,
                        "description": d.description,
                        "unit": d.unit,
                        "value_type": d.value_type.value,
                        "current_value": store.render(d.key, store.value_at(d.key, today)),
                    }
                    for d in store.definitions()
                ]
            )
        except DomainError as e:
            return error_response(e)

    @app.route("/api/settings/current", methods=["GET"], endpoint="settings_current")
    @login_required
    def settings_current():
        try:
            today = today_local()
            current = []
            for d in store.definitions():
                v = store.version_at(d.key, today, definition=d)
                current.append(
                    {
                        "key": d.key,
                        "description": d.description,
                        "unit": d.unit,
                        "value_type": d.value_type.value,
                        "current_value": store.render(d.key, v.value if v else store.value_at(d.key, today)),
                        "effective_from": v.effective_from.strftime("%Y-%m-%d") if v else None,
                        "updated_by": v.created_by if v else None,
                    }
                )
            upcoming = [_version_json(v) for v in store.upcoming_all(today=today)]
            return jsonify({"current": current, "upcoming": upcoming})
        except DomainError as e:
            return error_response(e)

    @app.route("/api/settings/future", methods=["GET"], endpoint="settings_future")
    @login_required
    def settings_future():
        try:
            return jsonify([_version_json(v) for v in store.upcoming_all(today=today_local())])
        except DomainError as e:
            return error_response(e)

    @app.route("/api/settings/history", methods=["GET"], endpoint="settings_history")
    @admin_required
    def settings_history():
        try:
            key = request.args.get("settingKey") or None
            return jsonify([_version_json(v) for v in store.history(key)])
        except DomainError as e:
            return error_response(e)

    @app.route("/api/settings/field", methods=["PATCH"], endpoint="settings_field")
    @admin_required
    def settings_field():
        body = request.get_json(silent=True)
        if not isinstance(body, dict):
            return jsonify({"error": "Invalid JSON in request body"}), 400

        try:
            key = require_non_empty(body.get("setting_key"), "setting_key")
            value = body.get("value")
            if value is None:
                raise ValidationError("value is required")

            effective_from = parse_iso_date(
                require_non_empty(body.get("effective_from"), "effective_from"),
                field_name="effective_from",
            )
            if effective_from < today_local():
                raise ValidationError("Effective date cannot be in the past")

            version = store.upsert_version(key, value, effective_from, current_user_id())
            return jsonify({"success": True, **_version_json(version)})
        except DomainError as e:
            return error_response(e)
