from __future__ import annotations

import importlib
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .database.bootstrap import apply_schema, apply_seed_sql, ensure_setting_definitions, list_tables

from .container import build_container
from .attendance.controller import register as register_attendance
from .billing.controller import register as register_billing
from .membership.controller import register as register_membership
from .settings.controller import register as register_settings


def _history_flag(raw) -> Optional[bool]:
    """MEMBERSHIP_HISTORY: 'auto' probes the schema, '1'/'0' force it."""
    if raw is None or isinstance(raw, bool):
        return raw
    raw = str(raw).strip().lower()
    if raw in {"", "auto"}:
        return None
    return raw in {"1", "true", "yes", "on"}


def create_app() -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))

    if app.config["DEBUG"]:
        print(
            "[meal-billing] settings=", settings_module,
            " db=", f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"
        )

    root = Path(__file__).resolve().parents[3]
    auto_init_db = bool(getattr(settings, "AUTO_INIT_DB", False))
    auto_seed_db = bool(getattr(settings, "AUTO_SEED_DB", False))
    if auto_init_db:
        apply_schema(db_config, schema_path=root / "database" / "schema.sql")
        ensure_setting_definitions(db_config)
        if app.config["DEBUG"]:
            print(f"[meal-billing] schema ready (tables={len(list_tables(db_config))})")
    if auto_seed_db:
        apply_seed_sql(db_config, seed_path=root / "database" / "seed.sql")
        if app.config["DEBUG"]:
            print("[meal-billing] demo seed ready")

    container = build_container(
        db_config=db_config,
        history_available=_history_flag(getattr(settings, "MEMBERSHIP_HISTORY", "auto")),
    )

    register_settings(app, container)
    register_membership(app, container)
    register_attendance(app, container)
    register_billing(app, container)

    return app
