from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Optional, Sequence

from ..common.datetime_utils import as_date, day_before, now_local
from ..core.exceptions import NotFoundError, OverlapError
from .codec import ValueCodec
from .model import SettingDefinition, SettingVersion
from .repository import SettingsRepository

logger = logging.getLogger(__name__)


def _newest_first(v: SettingVersion):
    return (v.effective_from, v.created_at, v.version_id)


class TemporalSettingsStore:
    """Versioned policy values.

    Each key owns a chain of non-overlapping intervals. A new version closes
    the currently open one at the day before it starts, so past values stay
    reproducible and scheduled values wait for their date.
    """

    def __init__(self, settings: SettingsRepository, *, codec: Optional[ValueCodec] = None):
        self._settings = settings
        self._codec = codec or ValueCodec()

    def definitions(self) -> list[SettingDefinition]:
        return list(self._settings.list_definitions())

    def definition(self, key: str) -> SettingDefinition:
        d = self._settings.get_definition(key)
        if not d:
            raise NotFoundError(f'Setting key "{key}" does not exist')
        return d

    def upsert_version(
        self,
        key: str,
        value: Any,
        effective_from: date,
        actor: Optional[int],
        *,
        now: Optional[datetime] = None,
    ) -> SettingVersion:
        definition = self.definition(key)
        typed = self._codec.parse(definition.value_type, value, field_name=key)
        effective_from = as_date(effective_from)

        versions = self._versions(definition)
        same_day = [v for v in versions if v.effective_from == effective_from]
        for v in same_day:
            if v.value == typed:
                return v
        if same_day:
            raise OverlapError(f"A setting with effective date {effective_from} already exists for {key}")

        open_versions = [v for v in versions if v.is_open]
        superseded = None
        if open_versions:
            current = max(open_versions, key=_newest_first)
            if current.effective_from < effective_from:
                superseded = current

        close_to = day_before(effective_from) if superseded else None
        for v in versions:
            if superseded is not None and v.version_id == superseded.version_id:
                continue
            if v.overlaps(effective_from, None):
                raise OverlapError(
                    f"{key} from {effective_from} overlaps version effective {v.effective_from}"
                    f"..{v.effective_to or 'open'}"
                )

        try:
            version_id = self._settings.insert_version(
                key=key,
                value=self._codec.encode(definition.value_type, typed),
                effective_from=effective_from,
                created_by=actor,
                close_version_id=superseded.version_id if superseded else None,
                close_effective_to=close_to,
            )
        except OverlapError:
            # A concurrent writer got there first; identical submissions still succeed.
            for v in self._versions(definition):
                if v.effective_from == effective_from and v.value == typed:
                    return v
            raise
        logger.info(
            "setting %s=%s effective %s by %s (closed version %s)",
            key,
            self._codec.encode(definition.value_type, typed),
            effective_from,
            actor,
            superseded.version_id if superseded else None,
        )
        return SettingVersion(
            version_id=version_id,
            setting_key=key,
            value=typed,
            effective_from=effective_from,
            effective_to=None,
            created_by=actor,
            created_at=now or now_local(),
        )

    def value_at(self, key: str, day: date) -> Any:
        definition = self.definition(key)
        version = self.version_at(key, day, definition=definition)
        if version is None:
            return self._codec.default_for(definition)
        return version.value

    def version_at(
        self,
        key: str,
        day: date,
        *,
        definition: Optional[SettingDefinition] = None,
    ) -> Optional[SettingVersion]:
        definition = definition or self.definition(key)
        day = as_date(day)
        candidates = [v for v in self._versions(definition) if v.covers(day)]
        if not candidates:
            return None
        return max(candidates, key=_newest_first)

    def upcoming(self, key: str, *, today: Optional[date] = None) -> Optional[SettingVersion]:
        definition = self.definition(key)
        today = as_date(today or now_local())
        future = [v for v in self._versions(definition) if v.effective_from > today]
        if not future:
            return None
        return min(future, key=lambda v: (v.effective_from, -v.version_id))

    def upcoming_all(self, *, today: Optional[date] = None) -> list[SettingVersion]:
        out: list[SettingVersion] = []
        for d in self.definitions():
            v = self.upcoming(d.key, today=today)
            if v is not None:
                out.append(v)
        return out

    def history(self, key: Optional[str] = None) -> list[SettingVersion]:
        if key is not None:
            versions = self._versions(self.definition(key))
        else:
            by_key = {d.key: d for d in self.definitions()}
            versions = [
                self._to_version(r, by_key[r["setting_key"]])
                for r in self._settings.list_versions()
                if r["setting_key"] in by_key
            ]
        return sorted(versions, key=_newest_first, reverse=True)

    def snapshot(self, day: date) -> dict[str, Any]:
        """Every catalog key resolved at ``day``."""
        return {d.key: self.value_at(d.key, day) for d in self.definitions()}

    def render(self, key: str, value: Any) -> Any:
        return self._codec.render(self.definition(key).value_type, value)

    def _versions(self, definition: SettingDefinition) -> list[SettingVersion]:
        return [self._to_version(r, definition) for r in self._settings.list_versions(definition.key)]

    def _to_version(self, r: dict, definition: SettingDefinition) -> SettingVersion:
        return SettingVersion(
            version_id=int(r["version_id"]),
            setting_key=r["setting_key"],
            value=self._codec.decode(definition.value_type, r["value"]),
            effective_from=as_date(r["effective_from"]),
            effective_to=as_date(r["effective_to"]) if r.get("effective_to") else None,
            created_by=r.get("created_by"),
            created_at=r["created_at"],
        )
