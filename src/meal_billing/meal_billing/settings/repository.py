from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import SettingDefinition


class SettingsRepository(Protocol):
    """Storage for the setting catalog and its version history.

    Versions travel as raw rows (``value`` is the stored text); typing is the
    service's job.
    """

    def get_definition(self, key: str) -> Optional[SettingDefinition]:
        raise NotImplementedError

    def list_definitions(self) -> Sequence[SettingDefinition]:
        raise NotImplementedError

    def list_versions(self, key: Optional[str] = None) -> Sequence[dict]:
        """Rows with version_id, setting_key, value, effective_from, effective_to, created_by, created_at."""

        raise NotImplementedError

    def insert_version(
        self,
        *,
        key: str,
        value: str,
        effective_from: date,
        created_by: Optional[int],
        close_version_id: Optional[int] = None,
        close_effective_to: Optional[date] = None,
    ) -> int:
        """Close the given open version (if any) and insert the new one atomically.

        Returns version_id of the inserted row.
        """

        raise NotImplementedError
