# rentable/services/settings_service.py
from sqlmodel import Session

from rentable.core.errors import NotFound
from rentable.models.admin import AdminSetting
from rentable.repositories.settings_repo import SettingsRepository


class SettingsService:
    """Admin key/value settings."""

    def __init__(self, repo: SettingsRepository):
        self.repo = repo

    def get_setting(self, session: Session, key: str) -> AdminSetting:
        setting = self.repo.get(session, key)
        if not setting:
            raise NotFound(f"Setting '{key}' not found")
        return setting

    def set_setting(self, session: Session, key: str, value: str) -> AdminSetting:
        return self.repo.upsert(session, key, value)

    def list_settings(self, session: Session) -> list[AdminSetting]:
        return self.repo.list_all(session)
