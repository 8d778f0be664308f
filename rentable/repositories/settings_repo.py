# rentable/repositories/settings_repo.py
from datetime import datetime, timezone

from sqlmodel import Session, select

from rentable.models.admin import AdminSetting


class SettingsRepository:
    """Key/value store behind the admin settings screen."""

    def get(self, session: Session, key: str) -> AdminSetting | None:
        return session.get(AdminSetting, key)

    def list_all(self, session: Session) -> list[AdminSetting]:
        return session.exec(select(AdminSetting).order_by(AdminSetting.key)).all()

    def upsert(self, session: Session, key: str, value: str) -> AdminSetting:
        setting = self.get(session, key)
        if setting is None:
            setting = AdminSetting(key=key, value=value)
        else:
            setting.value = value
            setting.updated_at = datetime.now(timezone.utc)
        session.add(setting)
        session.commit()
        session.refresh(setting)
        return setting
