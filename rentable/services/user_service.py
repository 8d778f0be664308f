# rentable/services/user_service.py
import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from rentable.core.config import get_settings
from rentable.core.errors import Conflict, NotFound
from rentable.models.user import User
from rentable.repositories.user_repo import UserRepository
from rentable.schemas.user import PublicProfileRead, UserUpdate
from rentable.services.token_service import TokenService

logger = logging.getLogger(__name__)
settings = get_settings()


def _default_name_from_email(email: str) -> str:
    """
    Derive a default display name from email if the user has not
    completed their profile yet.
    """
    if "@" in email:
        return email.split("@", 1)[0]
    return email


class UserService:
    """
    Business logic for User.

    Responsibilities:
      - first-login provisioning (with sign-up bonus tokens)
      - profile edits (email / role / balance are never editable)
      - admin user management (promote, ban, unban)
    """

    def __init__(self, repo: UserRepository, tokens: TokenService):
        self.repo = repo
        self.tokens = tokens

    # ----- Provisioning -----

    def get_or_provision(self, session: Session, user_id: uuid.UUID, email: str) -> User:
        """
        Return the profile for an authenticated identity, creating it on
        first login.

        New profiles:
          - role "admin" if the id matches OWNER_USER_ID, else "user"
          - SIGNUP_BONUS_TOKENS credited as a "bonus" ledger entry
        """
        user = self.repo.get_by_id(session, user_id)
        if user is not None:
            return user

        role = "admin" if settings.OWNER_USER_ID and str(user_id) == settings.OWNER_USER_ID else "user"
        user = User(
            id=user_id,
            email=email,
            name=_default_name_from_email(email),
            role=role,
        )
        try:
            self.repo.add(session, user)
            if settings.SIGNUP_BONUS_TOKENS > 0:
                self.tokens.credit(
                    session,
                    user_id,
                    settings.SIGNUP_BONUS_TOKENS,
                    "bonus",
                    "Welcome bonus",
                    commit=False,
                )
            session.commit()
        except IntegrityError:
            # Concurrent first request for the same identity, or the email
            # belongs to another account.
            session.rollback()
            user = self.repo.get_by_id(session, user_id)
            if user is None:
                raise Conflict("Email is already registered to another account")
            return user

        session.refresh(user)
        logger.info("Provisioned user %s (%s) as %s", user_id, email, role)
        return user

    # ----- Self profile -----

    def update_me(
        self,
        session: Session,
        current_user: User,
        payload: UserUpdate,
    ) -> User:
        """
        Partial update for profile edits.
        """
        data = payload.model_dump(exclude_unset=True)
        for field, value in data.items():
            setattr(current_user, field, value)
        current_user.updated_at = datetime.now(timezone.utc)

        return self.repo.update(session, current_user)

    def get_public_profile(self, session: Session, user_id: uuid.UUID) -> PublicProfileRead:
        user = self.get_user(session, user_id)
        return PublicProfileRead(
            id=user.id,
            display_name=user.display_name or user.name,
            bio=user.bio,
            location=user.location,
            avatar_url=user.avatar_url,
            role=user.role,
            created_at=user.created_at,
        )

    # ----- Admin operations -----

    def list_users(self, session: Session, skip: int, limit: int) -> list[User]:
        """List users with pagination (admin only)."""
        return self.repo.list_users(session, skip=skip, limit=limit)

    def get_user(self, session: Session, user_id: uuid.UUID) -> User:
        """
        Raises:
            NotFound: if the user does not exist.
        """
        user = self.repo.get_by_id(session, user_id)
        if not user:
            raise NotFound("User not found")
        return user

    def promote_to_admin(self, session: Session, user_id: uuid.UUID) -> User:
        user = self.get_user(session, user_id)
        user.role = "admin"
        user.updated_at = datetime.now(timezone.utc)
        logger.info("User %s promoted to admin", user_id)
        return self.repo.update(session, user)

    def ban(self, session: Session, user_id: uuid.UUID, reason: str) -> User:
        user = self.get_user(session, user_id)
        user.is_banned = True
        user.ban_reason = reason
        user.updated_at = datetime.now(timezone.utc)
        logger.info("User %s banned: %s", user_id, reason)
        return self.repo.update(session, user)

    def unban(self, session: Session, user_id: uuid.UUID) -> User:
        user = self.get_user(session, user_id)
        user.is_banned = False
        user.ban_reason = None
        user.updated_at = datetime.now(timezone.utc)
        return self.repo.update(session, user)
