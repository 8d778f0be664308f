# rentable/routers/admin.py
import uuid

from fastapi import APIRouter, Depends
from sqlmodel import Session

from rentable.core.auth import require_admin
from rentable.database import get_session
from rentable.models.user import User
from rentable.repositories.barter_repo import BarterRepository
from rentable.repositories.listing_repo import ListingRepository
from rentable.repositories.rental_repo import RentalRepository
from rentable.repositories.settings_repo import SettingsRepository
from rentable.repositories.stats_repo import StatsRepository
from rentable.repositories.support_repo import SupportRepository
from rentable.repositories.token_repo import TokenRepository
from rentable.repositories.user_repo import UserRepository
from rentable.schemas.listing import ListingFlag, ListingRead, ListingUpdate
from rentable.schemas.rental import RentalRead
from rentable.schemas.stats import AdminDashboardStats, AdminSettingRead, AdminSettingWrite
from rentable.schemas.support import SupportTicketRead, SupportTicketUpdate, TicketStatus
from rentable.schemas.user import BanRequest, UserRead
from rentable.services.listing_service import ListingService
from rentable.services.rental_service import RentalService
from rentable.services.settings_service import SettingsService
from rentable.services.stats_service import StatsService
from rentable.services.support_service import SupportService
from rentable.services.token_service import TokenService
from rentable.services.user_service import UserService

# Every route here is admin only
router = APIRouter(
    prefix="/admin",
    tags=["Admin"],
    dependencies=[Depends(require_admin)],
)

token_service = TokenService(TokenRepository())
listing_repo = ListingRepository()
rental_repo = RentalRepository()

user_service = UserService(UserRepository(), token_service)
listing_service = ListingService(listing_repo, rental_repo, BarterRepository(), token_service)
rental_service = RentalService(rental_repo, listing_repo)
support_service = SupportService(SupportRepository())
settings_service = SettingsService(SettingsRepository())
stats_service = StatsService(StatsRepository())


# -------- Dashboard --------


@router.get("/stats", response_model=AdminDashboardStats)
def get_admin_dashboard_stats(session: Session = Depends(get_session)):
    """
    User, listing, rental and open-ticket counts.
    """
    return stats_service.get_admin_dashboard_stats(session)


# -------- Users --------


@router.get("/users", response_model=list[UserRead])
def list_users(
    session: Session = Depends(get_session),
    skip: int = 0,
    limit: int = 50,
):
    return user_service.list_users(session, skip, limit)


@router.post("/users/{user_id}/promote", response_model=UserRead)
def promote_user(
    user_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    return user_service.promote_to_admin(session, user_id)


@router.post("/users/{user_id}/ban", response_model=UserRead)
def ban_user(
    user_id: uuid.UUID,
    payload: BanRequest,
    session: Session = Depends(get_session),
):
    """
    Banned users are rejected (403) on every authenticated route.
    """
    return user_service.ban(session, user_id, payload.reason)


@router.post("/users/{user_id}/unban", response_model=UserRead)
def unban_user(
    user_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    return user_service.unban(session, user_id)


# -------- Listings --------


@router.get("/listings", response_model=list[ListingRead])
def list_all_listings(
    session: Session = Depends(get_session),
    skip: int = 0,
    limit: int = 50,
):
    """All listings regardless of availability or flags."""
    return listing_service.list_all(session, skip, limit)


@router.get("/listings/flagged", response_model=list[ListingRead])
def list_flagged_listings(session: Session = Depends(get_session)):
    return listing_service.list_flagged(session)


@router.post("/listings/{listing_id}/approve", response_model=ListingRead)
def approve_listing(
    listing_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """Verify a listing, clear any flag and lift a removal."""
    return listing_service.approve(session, listing_id)


@router.post("/listings/{listing_id}/remove", response_model=ListingRead)
def remove_listing(
    listing_id: uuid.UUID,
    payload: ListingFlag,
    session: Session = Depends(get_session),
):
    """Take a listing off the market (unavailable + flagged)."""
    return listing_service.remove(session, listing_id, payload.reason)


@router.patch("/listings/{listing_id}", response_model=ListingRead)
def update_listing(
    listing_id: uuid.UUID,
    payload: ListingUpdate,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    """Edit any listing, including removed ones."""
    return listing_service.update_listing(session, admin, listing_id, payload, as_admin=True)


@router.delete("/listings/{listing_id}", status_code=204)
def delete_listing(
    listing_id: uuid.UUID,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    listing_service.delete_listing(session, admin, listing_id, as_admin=True)
    return None


# -------- Rentals --------


@router.get("/rentals", response_model=list[RentalRead])
def list_all_rentals(
    session: Session = Depends(get_session),
    skip: int = 0,
    limit: int = 50,
):
    return rental_service.list_all(session, skip, limit)


# -------- Support tickets --------


@router.get("/tickets", response_model=list[SupportTicketRead])
def list_tickets(
    session: Session = Depends(get_session),
    status: TicketStatus | None = None,
):
    return support_service.list_tickets(session, status)


@router.patch("/tickets/{ticket_id}", response_model=SupportTicketRead)
def update_ticket(
    ticket_id: uuid.UUID,
    payload: SupportTicketUpdate,
    session: Session = Depends(get_session),
):
    """
    Update status / priority / admin notes. Resolving stamps resolved_at.
    """
    return support_service.update_ticket(session, ticket_id, payload)


# -------- Settings --------


@router.get("/settings", response_model=list[AdminSettingRead])
def list_settings(session: Session = Depends(get_session)):
    return settings_service.list_settings(session)


@router.get("/settings/{key}", response_model=AdminSettingRead)
def get_setting(key: str, session: Session = Depends(get_session)):
    return settings_service.get_setting(session, key)


@router.put("/settings/{key}", response_model=AdminSettingRead)
def set_setting(
    key: str,
    payload: AdminSettingWrite,
    session: Session = Depends(get_session),
):
    return settings_service.set_setting(session, key, payload.value)
