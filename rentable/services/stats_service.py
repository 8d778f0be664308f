# rentable/services/stats_service.py
from sqlmodel import Session

from rentable.repositories.stats_repo import StatsRepository
from rentable.schemas.stats import AdminDashboardStats


class StatsService:
    """
    Orchestrates aggregated admin dashboard statistics.
    """

    def __init__(self, repo: StatsRepository):
        self.repo = repo

    def get_admin_dashboard_stats(self, session: Session) -> AdminDashboardStats:
        return AdminDashboardStats(
            user_count=self.repo.count_users(session),
            listing_count=self.repo.count_listings(session),
            rental_count=self.repo.count_rentals(session),
            open_ticket_count=self.repo.count_open_tickets(session),
        )
