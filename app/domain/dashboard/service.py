"""Dashboard service - Read-only statistics for the landing dashboard"""

import calendar
import logging
import random
from collections import Counter
from datetime import datetime, timedelta

from sqlalchemy.orm import Session

from ... import config
from ...constants import (
    LIVES_PER_FULFILLED_REQUEST,
    MONTH_NAMES,
    RECENT_REQUEST_WINDOW_DAYS,
    REQUEST_FULFILLED,
    REQUEST_OPEN,
    TRENDS_WINDOW_MONTHS,
)
from ..blood_requests.repository import BloodRequestRepository
from ..inventory.repository import InventoryRepository
from ..users.repository import UserRepository

logger = logging.getLogger(__name__)


def shift_months(moment: datetime, months: int) -> datetime:
    """Move a datetime by whole calendar months, clamping the day to the target month's length"""
    index = moment.year * 12 + (moment.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def placeholder_trends(now: datetime) -> list[dict]:
    """Six months of random 300-799 counts ending with the current month"""
    trends = []
    for offset in range(TRENDS_WINDOW_MONTHS - 1, -1, -1):
        month = shift_months(now, -offset).month
        trends.append({"month": MONTH_NAMES[month - 1], "count": random.randint(300, 799)})
    return trends


class DashboardService:
    """Aggregates over users, requests and inventory. Never writes."""

    def __init__(self, db: Session):
        self.db = db
        self.users = UserRepository()
        self.requests = BloodRequestRepository()
        self.inventory = InventoryRepository()

    def get_stats(self) -> dict:
        now = datetime.utcnow()
        fulfilled = self.requests.count_by_status(self.db, REQUEST_FULFILLED)
        recent = self.requests.count_by_status(
            self.db, REQUEST_OPEN, since=now - timedelta(days=RECENT_REQUEST_WINDOW_DAYS)
        )
        return {
            "totalDonors": self.users.count_donors(self.db),
            "livesSaved": fulfilled * LIVES_PER_FULFILLED_REQUEST,
            "recentRequestsCount": recent,
            # Per-user points are filled in by the client
            "points": 0,
        }

    def get_trends(self) -> list[dict]:
        """
        Fulfilled requests per month over the trailing six months.

        Months are bucketed by the request's creation time, oldest first, and
        months without fulfilled requests are left out. With no data at all an
        empty list is returned, or a randomized placeholder series when
        DASHBOARD_PLACEHOLDER_TRENDS is enabled.
        """
        now = datetime.utcnow()
        since = shift_months(now, -TRENDS_WINDOW_MONTHS)

        counts = Counter(
            (created.year, created.month)
            for created in self.requests.created_dates(self.db, REQUEST_FULFILLED, since)
        )

        if not counts:
            if config.DASHBOARD_PLACEHOLDER_TRENDS:
                logger.debug("📊 No fulfilled requests yet; serving placeholder trends")
                return placeholder_trends(now)
            return []

        return [
            {"month": MONTH_NAMES[month - 1], "count": counts[(year, month)]}
            for year, month in sorted(counts)
        ]

    def get_inventory_summary(self) -> list[dict]:
        return [
            {"group": blood_type, "value": int(total or 0)}
            for blood_type, total in self.inventory.total_quantity_by_blood_type(self.db)
        ]
