from typing import Any, Dict, List

from ..database import Database


class ReportRepository:
    """Read-only aggregate queries for reporting"""

    def __init__(self, db: Database):
        self.db = db

    async def activity_summary(self, start_date: str, end_date: str) -> List[Dict[str, Any]]:
        """Incidents and events created per day between two dates, inclusive"""
        return await self.db.fetch_all(
            """
            SELECT 'incidents' AS type, COUNT(*) AS count, DATE(created_at) AS date
            FROM incidents
            WHERE DATE(created_at) BETWEEN DATE(?) AND DATE(?)
            GROUP BY DATE(created_at)
            UNION ALL
            SELECT 'events' AS type, COUNT(*) AS count, DATE(created_at) AS date
            FROM events
            WHERE DATE(created_at) BETWEEN DATE(?) AND DATE(?)
            GROUP BY DATE(created_at)
            ORDER BY date DESC, type ASC
            """,
            (start_date, end_date, start_date, end_date)
        )

    async def personnel_stats(self) -> List[Dict[str, Any]]:
        """Headcount per station"""
        return await self.db.fetch_all(
            """
            SELECT
                station,
                COUNT(*) AS total_personnel,
                SUM(CASE WHEN status = 'active' THEN 1 ELSE 0 END) AS active_personnel,
                SUM(CASE WHEN account_locked = 1 THEN 1 ELSE 0 END) AS locked_accounts,
                AVG(vacation_days_used) AS avg_vacation_used
            FROM firefighters
            GROUP BY station
            ORDER BY station
            """
        )
