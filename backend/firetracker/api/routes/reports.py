from datetime import date, timedelta
from fastapi import APIRouter, Depends, Query
from typing import Optional, List, Dict, Any

from firetracker.api.dependencies import get_report_repository
from firetracker.db.repositories import ReportRepository

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get("/activity-summary", response_model=List[Dict[str, Any]])
async def activity_summary(
    start_date: Optional[date] = Query(None, description="First day, defaults to 30 days ago"),
    end_date: Optional[date] = Query(None, description="Last day, defaults to today"),
    reports: ReportRepository = Depends(get_report_repository)
):
    """Incidents and events created per day"""
    end_date = end_date or date.today()
    start_date = start_date or end_date - timedelta(days=30)
    return await reports.activity_summary(start_date.isoformat(), end_date.isoformat())


@router.get("/personnel-stats", response_model=List[Dict[str, Any]])
async def personnel_stats(reports: ReportRepository = Depends(get_report_repository)):
    """Headcount, active personnel and locked accounts per station"""
    return await reports.personnel_stats()
