"""
CourtVisit 모델
"""
from typing import Optional
from src.db.base import RecordModel


class CourtVisit(RecordModel):
    """법원 출석 기록 (court_visits 테이블)"""
    case_number: str
    date: Optional[str] = None
    type: Optional[str] = None
    purpose: Optional[str] = None
    location: Optional[str] = None
    outcome: Optional[str] = None
