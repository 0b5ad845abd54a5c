"""
Lawyer 모델
"""
from typing import Optional
from src.db.base import RecordModel


class Lawyer(RecordModel):
    """사건 담당 변호사 (lawyers 테이블, 사건당 최대 1명)"""
    case_number: str
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    bar_number: Optional[str] = None
    photo_url: Optional[str] = None
