"""Record Models 모듈"""

from src.db.models.case_user import CaseUser
from src.db.models.payment import Payment
from src.db.models.lawyer import Lawyer
from src.db.models.court_visit import CourtVisit

__all__ = [
    "CaseUser",
    "Payment",
    "Lawyer",
    "CourtVisit",
]
