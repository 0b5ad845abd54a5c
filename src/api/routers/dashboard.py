"""
대시보드 API 라우터
"""
from fastapi import APIRouter, Depends
from src.api.dependencies import get_current_session, get_dashboard_aggregator
from src.services.dashboard_aggregator import DashboardAggregator
from src.services.session_authority import SessionIdentity
from src.utils.response import success_response

router = APIRouter(tags=["dashboard"])


@router.get("/dashboard")
def get_dashboard(
    identity: SessionIdentity = Depends(get_current_session),
    aggregator: DashboardAggregator = Depends(get_dashboard_aggregator)
):
    """인증된 사건의 대시보드 조회 (사건 번호는 토큰에서만 취함)"""
    view = aggregator.get_dashboard(identity.case_number)
    return success_response(view.to_response())
