"""
사건 대시보드 집계 서비스 모듈

인증된 사건 번호 하나에 대해 프로필, 납부 내역, 담당 변호사, 법원 출석 기록을
모아 납부 진행률을 계산한다. 모든 하위 레코드는 요청한 사건 번호로만 필터링된다.
"""
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Callable, Dict, List, Optional
from pydantic import BaseModel, field_serializer, model_serializer
from config.settings import DashboardConfig
from src.db.models import CaseUser, CourtVisit, Lawyer, Payment
from src.db.record_store import (
    COURT_VISITS_TABLE,
    LAWYERS_TABLE,
    PAYMENTS_TABLE,
    USERS_TABLE,
    RecordStore,
    read_models,
)
from src.utils.exceptions import CasePortalError, InternalError, NotFoundError
from src.utils.helpers import decimal_to_number, parse_date, subtract_months, utc_now
from src.utils.logger import get_logger, log_execution_time

logger = get_logger(__name__)

# 날짜를 해석할 수 없는 레코드는 정렬 시 맨 뒤로
_UNDATED = datetime.min.replace(tzinfo=timezone.utc)


class LawyerAssignment(BaseModel):
    """담당 변호사 배정 상태 (미배정도 명시적으로 표현)"""
    lawyer: Optional[Lawyer] = None

    @property
    def assigned(self) -> bool:
        return self.lawyer is not None

    @model_serializer
    def serialize(self) -> Dict[str, Any]:
        if self.lawyer is None:
            return {"assigned": False}
        return {"assigned": True, **self.lawyer.to_json()}


class DashboardView(BaseModel):
    """사건별 대시보드 응답 모델"""
    user: Dict[str, Any]
    payments: List[Payment]
    lawyer: LawyerAssignment
    court_visits: List[CourtVisit]
    progress: int
    amount_paid: Decimal
    amount_remaining: Decimal
    total_amount: Decimal
    payment_window_months: Optional[int] = None
    last_updated: datetime

    @field_serializer("amount_paid", "amount_remaining", "total_amount")
    def serialize_amount(self, value: Decimal):
        return decimal_to_number(value)

    def to_response(self) -> Dict[str, Any]:
        """JSON 응답용 딕셔너리"""
        return self.model_dump(mode="json")


def calculate_progress(amount_paid: Decimal, total_amount: Decimal, clamp: bool = False) -> int:
    """
    납부 진행률(%) 계산

    총액이 0 이하이면 0을 반환한다. 정수 반올림은 half-up.

    Args:
        amount_paid: 납부 합계
        total_amount: 총액
        clamp: 100% 초과 시 100으로 제한할지 여부

    Returns:
        진행률 (정수)
    """
    if total_amount <= 0:
        return 0
    percent = (amount_paid / total_amount * 100).quantize(Decimal(1), rounding=ROUND_HALF_UP)
    progress = int(percent)
    if clamp:
        progress = min(progress, 100)
    return progress


def calculate_remaining(amount_paid: Decimal, total_amount: Decimal, clamp: bool = False) -> Decimal:
    """
    잔여 금액 계산

    clamp가 False이면 초과 납부 시 음수가 될 수 있다.
    """
    remaining = total_amount - amount_paid
    if clamp and remaining < 0:
        return Decimal(0)
    return remaining


def _sort_key(value: Optional[str]) -> datetime:
    return parse_date(value) or _UNDATED


class DashboardAggregator:
    """사건 대시보드 집계기"""

    def __init__(
        self,
        config: DashboardConfig,
        record_store: RecordStore,
        clock: Callable[[], datetime] = utc_now
    ):
        self.config = config
        self.record_store = record_store
        self.clock = clock

    @log_execution_time()
    def get_dashboard(self, case_number: str) -> DashboardView:
        """
        대시보드 데이터 조회

        case_number는 반드시 검증된 세션 토큰에서 얻은 값이어야 한다.

        Args:
            case_number: 인증된 사건 번호

        Returns:
            DashboardView

        Raises:
            NotFoundError: 사건 번호에 해당하는 사용자가 없는 경우
            RecordStoreError: 저장소 읽기 실패
            InternalError: 집계 중 예상치 못한 오류
        """
        try:
            return self._build(case_number)
        except CasePortalError:
            raise
        except Exception as e:
            logger.error(f"대시보드 집계 실패: {case_number} - {str(e)}", exc_info=True)
            raise InternalError(str(e)) from e

    def _build(self, case_number: str) -> DashboardView:
        user = self._find_user(case_number)
        now = self.clock()

        payments = self.find_payments(case_number, now)
        lawyer = self.find_lawyer(case_number)
        court_visits = self.find_court_visits(case_number)

        amount_paid = sum((payment.amount for payment in payments), Decimal(0))
        total_amount = user.total_amount
        clamp = self.config.clamp_overpayment

        logger.debug(
            f"대시보드 집계: {case_number} - 납부 {len(payments)}건, 출석 {len(court_visits)}건"
        )

        return DashboardView(
            user=user.profile(),
            payments=payments,
            lawyer=LawyerAssignment(lawyer=lawyer),
            court_visits=court_visits,
            progress=calculate_progress(amount_paid, total_amount, clamp),
            amount_paid=amount_paid,
            amount_remaining=calculate_remaining(amount_paid, total_amount, clamp),
            total_amount=total_amount,
            payment_window_months=self.config.payment_window_months,
            last_updated=now
        )

    def _find_user(self, case_number: str) -> CaseUser:
        for user in read_models(self.record_store, USERS_TABLE, CaseUser):
            if user.case_number == case_number:
                return user
        logger.error(f"세션은 유효하나 사용자 레코드 없음: {case_number}")
        raise NotFoundError(case_number)

    def find_payments(self, case_number: str, now: datetime) -> List[Payment]:
        """
        사건의 납부 내역 조회 (기간 필터 적용, 최신순)

        기간 필터가 켜져 있으면 날짜를 해석할 수 없는 납부는 제외된다.
        """
        payments = [
            payment for payment in read_models(self.record_store, PAYMENTS_TABLE, Payment)
            if payment.case_number == case_number
        ]

        window = self.config.payment_window_months
        if window:
            cutoff = subtract_months(now, window)
            payments = [
                payment for payment in payments
                if (parse_date(payment.payment_date) or _UNDATED) >= cutoff
            ]

        payments.sort(key=lambda payment: _sort_key(payment.payment_date), reverse=True)
        return payments

    def find_lawyer(self, case_number: str) -> Optional[Lawyer]:
        """사건 담당 변호사 조회 (없으면 None)"""
        for lawyer in read_models(self.record_store, LAWYERS_TABLE, Lawyer):
            if lawyer.case_number == case_number:
                return lawyer
        return None

    def find_court_visits(self, case_number: str) -> List[CourtVisit]:
        """사건의 최근 법원 출석 기록 조회 (최신순, court_visit_limit건)"""
        visits = [
            visit for visit in read_models(self.record_store, COURT_VISITS_TABLE, CourtVisit)
            if visit.case_number == case_number
        ]
        visits.sort(key=lambda visit: _sort_key(visit.date), reverse=True)
        return visits[:self.config.court_visit_limit]
