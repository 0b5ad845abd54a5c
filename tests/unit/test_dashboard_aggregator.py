"""
DashboardAggregator 단위 테스트
"""
from decimal import Decimal

import pytest

from config.settings import DashboardConfig
from src.db.record_store import InMemoryRecordStore
from src.services.dashboard_aggregator import (
    DashboardAggregator,
    calculate_progress,
    calculate_remaining,
)
from src.utils.exceptions import NotFoundError, InternalError


@pytest.fixture
def aggregator(dashboard_config, record_store, clock):
    return DashboardAggregator(dashboard_config, record_store, clock=clock)


class TestCalculations:
    """진행률/잔액 계산 테스트"""

    @pytest.mark.unit
    def test_half_paid(self):
        assert calculate_progress(Decimal(5000), Decimal(10000)) == 50
        assert calculate_remaining(Decimal(5000), Decimal(10000)) == Decimal(5000)

    @pytest.mark.unit
    def test_zero_total_has_no_division(self):
        assert calculate_progress(Decimal(100), Decimal(0)) == 0
        assert calculate_progress(Decimal(0), Decimal(0)) == 0

    @pytest.mark.unit
    def test_round_half_up(self):
        assert calculate_progress(Decimal(1), Decimal(8)) == 13   # 12.5
        assert calculate_progress(Decimal(1), Decimal(3)) == 33   # 33.33
        assert calculate_progress(Decimal(2), Decimal(3)) == 67   # 66.67

    @pytest.mark.unit
    def test_overpaid_without_clamp(self):
        assert calculate_progress(Decimal(1800), Decimal(1500)) == 120
        assert calculate_remaining(Decimal(1800), Decimal(1500)) == Decimal(-300)

    @pytest.mark.unit
    def test_overpaid_with_clamp(self):
        assert calculate_progress(Decimal(1800), Decimal(1500), clamp=True) == 100
        assert calculate_remaining(Decimal(1800), Decimal(1500), clamp=True) == Decimal(0)


class TestGetDashboard:
    """get_dashboard() 테스트"""

    @pytest.mark.unit
    def test_example_case(self, aggregator):
        """6개월 이내 3000 + 2000 납부, 총액 10000"""
        view = aggregator.get_dashboard("FM-1001")

        assert view.amount_paid == Decimal(5000)
        assert view.progress == 50
        assert view.amount_remaining == Decimal(5000)
        assert view.total_amount == Decimal(10000)

    @pytest.mark.unit
    def test_payments_filtered_to_window_and_sorted_desc(self, aggregator):
        """기간 밖 납부 제외, 최신순 정렬"""
        view = aggregator.get_dashboard("FM-1001")
        assert [p.reference_id for p in view.payments] == ["PAY-2", "PAY-1"]

    @pytest.mark.unit
    def test_twelve_month_window(self, record_store, clock):
        """12개월 창이면 2024-11 납부도 포함"""
        aggregator = DashboardAggregator(
            DashboardConfig(payment_window_months=12), record_store, clock=clock
        )
        view = aggregator.get_dashboard("FM-1001")

        assert [p.reference_id for p in view.payments] == ["PAY-2", "PAY-1", "PAY-3"]
        assert view.amount_paid == Decimal(6500)
        assert view.progress == 65

    @pytest.mark.unit
    def test_window_disabled(self, clock):
        """기간 필터 비활성화 시 날짜 없는 납부도 포함"""
        store = InMemoryRecordStore({
            "users": [{"id": 1, "case_number": "C-1", "last_name": "A", "total_amount": 100}],
            "payments": [
                {"case_number": "C-1", "amount": 10, "payment_date": "2001-01-01", "reference_id": "old"},
                {"case_number": "C-1", "amount": 5, "payment_date": "unknown", "reference_id": "undated"},
                {"case_number": "C-1", "amount": 20, "payment_date": "2025-01-01", "reference_id": "new"},
            ],
        })
        aggregator = DashboardAggregator(
            DashboardConfig(payment_window_months=None), store, clock=clock
        )
        view = aggregator.get_dashboard("C-1")

        assert [p.reference_id for p in view.payments] == ["new", "old", "undated"]
        assert view.amount_paid == Decimal(35)

    @pytest.mark.unit
    def test_court_visits_most_recent_five(self, aggregator):
        """7건 중 최근 5건만 최신순으로"""
        view = aggregator.get_dashboard("FM-1001")

        assert [v.date for v in view.court_visits] == [
            "2025-05-20", "2025-05-05", "2025-04-05", "2025-03-05", "2025-02-05"
        ]

    @pytest.mark.unit
    def test_lawyer_assigned(self, aggregator):
        view = aggregator.get_dashboard("FM-1001")
        assert view.lawyer.assigned is True

        lawyer = view.to_response()["lawyer"]
        assert lawyer["assigned"] is True
        assert lawyer["name"] == "Ann Counsel"
        assert lawyer["case_number"] == "FM-1001"

    @pytest.mark.unit
    def test_lawyer_unassigned_is_explicit(self, aggregator):
        """담당 변호사가 없으면 명시적 미배정 상태"""
        view = aggregator.get_dashboard("FM-2002")

        assert view.lawyer.assigned is False
        assert view.to_response()["lawyer"] == {"assigned": False}

    @pytest.mark.unit
    def test_zero_total_amount(self, aggregator):
        view = aggregator.get_dashboard("FM-3003")
        assert view.progress == 0
        assert view.amount_paid == Decimal(0)
        assert view.payments == []
        assert view.court_visits == []

    @pytest.mark.unit
    def test_overpaid_case_keeps_identity(self, aggregator):
        """초과 납부 시에도 paid + remaining == total"""
        view = aggregator.get_dashboard("FM-2002")

        assert view.progress == 120
        assert view.amount_remaining == Decimal(-300)
        assert view.amount_paid + view.amount_remaining == view.total_amount

    @pytest.mark.unit
    def test_overpaid_case_with_clamp(self, record_store, clock):
        aggregator = DashboardAggregator(
            DashboardConfig(clamp_overpayment=True), record_store, clock=clock
        )
        view = aggregator.get_dashboard("FM-2002")

        assert view.progress == 100
        assert view.amount_remaining == Decimal(0)

    @pytest.mark.unit
    def test_fractional_amounts_identity(self, clock):
        """소수 금액도 정확히 합산"""
        store = InMemoryRecordStore({
            "users": [{"id": 1, "case_number": "C-1", "last_name": "A", "total_amount": 0.3}],
            "payments": [
                {"case_number": "C-1", "amount": 0.1, "payment_date": "2025-06-01"},
                {"case_number": "C-1", "amount": 0.2, "payment_date": "2025-06-02"},
            ],
        })
        view = DashboardAggregator(DashboardConfig(), store, clock=clock).get_dashboard("C-1")

        assert view.amount_paid == Decimal("0.3")
        assert view.amount_remaining == Decimal(0)
        assert view.progress == 100

    @pytest.mark.unit
    @pytest.mark.parametrize("case_number", ["FM-1001", "FM-2002", "FM-3003"])
    def test_no_cross_case_leakage(self, aggregator, case_number):
        """모든 하위 레코드는 요청한 사건 번호만 포함"""
        view = aggregator.get_dashboard(case_number)

        assert view.user["case_number"] == case_number
        assert all(p.case_number == case_number for p in view.payments)
        assert all(v.case_number == case_number for v in view.court_visits)
        if view.lawyer.assigned:
            assert view.lawyer.lawyer.case_number == case_number

    @pytest.mark.unit
    def test_profile_excludes_credentials(self, aggregator):
        view = aggregator.get_dashboard("FM-1001")
        assert "password" not in view.user
        assert "password_hash" not in view.user
        assert view.user["first_name"] == "John"

    @pytest.mark.unit
    def test_missing_user_is_not_found(self, aggregator):
        with pytest.raises(NotFoundError):
            aggregator.get_dashboard("FM-9999")

    @pytest.mark.unit
    def test_invalid_related_records_are_skipped(self, clock):
        """형식이 잘못된 하위 레코드는 건너뜀"""
        store = InMemoryRecordStore({
            "users": [{"id": 1, "case_number": "C-1", "last_name": "A", "total_amount": 100}],
            "payments": [
                {"amount": 50, "payment_date": "2025-06-01"},
                {"case_number": "C-1", "amount": 25, "payment_date": "2025-06-01"},
            ],
            "lawyers": [{"case_number": "C-1"}],
        })
        view = DashboardAggregator(DashboardConfig(), store, clock=clock).get_dashboard("C-1")

        assert view.amount_paid == Decimal(25)
        assert view.lawyer.assigned is False

    @pytest.mark.unit
    def test_unexpected_error_is_wrapped(self, clock):
        """예상치 못한 오류는 InternalError로 변환"""
        class BrokenStore:
            def read(self, table_name):
                raise RuntimeError("disk on fire")

            def health_check(self):
                return False

        aggregator = DashboardAggregator(DashboardConfig(), BrokenStore(), clock=clock)
        with pytest.raises(InternalError):
            aggregator.get_dashboard("FM-1001")

    @pytest.mark.unit
    def test_response_serialization(self, aggregator, clock):
        """JSON 응답 형태"""
        data = aggregator.get_dashboard("FM-1001").to_response()

        assert data["amount_paid"] == 5000
        assert data["amount_remaining"] == 5000
        assert data["progress"] == 50
        assert data["payments"][0]["amount"] == 3000
        assert data["payment_window_months"] == 6
        assert data["last_updated"].startswith("2025-06-15T12:00:00")
