"""
Payment 모델
"""
from decimal import Decimal
from typing import Optional
from pydantic import field_serializer, field_validator
from src.db.base import RecordModel
from src.utils.helpers import decimal_to_number, to_decimal


class Payment(RecordModel):
    """사건별 납부 내역 (payments 테이블)"""
    case_number: str
    amount: Decimal = Decimal(0)
    payment_date: Optional[str] = None
    status: Optional[str] = None
    reference_id: Optional[str] = None
    description: Optional[str] = None

    @field_validator("amount", mode="before")
    @classmethod
    def coerce_amount(cls, value):
        return to_decimal(value)

    @field_serializer("amount")
    def serialize_amount(self, value: Decimal):
        return decimal_to_number(value)
