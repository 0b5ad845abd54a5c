"""
CaseUser 모델
"""
from decimal import Decimal
from typing import ClassVar, FrozenSet, Optional, Union
from pydantic import field_serializer, field_validator
from src.db.base import RecordModel
from src.utils.helpers import decimal_to_number, to_decimal


class CaseUser(RecordModel):
    """사건 의뢰인 (users 테이블)"""
    private_fields: ClassVar[FrozenSet[str]] = frozenset({"password", "password_hash"})

    id: Union[int, str]
    case_number: str
    last_name: str
    first_name: str = ""
    status: Optional[str] = None
    total_amount: Decimal = Decimal(0)
    photo_url: Optional[str] = None
    password_hash: Optional[str] = None
    # 레거시 평문 비밀번호 (검증에 사용하지 않음, scripts/hash_passwords.py로 변환)
    password: Optional[str] = None

    @field_validator("total_amount", mode="before")
    @classmethod
    def coerce_amount(cls, value):
        return to_decimal(value)

    @field_serializer("total_amount")
    def serialize_amount(self, value: Decimal):
        return decimal_to_number(value)

    def profile(self) -> dict:
        """자격 증명 필드를 제외한 프로필"""
        return self.to_json()
