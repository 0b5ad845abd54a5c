"""
유틸리티 함수 모듈
"""
import re
import calendar
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Optional, Union


def utc_now() -> datetime:
    """
    현재 UTC 시각 (timezone-aware)

    Returns:
        datetime 객체
    """
    return datetime.now(timezone.utc)


def parse_date(value: Any) -> Optional[datetime]:
    """
    날짜 문자열 파싱

    ISO 8601 날짜/일시 및 몇 가지 구분자 형식을 지원한다.
    timezone 정보가 없으면 UTC로 간주한다.

    Args:
        value: 날짜 문자열 (또는 datetime)

    Returns:
        timezone-aware datetime 객체 또는 None
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        # fromisoformat은 구버전 파이썬에서 'Z' 접미사를 처리하지 못함
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            parsed = None
            date_formats = [
                "%Y/%m/%d",
                "%Y.%m.%d",
                "%m/%d/%Y",
            ]
            for fmt in date_formats:
                try:
                    parsed = datetime.strptime(text, fmt)
                    break
                except ValueError:
                    continue
            if parsed is None:
                return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def subtract_months(moment: datetime, months: int) -> datetime:
    """
    달력 기준으로 개월 수 빼기

    대상 월에 같은 일자가 없으면 해당 월의 마지막 날로 맞춘다.
    (예: 8월 31일 - 6개월 -> 2월 28/29일)

    Args:
        moment: 기준 시각
        months: 뺄 개월 수

    Returns:
        계산된 datetime
    """
    month_index = moment.year * 12 + (moment.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def to_decimal(value: Any) -> Decimal:
    """
    금액 값을 Decimal로 변환

    Args:
        value: 숫자 또는 숫자 문자열

    Returns:
        Decimal 값 (변환 불가 시 0)
    """
    if value is None or isinstance(value, bool):
        return Decimal(0)
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return Decimal(0)


def decimal_to_number(value: Decimal) -> Union[int, float]:
    """
    JSON 직렬화를 위해 Decimal을 int/float로 변환

    Args:
        value: Decimal 값

    Returns:
        정수면 int, 아니면 float
    """
    if value == value.to_integral_value():
        return int(value)
    return float(value)


def mask_sensitive_fields(text: str, mask_char: str = "*") -> str:
    """
    요청 바디 로깅용 민감정보 마스킹

    JSON 문자열 내 password/token 값을 가린다.

    Args:
        text: 원본 텍스트
        mask_char: 마스킹 문자

    Returns:
        마스킹된 텍스트
    """
    # "password": "..." / "token": "..." -> "password": "****"
    return re.sub(
        r'("(?:password|token)"\s*:\s*")([^"]*)(")',
        r'\g<1>' + mask_char * 4 + r'\g<3>',
        text,
        flags=re.IGNORECASE
    )
