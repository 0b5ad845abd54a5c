"""
공통 응답 포맷 함수
"""
from typing import Any, Optional, Dict


def success_response(data: Any = None, message: Optional[str] = None) -> Dict[str, Any]:
    """
    성공 응답 생성

    Args:
        data: 응답 데이터
        message: 응답 메시지

    Returns:
        성공 응답 딕셔너리
    """
    response = {
        "success": True,
        "data": data,
        "error": None
    }

    if message:
        response["message"] = message

    return response


def error_response(
    code: str,
    message: str,
    details: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """
    에러 응답 생성

    클라이언트는 `error` 필드를 문자열 메시지로 사용한다.

    Args:
        code: 에러 코드
        message: 에러 메시지
        details: 추가 상세 정보

    Returns:
        에러 응답 딕셔너리
    """
    response = {
        "success": False,
        "error": message,
        "code": code
    }

    if details:
        response["details"] = details

    return response
