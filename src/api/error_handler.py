"""
API 에러 핸들러 모듈
"""
from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from src.utils.exceptions import (
    ValidationError,
    AuthenticationError,
    TokenRejectedError,
    NotFoundError,
    RecordStoreError,
    InternalError
)
from src.utils.response import error_response
from src.utils.logger import get_logger

logger = get_logger(__name__)


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """요청 바디 검증 에러 핸들러"""
    errors = exc.errors()
    field = errors[0].get("loc")[-1] if errors and errors[0].get("loc") else None

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_response(
            code="VALIDATION_ERROR",
            message="Invalid request body",
            details={"field": field} if field else None
        )
    )


async def validation_error_handler(request: Request, exc: ValidationError):
    """필수 입력 누락 에러 핸들러"""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_response(
            code="VALIDATION_ERROR",
            message=exc.message
        )
    )


async def authentication_error_handler(request: Request, exc: AuthenticationError):
    """
    인증 에러 핸들러

    토큰 없음/자격 증명 불일치는 401, 제시된 토큰 거부는 403.
    """
    if isinstance(exc, TokenRejectedError):
        return JSONResponse(
            status_code=status.HTTP_403_FORBIDDEN,
            content=error_response(code="INVALID_TOKEN", message=exc.message)
        )

    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content=error_response(code="UNAUTHORIZED", message=exc.message),
        headers={"WWW-Authenticate": "Bearer"}
    )


async def not_found_handler(request: Request, exc: NotFoundError):
    """사용자 레코드 없음 에러 핸들러"""
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content=error_response(
            code="USER_NOT_FOUND",
            message="User not found"
        )
    )


async def record_store_error_handler(request: Request, exc: RecordStoreError):
    """레코드 저장소 에러 핸들러"""
    logger.error(f"레코드 저장소 오류: {str(exc)} (table={exc.table})")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_response(
            code="RECORD_STORE_ERROR",
            message="Failed to load data"
        )
    )


async def internal_error_handler(request: Request, exc: InternalError):
    """집계 중 내부 오류 핸들러 (상세 내용은 서버 로그에만 기록)"""
    logger.error(f"내부 오류: {str(exc)}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_response(
            code="INTERNAL_SERVER_ERROR",
            message="Internal server error"
        )
    )


async def general_exception_handler(request: Request, exc: Exception):
    """일반 예외 핸들러"""
    logger.error(f"예상치 못한 오류: {str(exc)}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_response(
            code="INTERNAL_SERVER_ERROR",
            message="Internal server error"
        )
    )
