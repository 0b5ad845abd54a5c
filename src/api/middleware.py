"""
API 미들웨어 모듈
"""
import logging
import time
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from src.utils.logger import get_logger
from src.utils.helpers import mask_sensitive_fields

logger = get_logger(__name__)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
    "Cache-Control": "no-store",
}


class LoggingMiddleware(BaseHTTPMiddleware):
    """요청 로깅 미들웨어"""

    async def dispatch(self, request: Request, call_next):
        """요청 처리 및 로깅"""
        start_time = time.time()

        # 요청 정보 로깅
        client_ip = request.client.host if request.client else "unknown"
        method = request.method
        path = request.url.path

        logger.info(
            f"요청 수신: {method} {path} - IP: {client_ip}"
        )

        # 요청 바디 로깅 (비밀번호/토큰 마스킹)
        if request.method in ["POST", "PUT", "PATCH"] and logger.isEnabledFor(logging.DEBUG):
            try:
                body = await request.body()
                body_str = body.decode("utf-8")
                logger.debug(f"요청 바디: {mask_sensitive_fields(body_str)}")
            except UnicodeDecodeError as e:
                logger.warning(f"요청 바디 로깅 실패: {str(e)}")

        # 응답 처리
        try:
            response = await call_next(request)

            # 응답 시간 계산
            process_time = time.time() - start_time

            logger.info(
                f"응답 완료: {method} {path} - "
                f"상태: {response.status_code} - "
                f"소요 시간: {process_time:.3f}초"
            )

            response.headers["X-Process-Time"] = str(process_time)

            return response

        except Exception as e:
            process_time = time.time() - start_time
            logger.error(
                f"요청 처리 실패: {method} {path} - "
                f"오류: {str(e)} - "
                f"소요 시간: {process_time:.3f}초"
            )
            raise


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """기본 보안 응답 헤더 추가 미들웨어"""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        for header, value in SECURITY_HEADERS.items():
            response.headers.setdefault(header, value)
        return response
