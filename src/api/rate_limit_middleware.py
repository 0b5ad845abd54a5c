"""
로그인 Rate Limiting 미들웨어
"""
import threading
from collections import defaultdict
from datetime import datetime, timedelta
from typing import Dict, List
from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from config.settings import settings
from src.utils.response import error_response
from src.utils.logger import get_logger

logger = get_logger(__name__)


class LoginAttemptLimiter:
    """
    IP별 로그인 시도 횟수 제한 (슬라이딩 윈도우)

    간단한 in-memory 기반 Rate Limiter입니다.
    여러 프로세스로 배포하는 경우 Redis 등을 사용하는 것을 권장합니다.
    """

    def __init__(self, calls: int = None, period: int = 60):
        """
        Args:
            calls: 허용된 시도 수 (기본값: settings.rate_limit_per_minute)
            period: 기간 (초, 기본값: 60초 = 1분)
        """
        self.calls = calls or settings.rate_limit_per_minute
        self.period = period
        # IP별 시도 기록: {ip: [timestamp1, timestamp2, ...]}
        self.requests: Dict[str, List[datetime]] = defaultdict(list)
        self.last_cleanup = datetime.now()
        self._lock = threading.Lock()

    def hit(self, client_ip: str, now: datetime = None) -> int:
        """
        시도 기록

        Returns:
            남은 허용 횟수 (-1이면 초과)
        """
        now = now or datetime.now()
        with self._lock:
            # 주기적으로 오래된 기록 정리 (메모리 절약)
            if (now - self.last_cleanup).total_seconds() > 300:
                self._cleanup_old_requests(now)
                self.last_cleanup = now

            cutoff_time = now - timedelta(seconds=self.period)
            self.requests[client_ip] = [
                ts for ts in self.requests[client_ip] if ts > cutoff_time
            ]

            if len(self.requests[client_ip]) >= self.calls:
                return -1

            self.requests[client_ip].append(now)
            return self.calls - len(self.requests[client_ip])

    def reset(self) -> None:
        """모든 기록 초기화"""
        with self._lock:
            self.requests.clear()

    def _cleanup_old_requests(self, now: datetime):
        """오래된 시도 기록 정리"""
        cutoff_time = now - timedelta(seconds=self.period * 2)
        for ip in list(self.requests.keys()):
            self.requests[ip] = [
                ts for ts in self.requests[ip] if ts > cutoff_time
            ]
            if not self.requests[ip]:
                del self.requests[ip]


# 전역 로그인 시도 제한기
login_limiter = LoginAttemptLimiter()


class RateLimitMiddleware(BaseHTTPMiddleware):
    """로그인 엔드포인트에 대한 IP 기반 Rate Limiting 미들웨어"""

    def __init__(self, app, login_path: str, limiter: LoginAttemptLimiter = None):
        """
        Args:
            app: FastAPI 애플리케이션
            login_path: 제한할 로그인 경로
            limiter: 시도 제한기 (기본값: 전역 login_limiter)
        """
        super().__init__(app)
        self.login_path = login_path
        self.limiter = limiter or login_limiter

    async def dispatch(self, request: Request, call_next):
        if request.method != "POST" or request.url.path != self.login_path:
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        remaining = self.limiter.hit(client_ip)

        if remaining < 0:
            logger.warning(f"로그인 시도 제한 초과: {client_ip}")
            return JSONResponse(
                status_code=429,
                content=error_response(
                    code="RATE_LIMITED",
                    message="Too many login attempts. Please try again later."
                ),
                headers={
                    "Retry-After": str(self.limiter.period),
                    "X-RateLimit-Limit": str(self.limiter.calls),
                    "X-RateLimit-Remaining": "0"
                }
            )

        response = await call_next(request)
        response.headers["X-RateLimit-Limit"] = str(self.limiter.calls)
        response.headers["X-RateLimit-Remaining"] = str(remaining)
        return response
