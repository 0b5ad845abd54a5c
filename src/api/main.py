"""
FastAPI 애플리케이션 메인 파일
"""
from fastapi import FastAPI, Depends
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from config.settings import settings
from src.utils.logger import setup_logging, get_logger
from src.utils.helpers import utc_now
from src.api.middleware import LoggingMiddleware, SecurityHeadersMiddleware
from src.api.rate_limit_middleware import RateLimitMiddleware
from src.api.dependencies import get_record_store
from src.api.error_handler import (
    validation_exception_handler,
    validation_error_handler,
    authentication_error_handler,
    not_found_handler,
    record_store_error_handler,
    internal_error_handler,
    general_exception_handler
)
from src.api.routers import auth, dashboard
from src.db.record_store import RecordStore
from src.utils.exceptions import (
    ValidationError,
    AuthenticationError,
    NotFoundError,
    RecordStoreError,
    InternalError
)

# 로깅 초기화
setup_logging()
logger = get_logger(__name__)

API_VERSION = "1.0.0"

app = FastAPI(
    title="Case Status Portal API",
    description="사건 번호 기반 의뢰인 인증 및 납부/법원 출석 현황 대시보드",
    version=API_VERSION
)

# CORS 설정
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["Authorization", "Content-Type"],
)

# 보안 헤더 / 로그인 시도 제한 / 로깅 미들웨어
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RateLimitMiddleware, login_path=f"{settings.api_prefix}/login")
app.add_middleware(LoggingMiddleware)

# 에러 핸들러 등록
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(ValidationError, validation_error_handler)
app.add_exception_handler(AuthenticationError, authentication_error_handler)
app.add_exception_handler(NotFoundError, not_found_handler)
app.add_exception_handler(RecordStoreError, record_store_error_handler)
app.add_exception_handler(InternalError, internal_error_handler)
app.add_exception_handler(Exception, general_exception_handler)


@app.on_event("startup")
async def startup_event():
    """애플리케이션 시작 시 실행"""
    logger.info("애플리케이션 시작")

    if get_record_store().health_check():
        logger.info(f"레코드 저장소 확인 완료: {settings.data_dir}")
    else:
        logger.warning(f"레코드 저장소 확인 실패: {settings.data_dir}")


@app.on_event("shutdown")
async def shutdown_event():
    """애플리케이션 종료 시 실행"""
    logger.info("애플리케이션 종료")


@app.get(f"{settings.api_prefix}/health")
def health_check(store: RecordStore = Depends(get_record_store)):
    """헬스 체크 엔드포인트"""
    store_healthy = store.health_check()

    return {
        "status": "OK",
        "timestamp": utc_now().isoformat(),
        "version": API_VERSION,
        "record_store": "healthy" if store_healthy else "unhealthy"
    }


# 라우터 등록
app.include_router(auth.router, prefix=settings.api_prefix)
app.include_router(dashboard.router, prefix=settings.api_prefix)
