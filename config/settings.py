"""
애플리케이션 설정 관리 모듈
"""
from dataclasses import dataclass
from pydantic_settings import BaseSettings
from typing import List, Optional
from dotenv import load_dotenv

# 환경 변수 로드
load_dotenv(encoding='utf-8')


@dataclass(frozen=True)
class AuthConfig:
    """세션 인증 설정 (SessionAuthority 생성 시 주입)"""
    secret_key: str
    algorithm: str = "HS256"
    session_expiry_hours: int = 8
    last_name_case_sensitive: bool = False
    token_denylist_enabled: bool = False


@dataclass(frozen=True)
class DashboardConfig:
    """대시보드 집계 설정 (DashboardAggregator 생성 시 주입)"""
    payment_window_months: Optional[int] = 6
    court_visit_limit: int = 5
    clamp_overpayment: bool = False


class Settings(BaseSettings):
    """애플리케이션 설정"""

    # Record store
    data_dir: str = "./data"

    # Session token
    jwt_secret_key: str
    jwt_algorithm: str = "HS256"
    session_expiry_hours: int = 8
    token_denylist_enabled: bool = False

    # Login
    last_name_case_sensitive: bool = False

    # Dashboard
    payment_window_months: Optional[int] = 6
    court_visit_limit: int = 5
    clamp_overpayment: bool = False

    # API
    api_prefix: str = "/api"
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # Logging
    log_level: str = "INFO"
    log_file_path: str = "./logs/app.log"

    # Environment
    environment: str = "development"

    # Rate Limiting (로그인 시도)
    rate_limit_per_minute: int = 10

    # CORS
    cors_origins: str = "http://localhost:3000,http://localhost:8080"

    @property
    def cors_origins_list(self) -> List[str]:
        """CORS Origins를 리스트로 변환"""
        return [origin.strip() for origin in self.cors_origins.split(",")]

    def auth_config(self) -> AuthConfig:
        """SessionAuthority용 설정 생성"""
        return AuthConfig(
            secret_key=self.jwt_secret_key,
            algorithm=self.jwt_algorithm,
            session_expiry_hours=self.session_expiry_hours,
            last_name_case_sensitive=self.last_name_case_sensitive,
            token_denylist_enabled=self.token_denylist_enabled,
        )

    def dashboard_config(self) -> DashboardConfig:
        """DashboardAggregator용 설정 생성"""
        # 0 이하이면 기간 필터 비활성화
        window = self.payment_window_months
        if window is not None and window <= 0:
            window = None
        return DashboardConfig(
            payment_window_months=window,
            court_visit_limit=self.court_visit_limit,
            clamp_overpayment=self.clamp_overpayment,
        )

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


# 전역 설정 인스턴스
settings = Settings()
