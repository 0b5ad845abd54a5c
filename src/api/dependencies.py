"""
API 의존성 주입 모듈

SessionAuthority/DashboardAggregator는 전역 설정을 직접 읽지 않고,
여기서 명시적인 설정 객체를 받아 생성된다.
"""
from datetime import datetime
from typing import Callable, Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from config.settings import AuthConfig, DashboardConfig, settings
from src.db.record_store import JsonRecordStore, RecordStore
from src.services.dashboard_aggregator import DashboardAggregator
from src.services.session_authority import SessionAuthority, SessionIdentity, TokenDenylist
from src.utils.exceptions import AuthenticationError
from src.utils.helpers import utc_now

bearer_scheme = HTTPBearer(auto_error=False)

# 로그아웃 토큰 목록 (token_denylist_enabled일 때만 사용)
token_denylist = TokenDenylist()


def get_auth_config() -> AuthConfig:
    return settings.auth_config()


def get_dashboard_config() -> DashboardConfig:
    return settings.dashboard_config()


def get_record_store() -> RecordStore:
    return JsonRecordStore(settings.data_dir)


def get_clock() -> Callable[[], datetime]:
    return utc_now


def get_token_denylist() -> TokenDenylist:
    return token_denylist


def get_session_authority(
    config: AuthConfig = Depends(get_auth_config),
    store: RecordStore = Depends(get_record_store),
    clock: Callable[[], datetime] = Depends(get_clock),
    denylist: TokenDenylist = Depends(get_token_denylist)
) -> SessionAuthority:
    return SessionAuthority(
        config,
        store,
        clock=clock,
        denylist=denylist if config.token_denylist_enabled else None
    )


def get_dashboard_aggregator(
    config: DashboardConfig = Depends(get_dashboard_config),
    store: RecordStore = Depends(get_record_store),
    clock: Callable[[], datetime] = Depends(get_clock)
) -> DashboardAggregator:
    return DashboardAggregator(config, store, clock=clock)


def get_current_session(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    authority: SessionAuthority = Depends(get_session_authority)
) -> SessionIdentity:
    """
    Bearer 토큰 검증

    Raises:
        AuthenticationError: 토큰이 없는 경우 (401)
        TokenRejectedError: 토큰 검증 실패 (403)
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Access token required")
    return authority.validate(credentials.credentials)
