"""
자격 증명 검증 및 세션 토큰 발급/검증 서비스 모듈
"""
import threading
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Optional, Union
import jwt
from config.settings import AuthConfig
from src.db.models import CaseUser
from src.db.record_store import RecordStore, USERS_TABLE, read_models
from src.services.security import burn_verification, verify_password
from src.utils.exceptions import AuthenticationError, TokenRejectedError, ValidationError
from src.utils.helpers import utc_now
from src.utils.logger import get_logger

logger = get_logger(__name__)

USER_TYPE_CLIENT = "client"
REQUIRED_CLAIMS = ["user_id", "case_number", "iat", "exp", "jti"]


@dataclass(frozen=True)
class SessionIdentity:
    """검증된 토큰에서 추출한 세션 정보"""
    user_id: Union[int, str]
    case_number: str
    issued_at: datetime
    expires_at: datetime
    token_id: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "user_id": self.user_id,
            "case_number": self.case_number,
            "user_type": USER_TYPE_CLIENT,
            "issued_at": self.issued_at.isoformat(),
            "expires_at": self.expires_at.isoformat(),
        }


@dataclass(frozen=True)
class SessionGrant:
    """로그인 성공 시 발급되는 토큰과 사용자 프로필"""
    token: str
    user: Dict[str, Any]
    issued_at: datetime
    expires_at: datetime
    expires_in: str


class TokenDenylist:
    """
    로그아웃된 토큰(jti) 목록

    토큰 만료 시각까지만 보관하며, 프로세스 메모리에만 존재한다.
    """

    def __init__(self, clock: Callable[[], datetime] = utc_now):
        self._clock = clock
        self._revoked: Dict[str, datetime] = {}
        self._lock = threading.Lock()

    def revoke(self, token_id: str, expires_at: datetime) -> None:
        with self._lock:
            self._revoked[token_id] = expires_at

    def is_revoked(self, token_id: str, now: datetime = None) -> bool:
        now = now or self._clock()
        with self._lock:
            # 만료된 항목 정리
            for jti in [jti for jti, exp in self._revoked.items() if exp <= now]:
                del self._revoked[jti]
            return token_id in self._revoked

    def __len__(self) -> int:
        with self._lock:
            return len(self._revoked)


class SessionAuthority:
    """
    사건 자격 증명(사건 번호, 성, 비밀번호) 검증 및 세션 토큰 관리

    서버 측 세션 테이블 없이 서명된 JWT만으로 세션을 표현한다.
    """

    def __init__(
        self,
        config: AuthConfig,
        record_store: RecordStore,
        clock: Callable[[], datetime] = utc_now,
        denylist: Optional[TokenDenylist] = None
    ):
        """
        Args:
            config: 인증 설정
            record_store: 사용자 레코드 저장소
            clock: 현재 시각 함수 (테스트에서 교체 가능)
            denylist: 로그아웃 토큰 목록 (None이면 설정에 따라 생성)
        """
        self.config = config
        self.record_store = record_store
        self.clock = clock
        if denylist is None and config.token_denylist_enabled:
            denylist = TokenDenylist(clock)
        self.denylist = denylist

    @property
    def session_lifetime(self) -> timedelta:
        return timedelta(hours=self.config.session_expiry_hours)

    def _last_name_matches(self, stored: str, submitted: str) -> bool:
        if self.config.last_name_case_sensitive:
            return stored == submitted
        return stored.casefold() == submitted.casefold()

    def _find_user(self, case_number: str, last_name: str) -> Optional[CaseUser]:
        for user in read_models(self.record_store, USERS_TABLE, CaseUser):
            if user.case_number == case_number and self._last_name_matches(user.last_name, last_name):
                return user
        return None

    def authenticate(self, case_number: str, last_name: str, password: str) -> SessionGrant:
        """
        자격 증명 검증 후 세션 토큰 발급

        사용자 없음과 비밀번호 불일치는 동일한 오류로 응답한다.

        Args:
            case_number: 사건 번호
            last_name: 성
            password: 비밀번호

        Returns:
            SessionGrant

        Raises:
            ValidationError: 입력값이 비어 있는 경우
            AuthenticationError: 자격 증명이 일치하지 않는 경우
        """
        fields = {"case_number": case_number, "last_name": last_name, "password": password}
        for field, value in fields.items():
            if not isinstance(value, str) or not value.strip():
                raise ValidationError("All fields are required", field=field)

        case_number = case_number.strip()
        last_name = last_name.strip()

        user = self._find_user(case_number, last_name)
        if user is None:
            burn_verification(password)
            logger.warning(f"로그인 실패: {case_number}")
            raise AuthenticationError()

        if not user.password_hash:
            # 해시 미설정 계정도 동일한 검증 비용을 소모
            burn_verification(password)
            logger.error(f"비밀번호 해시가 설정되지 않은 사용자: {case_number}")
            raise AuthenticationError()

        if not verify_password(password, user.password_hash):
            logger.warning(f"로그인 실패: {case_number}")
            raise AuthenticationError()

        issued_at = self.clock().replace(microsecond=0)
        expires_at = issued_at + self.session_lifetime
        token = self._issue_token(user, issued_at, expires_at)

        logger.info(f"로그인 성공: {case_number}")
        return SessionGrant(
            token=token,
            user=user.profile(),
            issued_at=issued_at,
            expires_at=expires_at,
            expires_in=f"{self.config.session_expiry_hours}h"
        )

    def _issue_token(self, user: CaseUser, issued_at: datetime, expires_at: datetime) -> str:
        payload = {
            "user_id": user.id,
            "case_number": user.case_number,
            "user_type": USER_TYPE_CLIENT,
            "iat": int(issued_at.timestamp()),
            "exp": int(expires_at.timestamp()),
            "jti": uuid.uuid4().hex,
        }
        return jwt.encode(payload, self.config.secret_key, algorithm=self.config.algorithm)

    def validate(self, token: str) -> SessionIdentity:
        """
        토큰 서명 및 만료 검증

        Args:
            token: 세션 토큰

        Returns:
            SessionIdentity

        Raises:
            TokenRejectedError: 형식 오류, 서명 불일치, 만료, 로그아웃된 토큰
        """
        if not isinstance(token, str) or not token:
            raise TokenRejectedError()

        try:
            # 만료는 주입된 clock 기준으로 직접 확인
            payload = jwt.decode(
                token,
                self.config.secret_key,
                algorithms=[self.config.algorithm],
                options={
                    "verify_exp": False,
                    "verify_iat": False,
                    "verify_nbf": False,
                    "require": REQUIRED_CLAIMS,
                }
            )
            issued_at = datetime.fromtimestamp(int(payload["iat"]), tz=timezone.utc)
            expires_at = datetime.fromtimestamp(int(payload["exp"]), tz=timezone.utc)
            case_number = payload["case_number"]
            token_id = str(payload["jti"])
        except jwt.PyJWTError as e:
            logger.debug(f"토큰 검증 실패: {type(e).__name__}")
            raise TokenRejectedError() from e
        except (TypeError, ValueError, OverflowError, OSError) as e:
            logger.debug(f"토큰 클레임 형식 오류: {type(e).__name__}")
            raise TokenRejectedError() from e

        if not isinstance(case_number, str) or not case_number:
            raise TokenRejectedError()

        now = self.clock()
        if now >= expires_at:
            logger.debug(f"만료된 토큰: {case_number}")
            raise TokenRejectedError()

        if self.denylist is not None and self.denylist.is_revoked(token_id, now):
            logger.debug(f"로그아웃된 토큰: {case_number}")
            raise TokenRejectedError()

        return SessionIdentity(
            user_id=payload["user_id"],
            case_number=case_number,
            issued_at=issued_at,
            expires_at=expires_at,
            token_id=token_id
        )

    def verify(self, token: Optional[str]) -> Optional[SessionIdentity]:
        """
        토큰 유효성 확인 (예외 없이)

        Returns:
            유효하면 SessionIdentity, 아니면 None
        """
        try:
            return self.validate(token)
        except TokenRejectedError:
            return None

    def logout(self, identity: SessionIdentity) -> bool:
        """
        세션 종료

        denylist가 비활성화된 경우 서버 측 효과는 없으며 클라이언트가 토큰을 폐기한다.

        Args:
            identity: validate()로 검증된 세션

        Returns:
            서버 측에서 토큰이 폐기되었는지 여부
        """
        if self.denylist is None:
            logger.info(f"로그아웃 (클라이언트 측 토큰 폐기): {identity.case_number}")
            return False

        self.denylist.revoke(identity.token_id, identity.expires_at)
        logger.info(f"로그아웃 (토큰 폐기): {identity.case_number}")
        return True
