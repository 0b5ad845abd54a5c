"""
인증 관련 API 라우터
"""
from typing import Any, Optional
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from src.api.dependencies import get_current_session, get_session_authority
from src.services.session_authority import SessionAuthority, SessionIdentity
from src.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["auth"])


# Request 모델
class LoginRequest(BaseModel):
    case_number: Optional[str] = None
    last_name: Optional[str] = None
    password: Optional[str] = None


class VerifyTokenRequest(BaseModel):
    # 문자열이 아닌 값은 verify()에서 무효 처리
    token: Any = None


@router.post("/login")
def login(request: LoginRequest, authority: SessionAuthority = Depends(get_session_authority)):
    """사건 자격 증명으로 로그인하여 세션 토큰 발급"""
    grant = authority.authenticate(request.case_number, request.last_name, request.password)

    return {
        "success": True,
        "token": grant.token,
        "user": grant.user,
        "expires_in": grant.expires_in,
        "expires_at": grant.expires_at.isoformat()
    }


@router.post("/verify-token")
def verify_token(
    request: Optional[VerifyTokenRequest] = None,
    authority: SessionAuthority = Depends(get_session_authority)
):
    """토큰 유효성 확인 (인증 불필요, 실패 사유는 노출하지 않음)"""
    identity = authority.verify(request.token if request else None)
    if identity is None:
        return {"valid": False}

    return {"valid": True, "user": identity.to_dict()}


@router.post("/logout")
def logout(
    identity: SessionIdentity = Depends(get_current_session),
    authority: SessionAuthority = Depends(get_session_authority)
):
    """세션 종료 (denylist 비활성화 시 클라이언트가 토큰을 폐기)"""
    revoked = authority.logout(identity)

    return {
        "success": True,
        "message": "Logged out successfully",
        "revoked": revoked
    }
