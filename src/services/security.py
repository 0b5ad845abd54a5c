"""
비밀번호 해싱 및 검증 모듈
"""
from argon2 import PasswordHasher, exceptions as argon_exc

# Argon2 해셔 (기본 파라미터, 솔트 자동 생성)
ph = PasswordHasher()

# 사용자가 없을 때도 동일한 검증 비용을 들이기 위한 더미 해시
_DUMMY_HASH = ph.hash("case-portal-dummy-password")


def hash_password(plain_text: str) -> str:
    """
    비밀번호를 Argon2로 해싱

    Args:
        plain_text: 평문 비밀번호

    Returns:
        Argon2 해시 문자열

    Raises:
        ValueError: 비밀번호가 비어 있는 경우
    """
    if not plain_text:
        raise ValueError("Password must not be empty")
    return ph.hash(plain_text)


def verify_password(plain_text: str, hashed: str) -> bool:
    """
    Argon2 해시와 비밀번호 비교

    Args:
        plain_text: 평문 비밀번호
        hashed: 저장된 해시

    Returns:
        일치 여부 (해시가 잘못된 경우 False)
    """
    if not plain_text or not hashed:
        return False

    try:
        return ph.verify(hashed, plain_text)
    except (argon_exc.VerificationError, argon_exc.InvalidHashError, ValueError):
        return False


def burn_verification(plain_text: str) -> None:
    """존재하지 않는 사용자에 대해 더미 해시로 검증 비용만 소모"""
    verify_password(plain_text or "x", _DUMMY_HASH)


def needs_rehash(hashed: str) -> bool:
    """해시 파라미터가 현재 설정과 다른지 확인"""
    try:
        return ph.check_needs_rehash(hashed)
    except (argon_exc.InvalidHashError, ValueError):
        return True
