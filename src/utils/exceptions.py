"""
커스텀 예외 클래스 정의
"""


class CasePortalError(Exception):
    """기본 예외 클래스"""
    pass


class ValidationError(CasePortalError):
    """필수 입력값 누락 등 요청 검증 실패 시 발생하는 예외"""
    def __init__(self, message: str, field: str = None):
        self.message = message
        self.field = field
        super().__init__(f"검증 실패: {message}")


class AuthenticationError(CasePortalError):
    """
    인증 실패 시 발생하는 예외

    자격 증명 중 어느 항목이 틀렸는지는 메시지에 포함하지 않는다.
    """
    def __init__(self, message: str = "Invalid credentials"):
        self.message = message
        super().__init__(message)


class TokenRejectedError(AuthenticationError):
    """토큰이 제시되었으나 서명/만료/폐기 검증에 실패한 경우"""
    def __init__(self, message: str = "Invalid token"):
        super().__init__(message)


class NotFoundError(CasePortalError):
    """인증된 사건 번호에 해당하는 사용자 레코드가 없을 때 발생하는 예외"""
    def __init__(self, case_number: str):
        self.case_number = case_number
        super().__init__(f"사용자를 찾을 수 없습니다: {case_number}")


class RecordStoreError(CasePortalError):
    """레코드 저장소 읽기 오류 시 발생하는 예외"""
    def __init__(self, message: str, table: str = None):
        self.table = table
        super().__init__(f"레코드 저장소 오류: {message}")


class InternalError(CasePortalError):
    """집계 중 예상치 못한 오류"""
    def __init__(self, message: str):
        super().__init__(f"내부 오류: {message}")
