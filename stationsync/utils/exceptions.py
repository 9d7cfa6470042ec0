"""동기화 계층 예외 클래스 모듈.

Synchronization-layer exception classes module.
Each failure kind of the data layer is a pre-configured HTTPException
subclass, so services raise them directly and the local API maps them to
status codes without extra handlers.

Taxonomy:
    - TransportFailure: 네트워크 장애/파싱 불가 응답 (network fault, non-parseable body)
    - RemoteRejection: 원격 서비스의 명시적 실패 응답 (explicit unsuccessful result)
    - AuthorizationFailure / UnauthorizedError: 권한 거부 / 세션 없음
    - ValidationFailure / AttachmentTooLargeError: 전송 전 검증 실패

Usage:
    from stationsync.utils.exceptions import AuthorizationFailure
    raise AuthorizationFailure("Administrator role required")
"""

from fastapi import HTTPException, status

# 원격 응답에 메시지가 없을 때의 일반 안내 — Generic notice when the remote gives no message
GENERIC_FAILURE_MESSAGE: str = "未知錯誤"


class TransportFailure(HTTPException):
    """502 Bad Gateway 예외 — 원격 엔드포인트 통신 실패 시 사용.

    502 Bad Gateway exception.
    Raised when the remote endpoint is unreachable, not configured,
    or answers with a body that is not JSON.

    Args:
        detail: 오류 메시지 (Error message, default: "Remote service unreachable")
    """

    def __init__(self, detail: str = "Remote service unreachable") -> None:
        super().__init__(status_code=status.HTTP_502_BAD_GATEWAY, detail=detail)


class RemoteRejection(HTTPException):
    """400 Bad Request 예외 — 원격 서비스가 success=false 로 응답했을 때 사용.

    Raised when a write command comes back without an explicit success
    indicator. The remote message is carried verbatim when available.

    Args:
        detail: 원격 메시지 (Remote message, default: generic failure notice)
    """

    def __init__(self, detail: str = GENERIC_FAILURE_MESSAGE) -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class AuthorizationFailure(HTTPException):
    """403 Forbidden 예외 — 권한 게이트 거부 시 사용.

    403 Forbidden exception.
    Raised before any network call when the active session may not
    perform the requested operation.

    Args:
        detail: 오류 메시지 (Error message, default: "Insufficient permissions")
        status_code: 응답 코드 — 하위 클래스가 재정의 (Status code, overridden by subclasses)
    """

    def __init__(
        self,
        detail: str = "Insufficient permissions",
        status_code: int = status.HTTP_403_FORBIDDEN,
    ) -> None:
        super().__init__(status_code=status_code, detail=detail)


class UnauthorizedError(AuthorizationFailure):
    """401 Unauthorized 예외 — 활성 세션이 없거나 자격 증명이 틀렸을 때 사용.

    Raised when no session is active or login credentials do not match.

    Args:
        detail: 오류 메시지 (Error message, default: "Authentication required")
    """

    def __init__(self, detail: str = "Authentication required") -> None:
        super().__init__(detail=detail, status_code=status.HTTP_401_UNAUTHORIZED)


class ValidationFailure(HTTPException):
    """400 Bad Request 예외 — 전송 전 검증 실패 시 사용.

    Raised when a mutation carries a malformed required field; the
    command is never dispatched.

    Args:
        detail: 오류 메시지 (Error message, default: "Invalid request")
        status_code: 응답 코드 (Status code, overridden by subclasses)
    """

    def __init__(
        self,
        detail: str = "Invalid request",
        status_code: int = status.HTTP_400_BAD_REQUEST,
    ) -> None:
        super().__init__(status_code=status_code, detail=detail)


class AttachmentTooLargeError(ValidationFailure):
    """413 Content Too Large 예외 — 첨부 파일이 크기 제한을 넘을 때 사용.

    Raised by the file encoder before any encoding work or network call.

    Args:
        limit_bytes: 허용 최대 크기 (Configured ceiling in bytes)
    """

    def __init__(self, limit_bytes: int) -> None:
        self.limit_bytes: int = limit_bytes
        super().__init__(
            detail=f"Attachment exceeds {limit_bytes // (1024 * 1024)} MB limit",
            status_code=413,
        )
