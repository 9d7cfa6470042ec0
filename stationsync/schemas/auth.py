"""인증 관련 요청/응답 스키마 정의.

Authentication-related request/response schema definitions for the local API.
"""

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    """로그인 요청 스키마.

    Attributes:
        email: 로그인 이메일 — 대소문자 무시 (Login email, case-insensitive)
        password: 평문 비밀번호 — SHA-256 다이제스트와 비교 (Plain text, compared to stored digest)
    """

    email: str
    password: str


class ChangePasswordRequest(BaseModel):
    """비밀번호 변경 요청 스키마.

    The plaintext is digested before transmission and never logged.
    """

    new_password: str = Field(min_length=6)
