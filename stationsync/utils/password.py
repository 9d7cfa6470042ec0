"""비밀번호 다이제스트 유틸리티 모듈.

Password digest utility module.
The remote store keeps SHA-256 hex digests; plaintext credentials never
leave this process.
"""

import hashlib
import hmac


def hash_password(password: str) -> str:
    """평문 비밀번호를 SHA-256 16진수 다이제스트로 변환합니다.

    Digest a plain text password with SHA-256.

    Args:
        password: 평문 비밀번호 (Plain text password)

    Returns:
        str: 64자 소문자 16진수 문자열 (64-char lowercase hex digest)

    Example:
        hash_password("abc123")
        # "6ca13d52ca70c883e0f0bb101e425a89e8624de51db2d2392593af6a84118090"
    """
    return hashlib.sha256(password.encode("utf-8")).hexdigest()


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """평문 비밀번호와 저장된 다이제스트를 상수 시간으로 비교합니다.

    Verify a plain text password against a stored hex digest using a
    constant-time comparison.
    """
    return hmac.compare_digest(
        hash_password(plain_password), (hashed_password or "").strip().lower()
    )
