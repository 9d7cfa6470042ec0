"""첨부 파일 인코더 — 업로드 파일을 전송 가능한 페이로드로 변환.

File Encoder — converts a user-selected attachment into the
``{name, type, content}`` payload carried by attachment-bearing writes.
The size ceiling is enforced before any encoding work; base64 encoding
runs in the threadpool so the event loop is never blocked.
"""

import base64
import logging

from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool

from stationsync.config import settings
from stationsync.schemas.common import FilePayload
from stationsync.utils.exceptions import AttachmentTooLargeError, ValidationFailure

logger = logging.getLogger(__name__)

_DEFAULT_CONTENT_TYPE: str = "application/octet-stream"


def _to_data_url(content_type: str, data: bytes) -> str:
    return f"data:{content_type};base64,{base64.b64encode(data).decode('ascii')}"


class FileEncoder:
    """첨부 파일 인코더.

    Args:
        max_bytes: 허용 최대 크기 — 기본값은 설정값 10 MiB (Ceiling, defaults to settings)
    """

    def __init__(self, max_bytes: int | None = None) -> None:
        self.max_bytes: int = settings.MAX_UPLOAD_BYTES if max_bytes is None else max_bytes

    def check_size(self, size: int | None) -> None:
        """크기 제한 검사 — raises before any read when the declared size is too large."""
        if size is not None and size > self.max_bytes:
            raise AttachmentTooLargeError(self.max_bytes)

    async def encode(self, file: UploadFile) -> FilePayload:
        """업로드 파일을 base64 data URL 페이로드로 인코딩합니다.

        Args:
            file: 업로드된 파일 (Uploaded file)

        Returns:
            FilePayload: 원본 이름, 선언된 콘텐츠 타입, base64 내용

        Raises:
            AttachmentTooLargeError: 크기 제한 초과 (Ceiling exceeded)
            ValidationFailure: 파일 이름 없음 (Missing file name)
        """
        if not file.filename:
            raise ValidationFailure("Attachment has no file name")

        # 선언된 크기로 먼저 거부 — Reject on declared size before reading
        self.check_size(file.size)

        data: bytes = await file.read(self.max_bytes + 1)
        self.check_size(len(data))

        content_type: str = file.content_type or _DEFAULT_CONTENT_TYPE
        content: str = await run_in_threadpool(_to_data_url, content_type, data)
        logger.debug("Encoded attachment %s (%d bytes)", file.filename, len(data))
        return FilePayload(name=file.filename, type=content_type, content=content)


# 전역 인코더 싱글턴 — Global encoder singleton
file_encoder: FileEncoder = FileEncoder()
