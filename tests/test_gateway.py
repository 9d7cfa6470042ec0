"""원격 게이트웨이 및 첨부 파일 인코더 테스트.

Remote gateway and file encoder tests — message shapes, success
detection, transport failures, size ceiling.
"""

import base64
import io
import json

import httpx
import pytest
from fastapi import UploadFile
from starlette.datastructures import Headers

from stationsync.config import settings
from stationsync.services.file_encoder import FileEncoder
from stationsync.services.gateway import RemoteGateway, failure_message, is_success
from stationsync.utils.events import AxiomEventSink, mask_sensitive
from stationsync.utils.exceptions import (
    GENERIC_FAILURE_MESSAGE,
    AttachmentTooLargeError,
    RemoteRejection,
    TransportFailure,
    ValidationFailure,
)
from tests.conftest import REMOTE_URL


def upload(data: bytes, filename: str = "report.pdf", content_type: str = "application/pdf",
           declare_size: bool = True) -> UploadFile:
    return UploadFile(
        file=io.BytesIO(data),
        filename=filename,
        size=len(data) if declare_size else None,
        headers=Headers({"content-type": content_type}),
    )


class TestQuery:
    """읽기 쿼리 테스트."""

    async def test_query_message_shape(self, gateway, remote):
        body = await gateway.query("getTasks", {"station": "全部"})
        assert body["success"] is True
        [request] = remote.requests
        assert request.method == "GET"
        assert str(request.url).startswith(REMOTE_URL)
        assert request.url.params["action"] == "getTasks"
        assert request.url.params["station"] == "全部"

    async def test_query_returns_unsuccessful_body_as_is(self, gateway, remote):
        remote.reads["getLogs"] = {"success": False, "msg": "denied"}
        assert await gateway.query("getLogs") == {"success": False, "msg": "denied"}

    async def test_each_call_is_independent(self, gateway, remote):
        await gateway.query("getMeetings")
        await gateway.query("getMeetings")
        assert remote.read_actions == ["getMeetings", "getMeetings"]

    async def test_network_fault_is_transport_failure(self, gateway, remote):
        remote.reads["getTasks"] = httpx.ConnectError("unreachable")
        with pytest.raises(TransportFailure) as exc:
            await gateway.query("getTasks")
        assert exc.value.status_code == 502

    async def test_non_json_body_is_transport_failure(self, gateway, remote):
        remote.reads["getTasks"] = "<html>Service error</html>"
        with pytest.raises(TransportFailure):
            await gateway.query("getTasks")

    async def test_unconfigured_endpoint(self, remote):
        gw = RemoteGateway(base_url="", transport=httpx.MockTransport(remote.handle),
                           sink=AxiomEventSink(token="", dataset=""))
        with pytest.raises(TransportFailure):
            await gw.query("getTasks")
        assert remote.requests == []

    async def test_timeout_defaults_to_settings(self, monkeypatch):
        monkeypatch.setattr(settings, "REQUEST_TIMEOUT_SECONDS", 5.0)
        gw = RemoteGateway(base_url=REMOTE_URL, sink=AxiomEventSink(token="", dataset=""))
        assert gw.client.timeout == httpx.Timeout(5.0)
        await gw.aclose()

    async def test_explicit_none_disables_timeout(self, monkeypatch):
        monkeypatch.setattr(settings, "REQUEST_TIMEOUT_SECONDS", 5.0)
        gw = RemoteGateway(base_url=REMOTE_URL, timeout=None, sink=AxiomEventSink(token="", dataset=""))
        assert gw.client.timeout == httpx.Timeout(None)
        await gw.aclose()


class TestCommand:
    """쓰기 명령 테스트."""

    async def test_command_message_shape(self, gateway, remote):
        result = await gateway.command("saveContact", {"userEmail": "a@x.com", "data": {"id": "C1"}})
        assert result == {"success": True}
        [request] = remote.requests
        assert request.method == "POST"
        assert request.headers["content-type"] == "text/plain;charset=utf-8"
        assert json.loads(request.content) == {
            "action": "saveContact", "userEmail": "a@x.com", "data": {"id": "C1"},
        }

    async def test_non_ascii_payload_sent_as_utf8(self, gateway, remote):
        await gateway.command("createTask", {"taskData": {"stationName": "忠孝站"}})
        assert "忠孝站".encode("utf-8") in remote.requests[0].content

    async def test_remote_rejection_carries_message_verbatim(self, gateway, remote):
        remote.writes["updateTask"] = {"success": False, "msg": "工項不存在"}
        with pytest.raises(RemoteRejection) as exc:
            await gateway.command("updateTask", {"uid": "T1"})
        assert exc.value.detail == "工項不存在"
        assert exc.value.status_code == 400

    async def test_rejection_without_message_is_generic(self, gateway, remote):
        remote.writes["updateTask"] = {"ok": True}
        with pytest.raises(RemoteRejection) as exc:
            await gateway.command("updateTask")
        assert exc.value.detail == GENERIC_FAILURE_MESSAGE

    async def test_command_never_retried(self, gateway, remote):
        remote.writes["createTask"] = httpx.ReadError("reset")
        with pytest.raises(TransportFailure):
            await gateway.command("createTask")
        assert len(remote.requests) == 1


class TestResponseHelpers:
    """응답 판별 도우미 테스트."""

    def test_is_success(self):
        assert is_success({"success": True})
        assert not is_success({"success": 1})
        assert not is_success([{"success": True}])
        assert not is_success(None)

    def test_failure_message(self):
        assert failure_message({"message": "nope"}) == "nope"
        assert failure_message({"msg": "  "}) == GENERIC_FAILURE_MESSAGE
        assert failure_message("boom") == GENERIC_FAILURE_MESSAGE

    def test_mask_sensitive(self):
        masked = mask_sensitive({"email": "a@x.com", "newPassword": "abc", "file": {"content": "x" * 5000}})
        assert masked["newPassword"] == "***"
        assert masked["email"] == "a@x.com"
        assert masked["file"]["content"].endswith("...(truncated)")


class TestFileEncoder:
    """첨부 파일 인코더 테스트."""

    async def test_encode_payload(self):
        data = b"%PDF-1.4 hello"
        payload = await FileEncoder(max_bytes=1024).encode(upload(data))
        assert payload.name == "report.pdf"
        assert payload.type == "application/pdf"
        assert payload.content == "data:application/pdf;base64," + base64.b64encode(data).decode()

    async def test_declared_size_over_ceiling(self):
        with pytest.raises(AttachmentTooLargeError) as exc:
            await FileEncoder(max_bytes=10).encode(upload(b"x" * 11))
        assert exc.value.status_code == 413

    async def test_undeclared_size_over_ceiling(self):
        with pytest.raises(AttachmentTooLargeError):
            await FileEncoder(max_bytes=10).encode(upload(b"x" * 11, declare_size=False))

    async def test_exactly_at_ceiling(self):
        payload = await FileEncoder(max_bytes=10).encode(upload(b"x" * 10))
        assert payload.content.startswith("data:application/pdf;base64,")

    async def test_default_ceiling_is_ten_mib(self):
        assert FileEncoder().max_bytes == 10 * 1024 * 1024

    async def test_missing_filename(self):
        with pytest.raises(ValidationFailure):
            await FileEncoder().encode(upload(b"x", filename=""))
