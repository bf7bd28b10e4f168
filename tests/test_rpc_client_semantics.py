import httpx
import pytest

from memoryctl.rpc.client import RpcClient
from memoryctl.rpc.envelope import build_request
from memoryctl.utils.exceptions import ProtocolError, RemoteError, TransportError

URL = "http://127.0.0.1:4040/mcp"


def test_send_posts_json_envelope_and_returns_text_blocks(fake_http) -> None:
    fake_http.reply({"jsonrpc": "2.0", "id": 1, "result": {"content": [{"type": "text", "text": "OK"}]}})
    blocks = RpcClient(timeout=12.5).send(URL, build_request("overview", {"path": "."}, 1))
    assert [(b.kind, b.text) for b in blocks] == [("text", "OK")]

    assert len(fake_http.calls) == 1
    call = fake_http.calls[0]
    assert call["url"] == URL
    assert call["headers"]["Content-Type"] == "application/json"
    assert call["timeout"] == 12.5
    assert call["json"]["method"] == "tools/call"
    assert call["json"]["params"] == {"name": "overview", "arguments": {"path": "."}}


def test_missing_or_empty_content_renders_nothing(fake_http) -> None:
    client = RpcClient()
    fake_http.reply({"jsonrpc": "2.0", "id": 1, "result": {}})
    assert client.send(URL, build_request("overview", {}, 1)) == []
    fake_http.reply({"jsonrpc": "2.0", "id": 2, "result": {"content": []}})
    assert client.send(URL, build_request("overview", {}, 2)) == []
    fake_http.reply({"jsonrpc": "2.0", "id": 3})
    assert client.send(URL, build_request("overview", {}, 3)) == []


def test_error_member_raises_remote_error(fake_http) -> None:
    fake_http.reply({"jsonrpc": "2.0", "id": 1, "error": {"code": -32602, "message": "Invalid params"}})
    with pytest.raises(RemoteError) as err:
        RpcClient().send(URL, build_request("analyze", {}, 1))
    assert err.value.rpc_code == -32602
    assert err.value.rpc_message == "Invalid params"
    assert "invalid params" in err.value.describe()


def test_remote_error_with_odd_fields_is_normalized(fake_http) -> None:
    fake_http.reply({"jsonrpc": "2.0", "id": 1, "error": {"code": "nope", "message": ""}})
    with pytest.raises(RemoteError) as err:
        RpcClient().send(URL, build_request("analyze", {}, 1))
    assert err.value.rpc_code == 0
    assert err.value.rpc_message == "remote error"


def test_non_2xx_raises_transport_error_with_status_and_body(fake_http) -> None:
    fake_http.reply(status_code=503, text="service down")
    with pytest.raises(TransportError) as err:
        RpcClient().send(URL, build_request("overview", {}, 1))
    assert err.value.status_code == 503
    assert err.value.body == "service down"
    assert err.value.retryable is True

    fake_http.reply(status_code=404, text="Endpoint no encontrado")
    with pytest.raises(TransportError) as err:
        RpcClient().send(URL, build_request("overview", {}, 1))
    assert err.value.status_code == 404
    assert err.value.retryable is False


def test_malformed_json_raises_protocol_error(fake_http) -> None:
    fake_http.reply(text="<html>ok</html>")
    with pytest.raises(ProtocolError) as err:
        RpcClient().send(URL, build_request("overview", {}, 1))
    assert err.value.code == "PROTOCOL_ERROR"
    assert err.value.body == "<html>ok</html>"


def test_non_object_json_raises_protocol_error(fake_http) -> None:
    fake_http.reply([1, 2, 3])
    with pytest.raises(ProtocolError):
        RpcClient().send(URL, build_request("overview", {}, 1))


def test_connection_failure_raises_transport_error(fake_http) -> None:
    fake_http.raise_exc = httpx.ConnectError("connection refused")
    with pytest.raises(TransportError) as err:
        RpcClient().send(URL, build_request("overview", {}, 1))
    assert err.value.status_code is None
    assert "connection refused" in err.value.message


def test_timeout_raises_retryable_transport_error(fake_http) -> None:
    fake_http.raise_exc = httpx.ReadTimeout("slow")
    with pytest.raises(TransportError) as err:
        RpcClient(timeout=0.5).send(URL, build_request("overview", {}, 1))
    assert err.value.retryable is True
    assert "timeout" in err.value.message


def test_invalid_url_raises_transport_error(fake_http) -> None:
    fake_http.raise_exc = httpx.InvalidURL("Invalid IPv6 URL")
    with pytest.raises(TransportError) as err:
        RpcClient().send("http://[::1", build_request("overview", {}, 1))
    assert err.value.retryable is False
    assert err.value.url == "http://[::1"
    assert "invalid url" in err.value.message


def test_send_document_is_verbatim(fake_http) -> None:
    document = {"jsonrpc": "2.0", "id": 42, "method": "tools/call", "params": {"name": "x", "extra": [1]}}
    fake_http.reply({"jsonrpc": "2.0", "id": 42, "result": {"content": [{"type": "text", "text": "done"}]}})
    blocks = RpcClient().send_document(URL, document)
    assert blocks[0].text == "done"
    assert fake_http.calls[0]["json"] == document


def test_mismatched_response_id_is_not_an_error(fake_http) -> None:
    fake_http.reply({"jsonrpc": "2.0", "id": 99, "result": {"content": [{"type": "text", "text": "late"}]}})
    blocks = RpcClient().send(URL, build_request("overview", {}, 1))
    assert blocks[0].text == "late"


def test_list_tools_returns_descriptors(fake_http) -> None:
    fake_http.reply(
        {
            "jsonrpc": "2.0",
            "id": 1,
            "result": {"tools": [{"name": "analyze", "description": "scan"}, "junk", {"name": "repair"}]},
        }
    )
    tools = RpcClient().list_tools(URL, 1)
    assert [t["name"] for t in tools] == ["analyze", "repair"]
    assert fake_http.calls[0]["json"]["method"] == "tools/list"
