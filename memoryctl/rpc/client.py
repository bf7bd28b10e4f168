"""HTTP transport for JSON-RPC calls to the remote tool service."""

from __future__ import annotations

from typing import Any

import httpx
from loguru import logger

from memoryctl.rpc.envelope import TOOLS_LIST, ContentBlock, RpcRequest, build_method_request
from memoryctl.utils.exceptions import ProtocolError, RemoteError, TransportError

DEFAULT_TIMEOUT = 30.0


class RpcClient:
    """Blocking JSON-RPC over HTTP POST. One request per call, never retried."""

    def __init__(self, timeout: float = DEFAULT_TIMEOUT):
        self.timeout = timeout

    def _post(self, url: str, body: dict[str, Any]) -> dict[str, Any]:
        method = body.get("method")
        logger.debug("POST {} method={} id={}", url, method, body.get("id"))
        try:
            with httpx.Client(timeout=self.timeout) as client:
                resp = client.post(url, json=body, headers={"Content-Type": "application/json"})
        except httpx.TimeoutException as exc:
            raise TransportError(
                f"timeout after {self.timeout}s: {url}",
                url=url,
                retryable=True,
            ) from exc
        except httpx.RequestError as exc:
            raise TransportError(
                f"network error: {url}: {exc}",
                url=url,
                retryable=True,
            ) from exc
        except httpx.InvalidURL as exc:
            raise TransportError(f"invalid url: {url}: {exc}", url=url) from exc

        status_code = int(getattr(resp, "status_code", 0) or 0)
        text = str(getattr(resp, "text", "") or "")
        if not 200 <= status_code < 300:
            raise TransportError(
                f"http error {status_code}: {url}",
                url=url,
                status_code=status_code,
                body=text,
                retryable=self._is_retryable_status(status_code),
            )

        try:
            payload = resp.json()
        except Exception as exc:
            raise ProtocolError(f"non-json response body from {url}", body=text) from exc
        if not isinstance(payload, dict):
            raise ProtocolError(f"response from {url} is not a JSON-RPC object", body=text)
        return payload

    @staticmethod
    def _is_retryable_status(status_code: int) -> bool:
        return status_code >= 500 or status_code in {408, 425, 429}

    @staticmethod
    def _unwrap_result(payload: dict[str, Any], request_id: Any) -> dict[str, Any]:
        """Return `result` or raise RemoteError for an `error` member."""
        response_id = payload.get("id")
        if request_id is not None and response_id is not None and response_id != request_id:
            logger.warning("Response id {} does not match request id {}", response_id, request_id)

        err = payload.get("error")
        if err is not None:
            if not isinstance(err, dict):
                raise ProtocolError("JSON-RPC error member is not an object")
            try:
                code = int(err.get("code"))
            except (TypeError, ValueError):
                code = 0
            message = err.get("message")
            if not isinstance(message, str) or not message.strip():
                message = "remote error"
            raise RemoteError(code, message.strip(), data=err.get("data"))

        result = payload.get("result")
        if isinstance(result, dict):
            return result
        return {}

    @staticmethod
    def parse_content(result: dict[str, Any]) -> list[ContentBlock]:
        content = result.get("content")
        if not isinstance(content, list):
            return []
        return [ContentBlock.from_dict(item) for item in content]

    def send_document(self, url: str, document: dict[str, Any]) -> list[ContentBlock]:
        """Send a complete request document unmodified and return its content blocks."""
        payload = self._post(url, document)
        return self.parse_content(self._unwrap_result(payload, document.get("id")))

    def send(self, url: str, request: RpcRequest) -> list[ContentBlock]:
        return self.send_document(url, request.to_dict())

    def list_tools(self, url: str, request_id: int) -> list[dict[str, Any]]:
        """Fetch tool descriptors via `tools/list`."""
        body = build_method_request(TOOLS_LIST, {}, request_id)
        result = self._unwrap_result(self._post(url, body), request_id)
        tools = result.get("tools")
        if not isinstance(tools, list):
            return []
        return [t for t in tools if isinstance(t, dict)]
