"""Endpoint HTTP 客户端（基于 httpx）。

负责：
1. 发送 RequestComposer 构造好的 OutgoingRequest。
2. 把网络错误与非 2xx 状态码包装成统一的业务异常。
3. 为流式解码提供原始字节块迭代器。

不做重试、不做鉴权校验；超时交给 httpx 处理。
"""

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional

import httpx

from agent_chat.domain.exceptions import ApiError, NetworkError, RateLimitError
from agent_chat.domain.models import OutgoingRequest

# 请求构造阶段的错误（非法 URL、请求头含非 ASCII 字符）同样视为传输失败
_TRANSPORT_ERRORS = (httpx.HTTPError, httpx.InvalidURL, httpx.StreamError, UnicodeEncodeError)


@dataclass
class EndpointReply:
    """一次性读取完毕的响应。"""

    status_code: int
    content_type: str
    text: str


class EndpointClient:
    """聊天 endpoint 客户端。"""

    def __init__(self, cfg):
        # 配置里包含超时、读取块大小等
        self._settings = cfg

    # ---- 非流式 ----

    def fetch(self, request: OutgoingRequest) -> EndpointReply:
        try:
            with httpx.Client(timeout=self._settings.http_timeout, trust_env=False) as client:
                resp = client.request(
                    request.method,
                    request.url,
                    headers=request.headers,
                    json=request.json_body,
                )
                self._check_status(resp)
                return EndpointReply(
                    status_code=resp.status_code,
                    content_type=resp.headers.get("content-type", ""),
                    text=resp.text,
                )
        except _TRANSPORT_ERRORS as e:
            raise NetworkError(code="NETWORK_ERROR", message=str(e), url=request.url)

    # ---- 流式 ----

    @contextmanager
    def stream(self, request: OutgoingRequest) -> Iterator[httpx.Response]:
        """打开流式响应；离开上下文时关闭连接。

        读取过程中出现的 httpx 异常同样会被包装为 NetworkError。
        """

        try:
            with httpx.Client(timeout=self._settings.http_timeout, trust_env=False) as client:
                with client.stream(
                    request.method,
                    request.url,
                    headers=request.headers,
                    json=request.json_body,
                ) as resp:
                    self._check_status(resp)
                    yield resp
        except _TRANSPORT_ERRORS as e:
            raise NetworkError(code="NETWORK_ERROR", message=str(e), url=request.url)

    def iter_chunks(self, response) -> Iterator[bytes]:
        """逐块产出响应体字节（已按 Content-Encoding 解压，未做文本解码）。"""

        chunk_size: Optional[int] = getattr(self._settings, "read_chunk_size", None)
        try:
            for chunk in response.iter_bytes(chunk_size):
                yield chunk
        except (httpx.TransportError, httpx.StreamError) as e:
            raise NetworkError(code="STREAM_READ_ERROR", message=str(e))

    @staticmethod
    def has_stream_body(response) -> bool:
        """响应体是否还能增量读取（已被完整读入内存的响应不算）。"""

        return hasattr(response, "iter_bytes") and not getattr(response, "is_stream_consumed", False)

    @staticmethod
    def read_all(response) -> bytes:
        try:
            return response.read()
        except (httpx.TransportError, httpx.StreamError) as e:
            raise NetworkError(code="STREAM_READ_ERROR", message=str(e))

    @staticmethod
    def content_type(response) -> str:
        return response.headers.get("content-type", "")

    # ---- 辅助方法 ----

    @staticmethod
    def _check_status(resp) -> None:
        if resp.status_code == 429:
            raise RateLimitError(code="RATE_LIMIT", message="Endpoint rate limit", http_status=429)
        if resp.status_code >= 400:
            raise ApiError(
                code="API_ERROR",
                message=f"Request failed ({resp.status_code})",
                http_status=resp.status_code,
            )
