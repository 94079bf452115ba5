"""对外 API 服务模块。

ChatSession 相当于聊天组件的“发送”动作：维护有序的会话历史和唯一的
is_sending 标志，发起请求、选择解码策略、把增量按顺序追加到正在生成的
assistant 消息上，并以事件形式通知 UI 刷新。
"""

import logging
import time
from typing import Any, Callable, Dict, Iterator, Optional
from uuid import uuid4

from agent_chat.config.settings import settings
from agent_chat.decoding.non_streaming import decode_non_streaming
from agent_chat.decoding.router import select_stream_format
from agent_chat.decoding.stream_loop import StreamDecodeLoop
from agent_chat.domain.conversation import ConversationHistory
from agent_chat.domain.exceptions import BusinessError
from agent_chat.domain.models import ChatMessage, ChatStreamEvent, OutgoingRequest, StreamFormat
from agent_chat.infrastructure.logging.logger import logger
from agent_chat.transport.http_client import EndpointClient
from agent_chat.transport.request_composer import compose_request

ERROR_REPLY_TEXT = "Error contacting endpoint"


class ChatSession:
    """一个聊天窗口的会话状态。

    同一时间最多只有一个请求在进行；请求进行中、输入为空或未配置 endpoint 时，
    发送是空操作。
    """

    def __init__(
        self,
        cfg=settings,
        client: Optional[EndpointClient] = None,
        history: Optional[ConversationHistory] = None,
    ):
        self._settings = cfg
        self._client = client or EndpointClient(cfg)
        self.history = history or ConversationHistory()
        self.is_sending = False

    def can_send(self, user_input: str) -> bool:
        return bool(
            getattr(self._settings, "endpoint_url", None)
            and (user_input or "").strip()
            and not self.is_sending
        )

    def send(
        self,
        user_input: str,
        on_event: Optional[Callable[[ChatStreamEvent], None]] = None,
    ) -> Optional[ChatMessage]:
        """发送并等待本轮结束，返回最终的 assistant 消息；空操作时返回 None。"""

        final: Optional[ChatMessage] = None
        for event in self.send_stream(user_input):
            if on_event is not None:
                on_event(event)
            if event.kind == "final":
                final = event.message
        return final

    def send_stream(self, user_input: str) -> Iterator[ChatStreamEvent]:
        """执行一轮对话，按顺序产出 ChatStreamEvent。"""

        if not self.can_send(user_input):
            return

        start_time = time.time()
        log_ctx: Dict[str, Any] = {"trace_id": f"tr-{uuid4().hex}"}
        user_msg = self.history.add_user(user_input.strip())
        self.is_sending = True
        assistant: Optional[ChatMessage] = None
        try:
            yield ChatStreamEvent(kind="user", message=user_msg)
            request = compose_request(self._settings, self.history, user_msg)
            mode = getattr(self._settings, "streaming_mode", "none")
            self._log(logging.INFO, "Sending request", log_ctx, method=request.method, mode=mode)

            if mode == "none":
                assistant = self._send_once(request, log_ctx)
            else:
                assistant = self.history.start_assistant()
                yield ChatStreamEvent(kind="started", message=assistant)
                yield from self._send_streaming(request, assistant, log_ctx)
                self.history.finalize(assistant.id)
        except BusinessError as e:
            self._log(
                logging.ERROR,
                "Chat request failed",
                log_ctx,
                error_code=e.code,
                http_status=e.http_status,
                error=e.message,
            )
            assistant = self._fail(assistant, e.code)
        except Exception as e:
            self._log(
                logging.ERROR,
                "Chat request failed",
                log_ctx,
                error_code="UNEXPECTED_ERROR",
                error=repr(e),
            )
            assistant = self._fail(assistant, "UNEXPECTED_ERROR")
        finally:
            self.is_sending = False
            if assistant is not None and assistant.status == "streaming":
                # 消费方提前关闭了生成器：保留已追加的内容并结束该消息
                self.history.finalize(assistant.id)

        self._log(
            logging.INFO,
            "Completed chat request",
            log_ctx,
            elapsed_seconds=round(time.time() - start_time, 2),
            status=assistant.status,
            message_id=assistant.id,
        )
        yield ChatStreamEvent(kind="final", message=assistant)

    def _fail(self, assistant: Optional[ChatMessage], error_code: str) -> ChatMessage:
        if assistant is None:
            assistant = self.history.add_assistant(ERROR_REPLY_TEXT, status="error")
            assistant.meta["error_code"] = error_code
            return assistant
        return self.history.fail(assistant.id, ERROR_REPLY_TEXT, error_code)

    def _send_once(self, request: OutgoingRequest, log_ctx: Dict[str, Any]) -> ChatMessage:
        reply = self._client.fetch(request)
        text = decode_non_streaming(
            reply.content_type,
            reply.text,
            getattr(self._settings, "response_key", None),
        )
        return self.history.add_assistant(text)

    def _send_streaming(
        self,
        request: OutgoingRequest,
        assistant: ChatMessage,
        log_ctx: Dict[str, Any],
    ) -> Iterator[ChatStreamEvent]:
        with self._client.stream(request) as resp:
            content_type = self._client.content_type(resp)
            fmt = select_stream_format(
                content_type,
                getattr(self._settings, "streaming_mode", "auto"),
                self._client.has_stream_body(resp),
            )
            self._log(logging.INFO, "Decoding stream", log_ctx, format=fmt.value, content_type=content_type)
            if fmt is StreamFormat.PLAIN_TEXT:
                chunks = [self._client.read_all(resp)]
            else:
                chunks = self._client.iter_chunks(resp)

            loop = StreamDecodeLoop(fmt, assistant.id)
            for delta in loop.run(chunks):
                message = self.history.apply_delta(delta)
                yield ChatStreamEvent(kind="delta", message=message, delta=delta)
            self._log(
                logging.INFO,
                "Stream ended",
                log_ctx,
                deltas=loop.delta_count,
                discarded_chars=len(loop.discarded),
            )

    @staticmethod
    def _log(level: int, message: str, log_ctx: Dict[str, Any], **fields: Any) -> None:
        payload = dict(log_ctx)
        payload.update(fields)
        logger.log(level, message, extra={"extra": payload})
