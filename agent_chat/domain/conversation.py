from typing import Dict, Iterator, List, Optional

from .exceptions import ValidationError
from .models import ChatMessage, ContentDelta, MessageStatus


class ConversationHistory:
    """单个会话的有序消息历史（会话生命周期内常驻内存）。

    历史独占其中的 ChatMessage 对象。除了唯一一条正在生成的 assistant 消息，
    其余消息在追加后都不再修改；该消息的 content 只能通过 apply_delta 追加。
    """

    def __init__(self) -> None:
        self._messages: List[ChatMessage] = []
        self._in_flight_id: Optional[str] = None

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[ChatMessage]:
        return iter(self._messages)

    @property
    def messages(self) -> List[ChatMessage]:
        return list(self._messages)

    @property
    def in_flight(self) -> Optional[ChatMessage]:
        if self._in_flight_id is None:
            return None
        return self.get(self._in_flight_id)

    def get(self, message_id: str) -> ChatMessage:
        for msg in self._messages:
            if msg.id == message_id:
                return msg
        raise ValidationError(code="MESSAGE_NOT_FOUND", message=f"Unknown message: {message_id}")

    def add_user(self, content: str) -> ChatMessage:
        msg = ChatMessage(role="user", content=content)
        self._messages.append(msg)
        return msg

    def add_assistant(self, content: str, status: MessageStatus = "done") -> ChatMessage:
        msg = ChatMessage(role="assistant", content=content, meta={"status": status})
        self._messages.append(msg)
        return msg

    def start_assistant(self) -> ChatMessage:
        """创建空的 assistant 消息并标记为进行中。"""

        if self._in_flight_id is not None:
            raise ValidationError(code="ALREADY_STREAMING", message="An assistant message is already in flight")
        msg = self.add_assistant("", status="streaming")
        self._in_flight_id = msg.id
        return msg

    def apply_delta(self, delta: ContentDelta) -> ChatMessage:
        if delta.target_message_id != self._in_flight_id:
            raise ValidationError(
                code="NOT_IN_FLIGHT",
                message=f"Message {delta.target_message_id} is not the in-flight assistant message",
            )
        msg = self.get(delta.target_message_id)
        msg.content += delta.text
        return msg

    def finalize(
        self,
        message_id: str,
        status: MessageStatus = "done",
        error_code: Optional[str] = None,
    ) -> ChatMessage:
        msg = self.get(message_id)
        msg.meta["status"] = status
        if error_code:
            msg.meta["error_code"] = error_code
        if message_id == self._in_flight_id:
            self._in_flight_id = None
        return msg

    def fail(self, message_id: str, error_text: str, error_code: str) -> ChatMessage:
        """以错误状态结束消息。

        已经追加的部分内容保留不回滚；只有内容为空时才写入固定的错误文本。
        """

        msg = self.get(message_id)
        if not msg.content:
            msg.content = error_text
        return self.finalize(message_id, status="error", error_code=error_code)

    def as_payload(self) -> List[Dict[str, str]]:
        """转换为发给 endpoint 的 [{role, content}] 列表。"""

        return [{"role": m.role, "content": m.content} for m in self._messages]
