"""统一的消息与解码数据模型。

本模块定义了聊天会话与流式解码管线之间共享的标准数据结构：

- ChatMessage: 会话中的一条消息（user/assistant）。
- ContentDelta: 解码循环产出的一段增量文本，只会被追加，从不替换。
- StreamFormat: 每个响应只选定一次的解码策略（SSE / JSON 分帧 / 纯文本）。
- OutgoingRequest: 由 RequestComposer 构造、交给 HTTP 层发送的请求。
- ChatStreamEvent: ChatSession 对 UI 层产出的事件。
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Literal, Optional
from uuid import uuid4


# 会话中出现的消息角色
Role = Literal["user", "assistant"]

# 配置中的流式模式；"none" 表示走非流式解码
StreamingMode = Literal["none", "sse", "auto"]
STREAMING_MODES = ("none", "sse", "auto")

RequestMethod = Literal["POST", "GET"]

# assistant 消息的生命周期状态，保存在 ChatMessage.meta["status"]
MessageStatus = Literal["streaming", "done", "error"]


def new_message_id() -> str:
    return f"m-{uuid4().hex}"


@dataclass
class ChatMessage:
    """一条对话消息。

    - id: 不透明的消息标识。
    - role: user 或 assistant。
    - content: 纯文本内容；只有正在流式生成的 assistant 消息会在创建后被修改，
      且只允许追加。
    - meta: 附加元数据（status、error_code 等），不会发给 endpoint，
      主要用于日志与上层 UI 展示。
    """

    role: Role
    content: str
    id: str = field(default_factory=new_message_id)
    meta: Dict[str, Any] = field(default_factory=dict)

    @property
    def status(self) -> Optional[str]:
        return self.meta.get("status")


@dataclass(frozen=True)
class ContentDelta:
    """一次内容增量：把 text 追加到 target_message_id 对应的消息上。"""

    target_message_id: str
    text: str


class StreamFormat(Enum):
    """流式响应的解码策略，对每个响应只选定一次。"""

    SSE = "sse"
    JSON_FRAMED = "json_framed"
    PLAIN_TEXT = "plain_text"


@dataclass
class OutgoingRequest:
    """即将发给 endpoint 的 HTTP 请求。

    json_body 为 None 时不发送请求体（GET 请求把 input 放在查询串里）。
    """

    method: RequestMethod
    url: str
    headers: Dict[str, str]
    json_body: Optional[Dict[str, Any]] = None


@dataclass
class ChatStreamEvent:
    """ChatSession 产生的事件，每个事件都是 UI 重新渲染并滚动到底部的信号。

    kind:
        - "user": 用户消息已追加到历史。
        - "started": 空的 assistant 消息已创建，UI 可以立即显示进行中的气泡。
        - "delta": 一段增量已追加到 assistant 消息，delta 字段携带增量内容。
        - "final": 本轮回复结束（成功或失败），message 为最终 assistant 消息。
    """

    kind: Literal["user", "started", "delta", "final"]
    message: ChatMessage
    delta: Optional[ContentDelta] = None
