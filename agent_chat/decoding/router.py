"""根据响应元数据与配置选择解码策略。

选择在第一次读取之前完成，整个响应期间不再改变。
"""

from typing import Optional

from agent_chat.domain.exceptions import ValidationError
from agent_chat.domain.models import STREAMING_MODES, StreamFormat

EVENT_STREAM_TYPE = "text/event-stream"


def select_stream_format(
    content_type: Optional[str],
    mode: str,
    has_stream_body: bool,
) -> Optional[StreamFormat]:
    """返回本次响应的 StreamFormat；mode 为 "none" 时返回 None，表示走非流式解码。

    - text/event-stream → SSE
    - 其他类型且响应体可增量读取 → JSON 分帧（未被识别为对象的文本原样透传）
    - 响应体不可增量读取 → 纯文本，一次读完作为单个增量
    """

    if mode not in STREAMING_MODES:
        raise ValidationError(code="INVALID_STREAMING_MODE", message=f"Unknown streaming mode: {mode!r}")
    if mode == "none":
        return None
    if EVENT_STREAM_TYPE in (content_type or "").lower():
        return StreamFormat.SSE
    if has_stream_body:
        return StreamFormat.JSON_FRAMED
    return StreamFormat.PLAIN_TEXT
