"""非流式响应解码：一次性读取完整响应体并得到最终回复文本。"""

import json
from typing import Optional

DEFAULT_RESPONSE_KEY = "reply"
NO_REPLY_TEXT = "No reply"
JSON_CONTENT_TYPE = "application/json"


def decode_non_streaming(
    content_type: Optional[str],
    body_text: str,
    response_key: Optional[str] = DEFAULT_RESPONSE_KEY,
) -> str:
    """把完整响应体转换成 assistant 回复文本。

    JSON 响应读取 response_key 字段（解析失败、字段缺失或不是字符串都视为空）；
    其他类型直接使用原始文本。结果为空时返回占位文本 "No reply"，
    保证用户总能看到一条结束的 assistant 消息。
    """

    key = response_key if isinstance(response_key, str) and response_key else DEFAULT_RESPONSE_KEY
    if JSON_CONTENT_TYPE in (content_type or "").lower():
        reply = _reply_from_json(body_text, key)
    else:
        reply = body_text or ""
    return reply or NO_REPLY_TEXT


def _reply_from_json(body_text: str, key: str) -> str:
    try:
        data = json.loads(body_text) if body_text else {}
    except json.JSONDecodeError:
        data = {}
    if not isinstance(data, dict):
        return ""
    value = data.get(key)
    return value if isinstance(value, str) else ""
