"""根据配置与会话历史构造发往 endpoint 的请求。

请求体统一为：
    {"input": <本轮用户输入>, "messages": [{"role": ..., "content": ...}, ...]}
GET 请求没有请求体，只把 input 编码进查询串。
"""

from typing import Dict
from urllib.parse import urlencode

from agent_chat.domain.exceptions import ValidationError
from agent_chat.domain.models import ChatMessage, OutgoingRequest


def compose_request(cfg, history, user_message: ChatMessage) -> OutgoingRequest:
    """构造一次请求。

    Args:
        cfg: 配置对象，需要 endpoint_url / request_method / request_headers / streaming_mode。
        history: ConversationHistory，应已包含 user_message。
        user_message: 本轮用户消息。
    """

    endpoint_url = getattr(cfg, "endpoint_url", None)
    if not endpoint_url:
        raise ValidationError(code="MISSING_ENDPOINT", message="Endpoint URL not set")

    headers: Dict[str, str] = {"Content-Type": "application/json"}
    headers.update(getattr(cfg, "request_headers", None) or {})
    if getattr(cfg, "streaming_mode", "none") == "sse":
        headers["Accept"] = "text/event-stream"

    method = "GET" if str(getattr(cfg, "request_method", "POST")).upper() == "GET" else "POST"
    if method == "GET":
        sep = "&" if "?" in endpoint_url else "?"
        url = endpoint_url + sep + urlencode({"input": user_message.content})
        return OutgoingRequest(method="GET", url=url, headers=headers)

    messages = history.as_payload()
    if not any(m is user_message for m in history):
        messages.append({"role": user_message.role, "content": user_message.content})
    payload = {"input": user_message.content, "messages": messages}
    return OutgoingRequest(method="POST", url=endpoint_url, headers=headers, json_body=payload)
