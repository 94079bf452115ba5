"""Endpoint 集成层。

该包下的模块负责：
- 根据配置与会话历史构造请求 (request_composer)。
- 通过 httpx 发送请求并提供流式字节读取 (http_client)。
"""

from agent_chat.transport.http_client import EndpointClient, EndpointReply
from agent_chat.transport.request_composer import compose_request

__all__ = ["EndpointClient", "EndpointReply", "compose_request"]
