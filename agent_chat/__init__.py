"""Agent Chat 顶层包。

该包提供聊天组件与自定义 AI endpoint 之间的客户端核心，
包括配置加载、请求构造、流式/非流式响应解码以及会话状态管理。
"""

from agent_chat.api.service import ChatSession

__all__ = ["ChatSession"]
