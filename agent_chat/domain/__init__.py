"""领域层模型与协议。

包含：
- models: ChatMessage / ContentDelta / StreamFormat 等统一数据结构。
- conversation: 单个会话内按顺序追加的消息历史。
- exceptions: 业务异常类型定义。
"""
