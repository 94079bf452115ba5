"""统一业务异常模型。

所有跨模块抛出的业务级错误都应该继承自 BusinessError，
便于在会话层 (ChatSession) 做统一捕获，并转换成用户可见的错误回复。
解码器本身不会抛出这些异常：畸形输入只会被保留或丢弃。
"""


class BusinessError(Exception):
    """业务异常基类。

    Attributes:
        code: 机器可读错误码（如 "NETWORK_ERROR"）。
        message: 用户可读错误信息。
        http_status: 映射到 HTTP 时可用的状态码，默认 400。
        extra: 其他补充字段（例如 url、trace_id 等）。
    """

    def __init__(self, code: str, message: str, http_status: int = 400, **extra):
        self.code = code
        self.message = message
        self.http_status = http_status
        self.extra = extra
        super().__init__(message)


class NetworkError(BusinessError):
    """网络层错误，例如连接失败、超时、流读取中断等。"""


class ApiError(BusinessError):
    """Endpoint 返回非 2xx 状态码时抛出。"""


class RateLimitError(BusinessError):
    """Endpoint 返回 429；本项目不做重试，仅用于区分错误码。"""


class ValidationError(BusinessError):
    """参数或配置校验失败。"""
