"""统一业务异常模型。

所有跨模块抛出的业务级错误都继承自 BusinessError，
便于调用方统一捕获与提示。

请求相关的错误分为两大类：
- RequestError: 传输/HTTP/响应解码失败（按原因再细分子类）。
- NoCandidatesError: 响应结构合法，但没有可用的候选文本。
"""


class BusinessError(Exception):
    """业务异常基类。

    Attributes:
        code: 机器可读错误码（如 "NETWORK_ERROR"）。
        message: 用户可读错误信息。
        http_status: 映射到 HTTP 时可用的状态码，默认 400。
        extra: 其他补充字段（例如 model、endpoint 等）。
    """

    def __init__(self, code: str, message: str, http_status: int = 400, **extra):
        self.code = code
        self.message = message
        self.http_status = http_status
        self.extra = extra
        super().__init__(message)


class RequestError(BusinessError):
    """一次 generateContent 请求失败（传输层、HTTP 状态或响应解码）。"""


class NetworkError(RequestError):
    """网络层错误，例如连接失败、超时等。"""


class ApiError(RequestError):
    """API 返回非 2xx 状态时抛出。"""


class RateLimitError(ApiError):
    """Provider 限流（HTTP 429）。不做重试，交给调用方处理。"""


class ResponseDecodeError(RequestError):
    """响应体不是合法 JSON，或结构与约定不符。"""


class NoCandidatesError(BusinessError):
    """响应中没有可用的候选/Part/文本。"""


class ValidationError(BusinessError):
    """参数或配置校验失败。"""
