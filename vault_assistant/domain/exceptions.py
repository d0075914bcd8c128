"""统一业务异常模型。

所有跨模块抛出的业务级错误都继承自 BusinessError，
会话层据此把失败转换为可见的助手消息，服务层据此降级。
"""


class BusinessError(Exception):
    """业务异常基类。

    Attributes:
        code: 机器可读错误码（如 "API_ERROR"）。
        message: 用户可读错误信息。
        http_status: 映射到 HTTP 时可用的状态码，默认 400。
        extra: 其他补充字段（例如 provider、server 等）。
    """

    def __init__(self, code: str, message: str, http_status: int = 400, **extra):
        self.code = code
        self.message = message
        self.http_status = http_status
        self.extra = extra
        super().__init__(message)


class ConfigError(BusinessError):
    """配置缺失或格式错误（服务器 JSON、API 密钥、未知 Provider 等）。"""


class TransportError(BusinessError):
    """HTTP 传输层失败的基类。"""


class NetworkError(TransportError):
    """网络层错误，例如连接失败、超时等。"""


class ApiError(TransportError):
    """第三方 API 返回非 2xx 时抛出，携带状态码与响应体。"""


class RateLimitError(ApiError):
    """Provider 限流错误（429）。不做重试，由调用方展示。"""


class ToolCallError(BusinessError):
    """工具服务器调用失败，http_status 为传输层状态码（网络失败时为 0）。"""


class ProcessError(BusinessError):
    """本地可执行程序失败：超时、输出超限或无输出的非零退出。"""


class ParseError(BusinessError):
    """技能文件无法解析（例如无法按 UTF-8 解码）。"""


class NotFoundError(BusinessError):
    """存储中不存在指定文件。"""


class WriteError(BusinessError):
    """写入存储失败。"""
