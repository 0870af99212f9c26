"""
错误定义

面板客户端的全部异常类型。调用方可以通过 retryable 属性判断是否值得重试。
"""

from typing import Optional


class APIError(Exception):
    """API错误异常基类"""

    retryable = False


class ConnectivityError(APIError):
    """传输层错误（DNS、超时、连接被拒绝等）"""

    retryable = True

    def __init__(self, url: str, cause: Exception):
        self.url = url
        self.cause = cause
        super().__init__(f"request {url} failed: {cause}")


class RequestFailedError(APIError):
    """面板返回非200状态码"""

    reason = "status code"

    def __init__(self, url: str, status_code: int, body: str):
        self.url = url
        self.status_code = status_code
        self.body = body
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        return f"request {self.url} failed with {self.reason}: {self.body}"


class BadRequestError(RequestFailedError):
    """400 请求格式错误，通常是客户端的问题"""

    reason = "bad request"


class AuthorizationError(RequestFailedError):
    """401/403 认证或授权失败"""


class UnauthorizedError(AuthorizationError):
    reason = "unauthorized"


class ForbiddenError(AuthorizationError):
    reason = "forbidden"


class UpstreamError(RequestFailedError):
    """其他非200响应"""

    def _format_message(self) -> str:
        return f"request {self.url} failed with status code {self.status_code}: {self.body}"

    @property
    def retryable(self) -> bool:
        return self.status_code is not None and self.status_code >= 500


class DeserializationError(APIError):
    """响应数据与预期结构不符"""

    def __init__(self, type_name: str, cause: Exception, payload: Optional[str] = None):
        self.type_name = type_name
        self.cause = cause
        self.payload = payload
        super().__init__(f"unmarshal {type_name} failed: {cause}")


class UnsupportedNodeTypeError(APIError, ValueError):
    """不支持的节点类型"""

    def __init__(self, node_type: str):
        self.node_type = node_type
        super().__init__(f"unsupported Node type: {node_type}")


class RuleFileError(APIError):
    """本地审计规则文件包含无效的规则，启动应当中止"""

    def __init__(self, path: str, line_number: int, cause: Exception):
        self.path = path
        self.line_number = line_number
        self.cause = cause
        super().__init__(f"invalid rule at {path}:{line_number}: {cause}")
