"""
HTTP 传输层

负责向面板发送请求：认证头、公共查询参数、超时和重试。
不检查状态码，状态码的处理交给 response.parse_response。
"""

import time
import logging
from dataclasses import dataclass
from typing import Optional, Dict, Any

import requests

from .models import ApiConfig

logger = logging.getLogger(__name__)


class TransportError(Exception):
    """请求在所有重试之后仍然失败"""

    def __init__(self, message: str, cause: Optional[Exception] = None):
        self.cause = cause
        super().__init__(message)


@dataclass
class RawResponse:
    """未经处理的响应"""
    status_code: int
    body: bytes


class HTTPTransport:
    """基于 requests.Session 的传输实现"""

    def __init__(self, config: ApiConfig, session: Optional[requests.Session] = None, retry_backoff: float = 2):
        """
        初始化传输层

        Args:
            config: API 配置
            session: 可选的 requests.Session
            retry_backoff: 指数退避的底数（秒）
        """
        self.config = config
        self.retry_backoff = retry_backoff
        self.debug = False
        self.session = session or requests.Session()
        self.session.headers.update({
            "Authorization": config.api_key,
            "Content-Type": "application/json",
            "Accept": "application/json",
        })
        self.params = {
            "protocol": config.node_type.value,
            "node_id": config.node_id,
        }

    def url_for(self, path: str) -> str:
        return self.config.api_host + path

    def set_debug(self, enabled: bool = True) -> None:
        """开启后记录每个请求和响应的详细内容"""
        self.debug = enabled

    def request(self, method: str, path: str, json: Optional[Dict[str, Any]] = None) -> RawResponse:
        """
        发送请求（支持重试）

        Args:
            method: HTTP 方法
            path: 接口路径，如 /api/node/user
            json: 请求体

        Returns:
            RawResponse: 响应状态码和响应体

        Raises:
            TransportError: 请求失败或超时
        """
        url = self.url_for(path)
        max_retries = self.config.retry_attempts
        last_error = None

        for attempt in range(max_retries + 1):
            try:
                if attempt > 0:
                    # 指数退避
                    backoff_time = self.retry_backoff ** (attempt - 1)
                    logger.info(f"Retrying in {backoff_time} seconds (attempt {attempt}/{max_retries})")
                    time.sleep(backoff_time)

                if self.debug:
                    logger.debug(f"{method} {url} params={self.params} body={json}")

                response = self.session.request(
                    method,
                    url,
                    params=self.params,
                    json=json,
                    timeout=self.config.timeout
                )

                if self.debug:
                    logger.debug(f"{method} {url} -> {response.status_code}: {response.content!r}")

                return RawResponse(status_code=response.status_code, body=response.content)

            except requests.exceptions.Timeout as e:
                last_error = e
                logger.warning(
                    f"Request timeout after {self.config.timeout} seconds "
                    f"(attempt {attempt + 1}/{max_retries + 1})"
                )
            except requests.exceptions.RequestException as e:
                last_error = e
                logger.warning(f"Request failed: {e} (attempt {attempt + 1}/{max_retries + 1})")

        error_msg = f"{method} {url} failed after {max_retries + 1} attempts: {last_error}"
        logger.error(error_msg)
        raise TransportError(error_msg, last_error)

    def close(self) -> None:
        self.session.close()
