"""
响应分类

所有面板请求的结果都经过这里：传输层错误、非200状态码统一转换为结构化异常。
"""

import logging
from typing import Optional, Union

import requests

from .errors import (
    ConnectivityError,
    BadRequestError,
    UnauthorizedError,
    ForbiddenError,
    UpstreamError,
)
from .transport import TransportError

logger = logging.getLogger(__name__)

_STATUS_ERRORS = {
    400: BadRequestError,
    401: UnauthorizedError,
    403: ForbiddenError,
}


def _body_text(body: Union[bytes, str, None]) -> str:
    if body is None:
        return ""
    if isinstance(body, bytes):
        return body.decode('utf-8', errors='replace')
    return body


def parse_response(
    url: str,
    status_code: Optional[int] = None,
    body: Union[bytes, str, None] = b"",
    error: Optional[Exception] = None
) -> bytes:
    """
    根据传输结果返回响应体或抛出分类后的异常

    Args:
        url: 请求的完整地址，用于错误信息
        status_code: HTTP 状态码
        body: 响应体
        error: 传输层错误，非 None 时忽略状态码

    Returns:
        bytes: 状态码为 200 时原样返回的响应体

    Raises:
        ConnectivityError: 传输层失败
        BadRequestError: 400
        UnauthorizedError: 401
        ForbiddenError: 403
        UpstreamError: 其他非200状态码
        TypeError: 既没有传输层错误也没有状态码
    """
    if error is not None:
        raise ConnectivityError(url, error)
    if status_code is None:
        raise TypeError("status_code is required when no transport error is given")

    if status_code == 200:
        if isinstance(body, str):
            return body.encode('utf-8')
        return body if body is not None else b""

    text = _body_text(body)
    error_class = _STATUS_ERRORS.get(status_code, UpstreamError)
    logger.debug(f"Request {url} returned status {status_code}")
    raise error_class(url, status_code, text)


def send_request(transport, api_host: str, method: str, path: str, json: Optional[dict] = None) -> bytes:
    """
    通过传输层发送请求并分类结果

    Args:
        transport: 提供 request(method, path, json=None) 的传输对象
        api_host: 面板地址
        method: HTTP 方法
        path: 接口路径
        json: 请求体

    Returns:
        bytes: 响应体
    """
    url = api_host + path
    try:
        response = transport.request(method, path, json=json)
    except (TransportError, requests.exceptions.RequestException) as e:
        return parse_response(url, error=e)
    return parse_response(url, response.status_code, response.body)
