"""
用户列表解析
"""

import logging
from typing import Any, List

from .limits import effective_device_limit, effective_speed_limit
from .models import ApiConfig, UserRecord
from .panel_models import UserResponse, decode_user_list

logger = logging.getLogger(__name__)


def to_user_record(user: UserResponse, config: ApiConfig) -> UserRecord:
    """将单个面板用户转换为 UserRecord，限速和设备数分别判断覆盖"""
    return UserRecord(
        uid=user.id,
        passwd=user.passwd,
        uuid=user.passwd,
        speed_limit=effective_speed_limit(config.speed_limit, user.speed_limit),
        device_limit=effective_device_limit(config.device_limit, user.device_limit),
    )


def parse_user_list(payload: Any, config: ApiConfig) -> List[UserRecord]:
    """
    解析面板下发的用户列表

    输出与输入一一对应，顺序保持不变。

    Args:
        payload: 原始响应体（bytes/str）或已解码的列表
        config: 本地 API 配置

    Returns:
        List[UserRecord]: 用户列表

    Raises:
        DeserializationError: 响应结构不符
    """
    users = decode_user_list(payload)
    user_list = [to_user_record(user, config) for user in users]
    logger.debug(f"Parsed {len(user_list)} users")
    return user_list
