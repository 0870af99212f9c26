"""
限速与设备数计算

本地覆盖值为正数时优先，否则使用面板下发的值，两者从不混合。
"""

import math
from typing import Optional, Union

Number = Union[int, float]


def mbps_to_bytes_per_sec(value: Optional[Number]) -> int:
    """
    将面板的 Mbps 转换为 bytes/sec（截断取整）

    Args:
        value: 以 Mbps 为单位的速率

    Returns:
        int: bytes/sec，负数按 0 处理

    Raises:
        ValueError: 速率为 NaN、无穷大，或换算结果超出浮点范围
    """
    if value is None:
        return 0
    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError(f"speed limit must be finite, got {value}")
    if value <= 0:
        return 0
    if isinstance(value, int):
        return value * 1000000 // 8
    bytes_per_sec = value * 1000000 / 8
    if not math.isfinite(bytes_per_sec):
        raise ValueError(f"speed limit out of range: {value}")
    return int(bytes_per_sec)


def effective_speed_limit(local: Optional[Number], panel: Optional[Number]) -> int:
    """
    计算实际生效的限速

    Args:
        local: 本地配置的限速 (Mbps)
        panel: 面板下发的限速 (Mbps)

    Returns:
        int: 生效的限速 (bytes/sec)
    """
    if local and local > 0:
        return mbps_to_bytes_per_sec(local)
    return mbps_to_bytes_per_sec(panel)


def effective_device_limit(local: Optional[int], panel: Optional[int]) -> int:
    """计算实际生效的设备数限制"""
    if local and local > 0:
        return local
    return panel or 0
