"""
状态上报

节点状态、在线用户、用户流量三种上报。输入原样映射到请求体，不做聚合或差值计算。
"""

import logging
from typing import Any, Dict, Sequence

from .models import NodeStatus, OnlineUser, UserTraffic
from .response import send_request

logger = logging.getLogger(__name__)

STATUS_PATH = "/api/node/status"
ONLINE_USERS_PATH = "/api/node/user/online"
TRAFFIC_PATH = "/api/node/user/traffic"


def build_status_payload(status: NodeStatus) -> Dict[str, Any]:
    return status.to_dict()


def build_online_payload(online_users: Sequence[OnlineUser]) -> Dict[str, Any]:
    return {'online': [user.to_dict() for user in online_users]}


def build_traffic_payload(traffic: Sequence[UserTraffic]) -> Dict[str, Any]:
    return {'traffic': [item.to_dict() for item in traffic]}


class TelemetryReporter:
    """上报器，每次调用要么整体成功，要么整体失败"""

    def __init__(self, transport, api_host: str):
        """
        Args:
            transport: 提供 request(method, path, json=None) 的传输对象
            api_host: 面板地址，用于错误信息
        """
        self.transport = transport
        self.api_host = api_host

    def _post(self, path: str, payload: Dict[str, Any]) -> None:
        send_request(self.transport, self.api_host, "POST", path, json=payload)

    def report_node_status(self, status: NodeStatus) -> None:
        """上报节点状态"""
        self._post(STATUS_PATH, build_status_payload(status))

    def report_node_online_users(self, online_users: Sequence[OnlineUser]) -> None:
        """上报在线用户，空列表同样会发送"""
        self._post(ONLINE_USERS_PATH, build_online_payload(online_users))
        logger.debug(f"Reported {len(online_users)} online users")

    def report_user_traffic(self, traffic: Sequence[UserTraffic]) -> None:
        """上报用户流量，空列表同样会发送"""
        self._post(TRAFFIC_PATH, build_traffic_payload(traffic))
        logger.debug(f"Reported traffic for {len(traffic)} users")
