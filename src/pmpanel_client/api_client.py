"""
API客户端

负责与面板交互：拉取节点配置和用户列表，上报节点状态、在线用户和流量。
"""

import logging
from typing import Optional, List, Dict, Any, Sequence

from .errors import APIError
from .models import (
    ApiConfig,
    ClientInfo,
    DetectResult,
    DetectRule,
    NodeDescriptor,
    NodeStatus,
    OnlineUser,
    UserRecord,
    UserTraffic,
)
from .node_parser import parse_node_info
from .response import send_request
from .rule_loader import read_local_rule_list
from .telemetry import TelemetryReporter
from .transport import HTTPTransport
from .user_parser import parse_user_list

logger = logging.getLogger(__name__)

NODE_CONFIG_PATH = "/api/node/config"
USER_LIST_PATH = "/api/node/user"


class APIClient:
    """面板API客户端类"""

    def __init__(self, config: ApiConfig, transport=None):
        """
        初始化API客户端

        Args:
            config: API 配置
            transport: 可选的传输对象，需提供 request(method, path, json=None)，默认使用 HTTPTransport

        Raises:
            TypeError: config 类型错误
            RuleFileError: 本地规则文件包含无效规则
        """
        if not isinstance(config, ApiConfig):
            raise TypeError("config must be an ApiConfig instance")

        self.config = config
        self.transport = transport if transport is not None else HTTPTransport(config)
        self.reporter = TelemetryReporter(self.transport, config.api_host)
        logger.info(f"Getting node info, Type: {config.node_type.value}, NodeID: {config.node_id}")

        self._local_rule_list = tuple(read_local_rule_list(config.rule_list_path))

    @classmethod
    def from_dict(cls, data: Dict[str, Any], transport=None) -> "APIClient":
        """
        从字典配置创建客户端

        Raises:
            UnsupportedNodeTypeError: 节点类型不受支持
            ValueError: 配置无效
        """
        return cls(ApiConfig.from_dict(data), transport=transport)

    def describe(self) -> ClientInfo:
        """返回客户端描述信息"""
        return ClientInfo(
            api_host=self.config.api_host,
            node_id=self.config.node_id,
            key=self.config.api_key,
            node_type=self.config.node_type,
        )

    def debug(self) -> None:
        """开启传输层调试日志"""
        set_debug = getattr(self.transport, "set_debug", None)
        if set_debug is not None:
            set_debug(True)
        logging.getLogger(__package__).setLevel(logging.DEBUG)

    def _get(self, path: str) -> bytes:
        return send_request(self.transport, self.config.api_host, "GET", path)

    def get_node_info(self) -> NodeDescriptor:
        """
        从面板拉取节点配置

        Returns:
            NodeDescriptor: 节点配置

        Raises:
            APIError: 请求失败或响应解析失败
        """
        try:
            payload = self._get(NODE_CONFIG_PATH)
            return parse_node_info(payload, self.config)
        except APIError as e:
            logger.error(f"Failed to get node info: {e}")
            raise

    def get_user_list(self) -> List[UserRecord]:
        """
        从面板拉取用户列表

        Returns:
            List[UserRecord]: 用户列表，顺序与面板一致

        Raises:
            APIError: 请求失败或响应解析失败
        """
        logger.info(f"Get user list for node: {self.config.node_id}")
        try:
            payload = self._get(USER_LIST_PATH)
            return parse_user_list(payload, self.config)
        except APIError as e:
            logger.error(f"Failed to get user list: {e}")
            raise

    def report_node_status(self, node_status: NodeStatus) -> None:
        """
        上报节点状态

        Raises:
            APIError: 上报失败
        """
        try:
            self.reporter.report_node_status(node_status)
        except APIError as e:
            logger.error(f"Failed to report node status: {e}")
            raise

    def report_node_online_users(self, online_users: Sequence[OnlineUser]) -> None:
        """
        上报在线用户

        Raises:
            APIError: 上报失败
        """
        try:
            self.reporter.report_node_online_users(online_users)
        except APIError as e:
            logger.error(f"Failed to report online users: {e}")
            raise

    def report_user_traffic(self, user_traffic: Sequence[UserTraffic]) -> None:
        """
        上报用户流量

        Raises:
            APIError: 上报失败
        """
        try:
            self.reporter.report_user_traffic(user_traffic)
        except APIError as e:
            logger.error(f"Failed to report user traffic: {e}")
            raise

    def get_node_rule(self) -> List[DetectRule]:
        """
        获取审计规则

        目前只返回启动时加载的本地规则，不请求面板。
        """
        return list(self._local_rule_list)

    def report_illegal(self, detect_results: Optional[Sequence[DetectResult]] = None) -> None:
        """上报违规记录。面板暂无对应接口，只记录日志"""
        if detect_results:
            logger.debug(f"Skipping report of {len(detect_results)} illegal records")
