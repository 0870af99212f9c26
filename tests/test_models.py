"""
数据模型测试
"""

import pytest
from dataclasses import FrozenInstanceError

from pmpanel_client.errors import UnsupportedNodeTypeError
from pmpanel_client.models import (
    ApiConfig,
    ClientConfig,
    LogConfig,
    NodeType,
    ShadowsocksNode,
    UserRecord,
)


class TestNodeType:
    """测试节点类型解析"""

    @pytest.mark.parametrize("value, expected", [
        ("shadowsocks", NodeType.SHADOWSOCKS),
        ("Shadowsocks", NodeType.SHADOWSOCKS),
        ("V2ray", NodeType.V2RAY),
        (" TROJAN ", NodeType.TROJAN),
        (NodeType.TROJAN, NodeType.TROJAN),
    ])
    def test_parse(self, value, expected):
        assert NodeType.parse(value) is expected

    @pytest.mark.parametrize("value", ["wireguard", "", None, "ssr"])
    def test_parse_unsupported(self, value):
        with pytest.raises(UnsupportedNodeTypeError):
            NodeType.parse(value)


class TestApiConfig:
    """测试 API 配置验证"""

    def test_required_fields(self):
        with pytest.raises(ValueError, match="api_host"):
            ApiConfig(api_host="", api_key="k", node_id="1", node_type="v2ray")
        with pytest.raises(ValueError, match="api_key"):
            ApiConfig(api_host="h", api_key="", node_id="1", node_type="v2ray")
        with pytest.raises(ValueError, match="node_id"):
            ApiConfig(api_host="h", api_key="k", node_id="", node_type="v2ray")

    def test_negative_retry_attempts(self):
        with pytest.raises(ValueError, match="retry_attempts"):
            ApiConfig(api_host="h", api_key="k", node_id="1", node_type="v2ray", retry_attempts=-1)

    def test_immutable(self, ss_config):
        with pytest.raises(FrozenInstanceError):
            ss_config.speed_limit = 10

    def test_from_dict_requires_mapping(self):
        with pytest.raises(TypeError):
            ApiConfig.from_dict(["api_host"])


class TestDescriptors:
    """测试节点和用户模型"""

    def test_invalid_transport_protocol(self):
        with pytest.raises(ValueError, match="transport_protocol"):
            ShadowsocksNode(
                node_type=NodeType.SHADOWSOCKS, node_id="1", port=1,
                transport_protocol="quic", enable_tls=False, speed_limit=0,
            )

    def test_user_record_is_frozen(self):
        user = UserRecord(uid=1, passwd="p", uuid="p", speed_limit=0, device_limit=0)
        with pytest.raises(FrozenInstanceError):
            user.device_limit = 3


class TestClientConfig:
    def test_log_level_validated(self):
        with pytest.raises(ValueError, match="log level"):
            LogConfig(level="chatty")

    def test_type_checks(self, ss_config):
        with pytest.raises(TypeError):
            ClientConfig(api={"api_host": "h"})
        assert ClientConfig(api=ss_config).log.level == "INFO"
