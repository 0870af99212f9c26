"""
数据模型定义

包含面板客户端使用的所有数据类和验证逻辑。
"""

import re
from dataclasses import dataclass, field
from typing import Optional, Dict, Any
from enum import Enum

from .errors import UnsupportedNodeTypeError
from .limits import mbps_to_bytes_per_sec


DEFAULT_TIMEOUT = 5
DEFAULT_RETRY_ATTEMPTS = 3

# 本地规则没有面板分配的ID
LOCAL_RULE_ID = -1

TRANSPORT_PROTOCOLS = ("tcp", "ws", "grpc")


class NodeType(str, Enum):
    """节点类型枚举"""
    SHADOWSOCKS = "shadowsocks"
    V2RAY = "v2ray"
    TROJAN = "trojan"

    @classmethod
    def parse(cls, value: Any) -> "NodeType":
        """
        解析节点类型（不区分大小写）

        Args:
            value: 节点类型字符串或 NodeType

        Returns:
            NodeType: 节点类型

        Raises:
            UnsupportedNodeTypeError: 不支持的节点类型
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise UnsupportedNodeTypeError(str(value))


@dataclass(frozen=True)
class ApiConfig:
    """面板API配置"""
    api_host: str
    api_key: str
    node_id: str
    node_type: NodeType
    timeout: Optional[float] = DEFAULT_TIMEOUT
    speed_limit: float = 0  # 本地限速覆盖 (Mbps)，0 表示使用面板的值
    device_limit: int = 0  # 本地设备数覆盖，0 表示使用面板的值
    rule_list_path: str = ""
    enable_vless: bool = False
    vless_flow: Optional[str] = None
    retry_attempts: int = DEFAULT_RETRY_ATTEMPTS

    def __post_init__(self):
        """数据验证"""
        if not self.api_host:
            raise ValueError("api_host cannot be empty")
        if not self.api_key:
            raise ValueError("api_key cannot be empty")
        if self.node_id is None or str(self.node_id) == "":
            raise ValueError("node_id cannot be empty")
        if self.retry_attempts < 0:
            raise ValueError(f"retry_attempts must be non-negative, got {self.retry_attempts}")
        # 本地限速必须能换算为 bytes/sec
        mbps_to_bytes_per_sec(self.speed_limit)

        # frozen dataclass 只能通过 object.__setattr__ 做规范化
        object.__setattr__(self, "node_type", NodeType.parse(self.node_type))
        object.__setattr__(self, "node_id", str(self.node_id))
        object.__setattr__(self, "api_host", self.api_host.rstrip("/"))
        if not self.timeout or self.timeout <= 0:
            object.__setattr__(self, "timeout", DEFAULT_TIMEOUT)
        if self.rule_list_path is None:
            object.__setattr__(self, "rule_list_path", "")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ApiConfig":
        """从字典创建配置，忽略未知字段"""
        if not isinstance(data, dict):
            raise TypeError("api config must be a mapping")
        return cls(
            api_host=data.get('api_host', ''),
            api_key=data.get('api_key', ''),
            node_id=data.get('node_id'),
            node_type=data.get('node_type', ''),
            timeout=data.get('timeout', DEFAULT_TIMEOUT),
            speed_limit=data.get('speed_limit') or 0,
            device_limit=data.get('device_limit') or 0,
            rule_list_path=data.get('rule_list_path') or "",
            enable_vless=bool(data.get('enable_vless', False)),
            vless_flow=data.get('vless_flow'),
            retry_attempts=data.get('retry_attempts', DEFAULT_RETRY_ATTEMPTS),
        )


@dataclass(frozen=True)
class NodeDescriptor:
    """规范化的节点配置，具体协议见各子类"""
    node_type: NodeType
    node_id: str
    port: int
    transport_protocol: str
    enable_tls: bool
    speed_limit: int  # bytes/sec

    def __post_init__(self):
        """数据验证"""
        if not isinstance(self.port, int):
            raise TypeError("port must be an integer")
        if not (0 <= self.port <= 65535):
            raise ValueError(f"port must be between 0 and 65535, got {self.port}")
        if self.transport_protocol not in TRANSPORT_PROTOCOLS:
            raise ValueError(f"transport_protocol must be tcp, ws, or grpc, got {self.transport_protocol}")
        if self.speed_limit < 0:
            raise ValueError(f"speed_limit must be non-negative, got {self.speed_limit}")


@dataclass(frozen=True)
class ShadowsocksNode(NodeDescriptor):
    """Shadowsocks 节点"""
    cipher_method: str = ""
    server_key: str = ""


@dataclass(frozen=True)
class V2rayNode(NodeDescriptor):
    """V2ray (VMess/VLESS) 节点"""
    alter_id: int = 0
    host: Optional[str] = None  # WebSocket Host
    path: Optional[str] = None  # WebSocket 路径
    service_name: Optional[str] = None  # gRPC service name
    enable_vless: bool = False
    vless_flow: Optional[str] = None


@dataclass(frozen=True)
class TrojanNode(NodeDescriptor):
    """Trojan 节点"""
    host: Optional[str] = None
    path: Optional[str] = None
    service_name: Optional[str] = None


@dataclass(frozen=True)
class UserRecord:
    """节点的授权用户"""
    uid: int
    passwd: str
    uuid: str  # 与 passwd 相同，兼容共用一个密钥的协议
    speed_limit: int  # bytes/sec
    device_limit: int


@dataclass(frozen=True)
class DetectRule:
    """审计规则"""
    id: int
    pattern: "re.Pattern"

    def match(self, text: str) -> bool:
        return self.pattern.search(text) is not None


@dataclass
class DetectResult:
    """审计命中记录"""
    uid: int
    rule_id: int


@dataclass
class NodeStatus:
    """节点状态"""
    cpu: float
    mem: float
    disk: float
    uptime: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            'cpu': self.cpu,
            'mem': self.mem,
            'disk': self.disk,
            'uptime': self.uptime,
        }


@dataclass
class OnlineUser:
    """在线用户"""
    uid: int
    ip: str

    def to_dict(self) -> Dict[str, Any]:
        return {'uid': self.uid, 'ip': self.ip}


@dataclass
class UserTraffic:
    """用户流量"""
    uid: int
    upload: int
    download: int

    def __post_init__(self):
        """数据验证"""
        if self.upload < 0 or self.download < 0:
            raise ValueError(f"traffic counters must be non-negative, got {self.upload}/{self.download}")

    def to_dict(self) -> Dict[str, Any]:
        return {'uid': self.uid, 'upload': self.upload, 'download': self.download}


@dataclass(frozen=True)
class ClientInfo:
    """客户端描述信息"""
    api_host: str
    node_id: str
    key: str
    node_type: NodeType


@dataclass
class LogConfig:
    """日志配置"""
    level: str = "INFO"
    file: str = ""

    def __post_init__(self):
        """数据验证"""
        self.level = str(self.level).upper()
        if self.level not in ["DEBUG", "INFO", "WARN", "WARNING", "ERROR"]:
            raise ValueError(f"log level must be DEBUG, INFO, WARN, or ERROR, got {self.level}")


@dataclass
class ClientConfig:
    """完整的客户端配置"""
    api: ApiConfig
    log: LogConfig = field(default_factory=LogConfig)

    def __post_init__(self):
        """数据验证"""
        if not isinstance(self.api, ApiConfig):
            raise TypeError("api must be an ApiConfig instance")
        if not isinstance(self.log, LogConfig):
            raise TypeError("log must be a LogConfig instance")
