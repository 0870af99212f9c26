"""
节点配置解析

根据本地声明的节点类型（而不是响应里的 type 字段）把面板的节点配置转换为 NodeDescriptor。
"""

import logging
from typing import Any, Callable, Dict, Optional

from .errors import DeserializationError
from .limits import effective_speed_limit
from .models import (
    ApiConfig,
    NodeDescriptor,
    NodeType,
    ShadowsocksNode,
    TRANSPORT_PROTOCOLS,
    TrojanNode,
    V2rayNode,
)
from .panel_models import NodeInfoResponse, decode_node_info

logger = logging.getLogger(__name__)


def parse_ss_node_response(response: NodeInfoResponse, config: ApiConfig) -> ShadowsocksNode:
    """解析 Shadowsocks 节点配置"""
    return ShadowsocksNode(
        node_type=NodeType.SHADOWSOCKS,
        node_id=config.node_id,
        port=response.port,
        transport_protocol="tcp",
        enable_tls=False,
        speed_limit=effective_speed_limit(config.speed_limit, response.speed_limit),
        cipher_method=response.method,
        server_key=response.server_key,
    )


def _transport_protocol(network: Optional[str], default: str = "tcp") -> str:
    protocol = (network or default).strip().lower()
    if protocol not in TRANSPORT_PROTOCOLS:
        raise DeserializationError(
            NodeInfoResponse.__name__,
            ValueError(f"unsupported transport protocol: {network}")
        )
    return protocol


def parse_v2ray_node_response(response: NodeInfoResponse, config: ApiConfig) -> V2rayNode:
    """
    解析 V2ray 节点配置

    ws 使用 host/path，grpc 使用 service_name（缺省时取 sni），security 为 tls 时启用 TLS。
    """
    transport_protocol = _transport_protocol(response.network)
    host = path = service_name = None
    if transport_protocol == "ws":
        host = response.host
        path = response.path
    elif transport_protocol == "grpc":
        service_name = response.service_name or response.sni

    return V2rayNode(
        node_type=NodeType.V2RAY,
        node_id=config.node_id,
        port=response.port,
        transport_protocol=transport_protocol,
        enable_tls=(response.security or "").lower() == "tls",
        speed_limit=effective_speed_limit(config.speed_limit, response.speed_limit),
        alter_id=response.alter_id,
        host=host,
        path=path,
        service_name=service_name,
        enable_vless=config.enable_vless,
        vless_flow=config.vless_flow,
    )


def parse_trojan_node_response(response: NodeInfoResponse, config: ApiConfig) -> TrojanNode:
    """
    解析 Trojan 节点配置

    Trojan 总是启用 TLS，host 作为 SNI 使用。旧版面板只下发 grpc 开关。
    """
    if response.grpc:
        transport_protocol = "grpc"
    else:
        transport_protocol = _transport_protocol(response.network)

    path = service_name = None
    if transport_protocol == "ws":
        path = response.path
    elif transport_protocol == "grpc":
        service_name = response.service_name or response.sni

    return TrojanNode(
        node_type=NodeType.TROJAN,
        node_id=config.node_id,
        port=response.port,
        transport_protocol=transport_protocol,
        enable_tls=True,
        speed_limit=effective_speed_limit(config.speed_limit, response.speed_limit),
        host=response.host,
        path=path,
        service_name=service_name,
    )


NODE_PARSERS: Dict[NodeType, Callable[[NodeInfoResponse, ApiConfig], NodeDescriptor]] = {
    NodeType.SHADOWSOCKS: parse_ss_node_response,
    NodeType.V2RAY: parse_v2ray_node_response,
    NodeType.TROJAN: parse_trojan_node_response,
}


def parse_node_info(payload: Any, config: ApiConfig) -> NodeDescriptor:
    """
    解析面板下发的节点配置

    Args:
        payload: 原始响应体（bytes/str）或已解码的字典
        config: 本地 API 配置，决定节点类型和限速覆盖

    Returns:
        NodeDescriptor: 对应节点类型的节点配置

    Raises:
        DeserializationError: 响应结构不符
        UnsupportedNodeTypeError: 节点类型不受支持
    """
    node_type = NodeType.parse(config.node_type)
    response = decode_node_info(payload)
    logger.debug(f"Node info response: {response!r}")

    node_info = NODE_PARSERS[node_type](response, config)
    logger.info(
        f"Parsed {node_type.value} node {node_info.node_id}: port={node_info.port}, "
        f"transport={node_info.transport_protocol}, speed_limit={node_info.speed_limit}"
    )
    return node_info
