"""
面板响应数据模型

面板不同版本对同一字段使用不同的名称，这里通过别名统一。
"""

import json
from typing import Any, List, Optional, Type, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

from .errors import DeserializationError
from .limits import mbps_to_bytes_per_sec


class _SpeedLimitModel(BaseModel):
    """限速字段需要能换算为 bytes/sec"""
    model_config = ConfigDict(extra='ignore', populate_by_name=True, allow_inf_nan=False)

    speed_limit: Optional[float] = Field(0, validation_alias=AliasChoices('speedlimit', 'speed_limit'))

    @field_validator('speed_limit')
    @classmethod
    def check_speed_limit(cls, value: Optional[float]) -> Optional[float]:
        mbps_to_bytes_per_sec(value)
        return value


class NodeInfoResponse(_SpeedLimitModel):
    """节点配置响应"""

    port: int = Field(ge=0, le=65535)
    type: Optional[str] = None
    # Shadowsocks
    method: str = ""
    server_key: str = Field("", validation_alias=AliasChoices('server_key', 'passwd'))
    # V2ray / Trojan
    network: Optional[str] = None
    security: Optional[str] = None
    host: Optional[str] = None
    path: Optional[str] = None
    sni: Optional[str] = None
    service_name: Optional[str] = Field(None, validation_alias=AliasChoices('service_name', 'serviceName'))
    alter_id: int = Field(0, validation_alias=AliasChoices('alter_id', 'aid', 'alterId'))
    grpc: bool = False


class UserResponse(_SpeedLimitModel):
    """用户列表中的单个用户"""

    id: int
    passwd: str
    device_limit: Optional[int] = Field(0, validation_alias=AliasChoices('device_limit', 'devicelimit'))


_user_list_adapter = TypeAdapter(List[UserResponse])


def _load_json(data: Union[bytes, str], type_name: str) -> Any:
    try:
        return json.loads(data)
    except ValueError as e:
        text = data.decode('utf-8', errors='replace') if isinstance(data, bytes) else data
        raise DeserializationError(type_name, e, text)


def decode_node_info(data: Union[bytes, str, dict]) -> NodeInfoResponse:
    """
    解析节点配置响应

    Args:
        data: 原始响应体或已解码的字典

    Returns:
        NodeInfoResponse: 节点配置

    Raises:
        DeserializationError: JSON 无效或结构不符
    """
    return _decode(NodeInfoResponse, data)


def decode_user_list(data: Union[bytes, str, list]) -> List[UserResponse]:
    """
    解析用户列表响应

    Raises:
        DeserializationError: JSON 无效或结构不符
    """
    type_name = "List[UserResponse]"
    payload = _load_json(data, type_name) if isinstance(data, (bytes, str)) else data
    try:
        return _user_list_adapter.validate_python(payload)
    except ValidationError as e:
        raise DeserializationError(type_name, e, repr(payload))


def _decode(model: Type[BaseModel], data: Any) -> Any:
    payload = _load_json(data, model.__name__) if isinstance(data, (bytes, str)) else data
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise DeserializationError(model.__name__, e, repr(payload))
