"""
配置管理器

负责加载和验证客户端配置文件。
"""

import os
import yaml
import logging
from typing import Optional, List, Dict, Any

from .errors import UnsupportedNodeTypeError
from .models import ApiConfig, ClientConfig, LogConfig

logger = logging.getLogger(__name__)


class ConfigManager:
    """配置管理器类"""

    DEFAULT_CONFIG_PATH = "/etc/nboard-node/config.yaml"

    def __init__(self, config_path: Optional[str] = None):
        """
        初始化配置管理器

        Args:
            config_path: 配置文件路径，默认读取 PMPANEL_CLIENT_CONFIG 环境变量，否则为 /etc/nboard-node/config.yaml
        """
        self.config_path = config_path or os.environ.get('PMPANEL_CLIENT_CONFIG', self.DEFAULT_CONFIG_PATH)

    def load_config(self) -> ClientConfig:
        """
        加载配置文件

        Returns:
            ClientConfig: 配置对象

        Raises:
            FileNotFoundError: 配置文件不存在
            UnsupportedNodeTypeError: 节点类型不受支持
            ValueError: 配置文件格式错误
        """
        logger.info(f"Loading configuration from: {self.config_path}")

        if not os.path.exists(self.config_path):
            logger.error(f"Configuration file not found: {self.config_path}")
            raise FileNotFoundError(f"Configuration file not found: {self.config_path}")

        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)

            if not data:
                logger.error("Configuration file is empty")
                raise ValueError("Configuration file is empty")

            errors = self.validate_config(data)
            if errors:
                raise ValueError(', '.join(errors))

            config = self._parse_config(data)

            logger.info(
                f"Configuration loaded successfully: node {config.api.node_id} "
                f"({config.api.node_type.value}) at {config.api.api_host}"
            )
            return config

        except yaml.YAMLError as e:
            logger.error(f"Invalid YAML format: {e}")
            raise ValueError(f"Invalid YAML format: {e}")
        except UnsupportedNodeTypeError as e:
            logger.error(f"Failed to load configuration: {e}")
            raise
        except Exception as e:
            logger.error(f"Failed to load configuration: {e}")
            raise ValueError(f"Failed to load configuration: {e}")

    def validate_config(self, data: Any) -> List[str]:
        """
        验证配置字典的结构

        Args:
            data: yaml.safe_load 的结果

        Returns:
            List[str]: 错误信息列表，空列表表示验证通过
        """
        errors = []

        if not isinstance(data, dict):
            errors.append("configuration must be a mapping")
            return errors

        api_data = data.get('api')
        if not isinstance(api_data, dict):
            errors.append("api section is required")
        else:
            for key in ('api_host', 'api_key', 'node_id', 'node_type'):
                if api_data.get(key) in (None, ''):
                    errors.append(f"api.{key} is required")
            for key in ('timeout', 'speed_limit', 'device_limit', 'retry_attempts'):
                value = api_data.get(key)
                if value is not None and (isinstance(value, bool) or not isinstance(value, (int, float))):
                    errors.append(f"api.{key} must be a number, got {value!r}")

        log_data = data.get('log')
        if log_data is not None and not isinstance(log_data, dict):
            errors.append("log section must be a mapping")

        return errors

    def _parse_config(self, data: Dict[str, Any]) -> ClientConfig:
        """
        解析配置字典为配置对象

        Args:
            data: 配置字典

        Returns:
            ClientConfig: 配置对象
        """
        log_data = data.get('log') or {}
        log = LogConfig(
            level=log_data.get('level', 'INFO'),
            file=log_data.get('file') or ''
        )

        api = ApiConfig.from_dict(data['api'])

        return ClientConfig(api=api, log=log)
