"""
Pytest configuration and shared fixtures.
"""

import pytest
import tempfile
from pathlib import Path
from typing import List, Optional

from pmpanel_client.models import ApiConfig, NodeType
from pmpanel_client.transport import RawResponse


class FakeTransport:
    """记录请求并按顺序返回预设响应的传输对象"""

    def __init__(self, responses: Optional[List] = None):
        self.responses = list(responses or [])
        self.requests = []

    def queue(self, status_code: int = 200, body: bytes = b"{}"):
        self.responses.append(RawResponse(status_code=status_code, body=body))
        return self

    def request(self, method, path, json=None):
        self.requests.append((method, path, json))
        if not self.responses:
            return RawResponse(status_code=200, body=b"{}")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def config_dir(temp_dir):
    """Create a temporary config directory."""
    config_path = temp_dir / "config"
    config_path.mkdir(parents=True, exist_ok=True)
    return config_path


@pytest.fixture
def ss_config():
    """Shadowsocks 节点配置，无本地覆盖"""
    return ApiConfig(
        api_host="https://panel.example.com",
        api_key="secret-key",
        node_id="7",
        node_type=NodeType.SHADOWSOCKS,
    )


@pytest.fixture
def fake_transport():
    return FakeTransport()
