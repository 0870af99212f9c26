"""
PMPanel Client - node agent synchronization client for PMPanel control planes.
"""

__version__ = "0.1.0"

from .api_client import APIClient
from .errors import APIError
from .models import ApiConfig, NodeType

__all__ = ["APIClient", "APIError", "ApiConfig", "NodeType", "__version__"]
