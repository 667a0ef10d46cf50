"""Services for iagon_mcp."""
from .api_client import IagonClient, classify_response, classify_transport_error

__all__ = [
    "IagonClient",
    "classify_response",
    "classify_transport_error",
]
