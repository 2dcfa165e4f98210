from .state import ClientConnectionState
from .client import VoiceRelayClient, ClientConnector
from .backoff import ReconnectBackoff
from .listener import ClientListener

__all__ = [
    "ClientConnectionState",
    "ClientConnector",
    "ClientListener",
    "ReconnectBackoff",
    "VoiceRelayClient",
]
