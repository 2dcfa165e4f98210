from .sink import EventSink
from .state import BridgeState
from .bridge import LiveSessionBridge
from .factory import BridgeFactory

__all__ = ["BridgeFactory", "BridgeState", "EventSink", "LiveSessionBridge"]
