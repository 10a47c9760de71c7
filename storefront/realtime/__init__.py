"""
==============================================================================
Real-time Package
==============================================================================

Fan-out of catalog events to connected browser clients.

Modules:
--------
- hub: FanoutHub subscriber registry and broadcast
- websocket: /ws endpoint relaying client events through the hub

==============================================================================
"""

from .hub import FanoutHub, Subscriber

__all__ = ["FanoutHub", "Subscriber"]
