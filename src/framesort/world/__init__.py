"""World interface: the protocol the sorter depends on and its bridge adapter."""

from framesort.world.base import ContainerWindow, World
from framesort.world.bridge import BridgeContainer, BridgeWorld

__all__ = [
    "BridgeContainer",
    "BridgeWorld",
    "ContainerWindow",
    "World",
]
