"""framesort - sort a game character's inventory into chests labeled by item frames."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("framesort")
except PackageNotFoundError:
    __version__ = "0+local"
from framesort.cache import TargetCache
from framesort.config import SorterConfig, clamp_number
from framesort.exceptions import (
    ContainerError,
    FrameSortConfigError,
    FrameSortError,
    NavigationError,
    WorldApiError,
    WorldError,
    WorldNotConnectedError,
    WorldTransportError,
)
from framesort.models import (
    Block,
    BlockPos,
    BotState,
    Entity,
    ItemRegistry,
    ItemStack,
    TargetSnapshot,
    Vec3,
    WorldEvent,
    WorldEventType,
)
from framesort.scanner import TargetScanner
from framesort.scheduler import SortScheduler
from framesort.session import SortSession
from framesort.sorter import SortEngine, SortSummary
from framesort.tags import TagIndex
from framesort.world import BridgeWorld, World

__all__ = [
    "__version__",
    "Block",
    "BlockPos",
    "BotState",
    "BridgeWorld",
    "ContainerError",
    "Entity",
    "FrameSortConfigError",
    "FrameSortError",
    "ItemRegistry",
    "ItemStack",
    "NavigationError",
    "SortEngine",
    "SortScheduler",
    "SortSession",
    "SortSummary",
    "SorterConfig",
    "TagIndex",
    "TargetCache",
    "TargetScanner",
    "TargetSnapshot",
    "Vec3",
    "World",
    "WorldApiError",
    "WorldError",
    "WorldEvent",
    "WorldEventType",
    "WorldNotConnectedError",
    "WorldTransportError",
    "clamp_number",
]
