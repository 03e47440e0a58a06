"""Internal constants shared across the library."""

DEFAULT_BRIDGE_URL = "http://127.0.0.1:3000"
USER_AGENT = "framesort/bridge-client"

#: Entity names that count as sort markers.
MARKER_ENTITY_NAMES: frozenset[str] = frozenset({"item_frame", "glow_item_frame"})

#: Block names that count as sort containers. Both kinds are equivalent.
CONTAINER_BLOCK_NAMES: frozenset[str] = frozenset({"chest", "trapped_chest"})

#: Entity metadata slots that may hold a frame's displayed item, in lookup order.
#: Newer protocol versions use slot 8, older ones slot 7.
MARKER_ITEM_SLOTS: tuple[int, ...] = (8, 7)

#: How close the character walks to a container before opening it.
CONTAINER_REACH = 1

# ------------------------------------------------------------------
# Configuration bounds  (minimum, maximum, default)
# ------------------------------------------------------------------

SORT_RADIUS_BOUNDS: tuple[int, int, int] = (1, 128, 16)
SORT_INTERVAL_BOUNDS: tuple[int, int, int] = (5, 3600, 30)
SCAN_INTERVAL_BOUNDS: tuple[int, int, int] = (5, 3600, 30)
CHEST_SEARCH_RADIUS_BOUNDS: tuple[int, int, int] = (1, 4, 1)

DEFAULT_PORT = 25565

# ------------------------------------------------------------------
# Bridge error codes
# ------------------------------------------------------------------

NOT_CONNECTED_CODES: frozenset[str] = frozenset({"not_connected"})
NAVIGATION_CODES: frozenset[str] = frozenset({"goal_unreachable", "path_stopped"})
CONTAINER_CODES: frozenset[str] = frozenset({"container_unavailable", "window_closed"})

# ------------------------------------------------------------------
# Environment variables read by SorterConfig.from_env
# ------------------------------------------------------------------

ENV_CONFIG_MAP: dict[str, str] = {
    "MC_HOST": "host",
    "MC_PORT": "port",
    "MC_USERNAME": "username",
    "MC_PASSWORD": "password",
    "MC_VERSION": "version",
    "MC_AUTH": "auth",
    "SORT_RADIUS": "sort_radius",
    "SORT_INTERVAL": "sort_interval",
    "SORT_SCAN_INTERVAL": "scan_interval",
    "CHEST_SEARCH_RADIUS": "chest_search_radius",
    "FRAMESORT_BRIDGE_URL": "bridge_url",
    "FRAMESORT_REQUEST_TIMEOUT": "request_timeout",
}
