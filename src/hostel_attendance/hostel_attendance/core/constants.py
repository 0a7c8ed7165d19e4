"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

EARTH_RADIUS_METERS = 6371000.0

# Cosine similarity scaled to 0..100; not user-tunable.
FACE_MATCH_THRESHOLD = 50.0

# Client platforms without location access send this instead of coordinates.
NO_GPS_SENTINEL = "web"

DEFAULT_EMBEDDING_TIMEOUT_SECONDS = 10.0
DEFAULT_EMBEDDING_WORKERS = 4
DEFAULT_HISTORY_LIMIT = 100
