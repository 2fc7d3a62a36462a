"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

EARTH_RADIUS_METERS = 6_371_000

DEFAULT_ALLOWED_RADIUS_METERS = 150
MIN_ALLOWED_RADIUS_METERS = 10
MAX_ALLOWED_RADIUS_METERS = 5000

# Conditional writes lost in a row before giving up on a transition.
DEFAULT_SAVE_ATTEMPTS = 3

DEFAULT_LIST_LIMIT = 200
