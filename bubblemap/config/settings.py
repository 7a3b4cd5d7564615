"""Configuration settings for the wallet bubble layout engine."""

# Tier thresholds (stake in USD)
WHALE_THRESHOLD = 10000  # >= $10k is a whale
LARGE_THRESHOLD = 1000  # $1k - $10k is large, below is small

# Whale radius normalization ceiling (observed max wins if larger)
WHALE_REFERENCE_MAGNITUDE = 50000

# Radius ranges per tier (px), zone layout
ZONE_RADIUS_RANGES = {
    "whale": (55.0, 90.0),
    "large": (30.0, 55.0),
    "small": (16.0, 30.0),
}

# Radius ranges per tier (px), physics view sized for ~400px quadrants
PHYSICS_RADIUS_RANGES = {
    "whale": (30.0, 60.0),
    "large": (16.0, 30.0),
    "small": (8.0, 16.0),
}

# Radial zone bands as fractions of the side's max radius (small innermost)
ZONE_BANDS = {
    "small": (0.0, 0.35),
    "large": (0.35, 0.65),
    "whale": (0.65, 0.95),
}

# Zone layout budgets
CANDIDATE_ATTEMPTS = 150
RELAXATION_ITERATIONS = 100
CIRCLE_PADDING = 2.0  # Gap kept between neighbouring circles (px)
DIVIDER_GUTTER = 10.0  # Gap between a side's center and the middle divider
TARGET_DEVIATION_WEIGHT = 0.05
OVERLAP_TOLERANCE = 0.5  # Overlap (px) treated as resolved
REPULSION_STRENGTH = 0.5
TARGET_PULL_STRENGTH = 0.05

# Physics simulation
FRAME_MS = 1000 / 60
MAX_FRAME_DELTA_MS = 100  # Clamp for tab-switch stalls
DRIFT_STRENGTH = 0.002
VELOCITY_DAMPING = 0.95
BOUNCE_RETENTION = 0.7
COLLISION_VELOCITY_SHARE = 0.4
COLLISION_PASSES = 3  # Separation passes per frame for chained contacts
INITIAL_SPEED = 0.5

# Numerical guard
EPSILON = 1e-6

# Aggregation and selection
MIN_TRANSACTION_AMOUNT = 1000  # Live view ignores trades under $1k
WALLET_DETAIL_TRADE_LIMIT = 20
PROXIMITY_LINK_DISTANCE = 150

# Price history
PRICE_HISTORY_POINTS = 10
PRICE_HISTORY_TTL_SECONDS = 30

# Defaults for offline runs
DEFAULT_SNAPSHOT_PATH = "data/transactions.csv"
DEFAULT_WIDTH = 700
DEFAULT_HEIGHT = 600
