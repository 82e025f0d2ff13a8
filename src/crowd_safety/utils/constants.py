"""
Constants used throughout the crowd safety analyzer
"""

# History bounds
MAX_FRAME_HISTORY = 30  # ~5 seconds at 6 fps

# Density grid
DENSITY_GRID_SIZE = 8  # 8x8 cells
DENSITY_THRESHOLD = 0.15  # Minimum cell density for a surge
SURGE_THRESHOLD = 0.5  # 50% increase over previous frame = surge

# Person tracking
TRACK_TIMEOUT_MS = 3000  # Evict tracks unseen for longer than this
POSITION_WINDOW_MS = 5000  # Positions older than this are pruned
MATCH_DISTANCE = 0.2  # Max normalized center distance for association

# Posture
FALLING_VELOCITY_THRESHOLD = 0.3  # Normalized units per second (downward)
FALLING_WINDOW = 3  # Positions examined per track
LYING_ASPECT_RATIO = 1.5  # width / height above this = lying

# Incident confidences reported to the persistence layer
SURGE_INCIDENT_CONFIDENCE = 0.8
FALLING_INCIDENT_CONFIDENCE = 0.9
LYING_INCIDENT_CONFIDENCE = 0.8

# Incident defaults when the caller supplies no identifiers
DEFAULT_STREAM_SOURCE = "default-camera"
DEFAULT_APPLICATION_ID = "default-app"
DEFAULT_STREAM_ID = "default-stream"

# Environment variables
ENV_DENSITY_THRESHOLD = "CROWD_SAFETY_DENSITY_THRESHOLD"
ENV_SURGE_THRESHOLD = "CROWD_SAFETY_SURGE_THRESHOLD"
ENV_FALLING_VELOCITY = "CROWD_SAFETY_FALLING_VELOCITY"
ENV_LOG_LEVEL = "CROWD_SAFETY_LOG_LEVEL"
