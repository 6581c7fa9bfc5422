"""
Shared defaults for spring construction and settling.
"""

# Distance below which a spring is considered at rest
DEFAULT_EPSILON = 0.001

# Perceptual duration of the preset springs, in seconds
DEFAULT_DURATION = 0.5

# Base bounce of each named preset
SMOOTH_BOUNCE = 0.0
SNAPPY_BOUNCE = 0.15
BOUNCY_BOUNCE = 0.3

# Settling search for springs without a closed-form settling time
SETTLING_SEARCH_STEP = 0.1
SETTLING_SEARCH_MAX_STEPS = 1024
SETTLING_CONFIRMATION_WINDOW = 1.0

# Bounds applied by the settling-duration constructor
MIN_SETTLING_DURATION = 0.01
MAX_SETTLING_DURATION = 10.0
