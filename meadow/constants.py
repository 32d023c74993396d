"""
Central configuration constants for the meadow simulation.

Defines default values, thresholds, and tuning parameters used across
multiple modules. Dataclasses in data_types.py reference these as defaults.
"""

# ============================================================================
# World & Soil Grid
# ============================================================================

GRID_SIZE_DEFAULT = 40        # Cells per side (grid is square)
CELL_SIZE_DEFAULT = 1.0       # World units per cell side
WORLD_SEED_DEFAULT = 1337     # Seed for the world generator
EDGE_SNAP_TOLERANCE = 1e-9   # Footprint edges this close to a grid line (in cells) sit on it

# Initial soil resource levels are drawn uniformly from [min, max)
SOIL_INITIAL_MIN = 0.5
SOIL_INITIAL_MAX = 1.0

# Column order of the soil resource array
SOIL_RESOURCES = ('water', 'nitrogen', 'phosphorus', 'potassium')


# ============================================================================
# Population
# ============================================================================

PLANT_COUNT_DEFAULT = 60
PLANT_INITIAL_SIZE = 1.0

GROWTH_RATE_MIN = 0.02        # Per-plant growth rate drawn from [min, max)
GROWTH_RATE_MAX = 0.03
MAX_AGE_MIN = 80.0            # Per-plant lifespan drawn from [min, max)
MAX_AGE_MAX = 120.0

# Physiology (fixed at creation)
PHOTOSYNTHETIC_EFFICIENCY_DEFAULT = 60.0
BASE_MAINTENANCE_DEFAULT = 0.05
MAINTENANCE_PER_SIZE_DEFAULT = 0.1
ADSORPTION_EFFICIENCY_DEFAULT = 1.0


# ============================================================================
# Light Competition
# ============================================================================

SHADE_COEFFICIENT = 0.5       # Max light loss from a fully overlapping taller canopy
DEAD_PLANTS_CAST_SHADE = True # Retained dead plants keep their footprint


# ============================================================================
# Growth, Uptake & Health
# ============================================================================

AGE_MAINTENANCE_COEFFICIENT = 0.2
GROWTH_SCALE = 0.01
DEFICIT_GROWTH_PENALTY = 0.2  # Growth multiplier when net energy <= 0
MIN_PLANT_SIZE = 0.2          # Size floor, never crossed
DEMAND_SCALE = 0.5            # Resource demand per unit of growth
DEPLETION_SCALE = 0.001       # Soil loss per unit taken
HEALTH_ENERGY_COEFFICIENT = 0.001
HEALTH_DECAY = 0.0005         # Fixed per-frame health loss
AGE_INCREMENT = 0.01          # Age added per frame (frame-count time, not wall clock)


# ============================================================================
# Placement & Appearance
# ============================================================================

HEIGHT_SCALE = 5.0
GROUND_OFFSET = 0.1           # Keeps the canopy base just above the soil plane

SENESCENCE_THRESHOLD = 0.6    # Age fraction where the senescent color starts
COLOR_LIVE = (50, 150, 50, 255)
COLOR_SENESCENT = (139, 115, 55)  # RGB; alpha fades with age

# Seedling drift (random walk while young)
DRIFT_MAX = 0.001             # Max drift per axis per frame (world units)
DRIFT_AGE_LIMIT = 0.5         # Drift stops past this age fraction


# ============================================================================
# Telemetry
# ============================================================================

FRAME_TIME_WINDOW = 100       # Frames in the rolling timing average
ECOLOGY_LOG_INTERVAL = 500    # Print ecology summary every N frames
