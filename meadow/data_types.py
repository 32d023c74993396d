"""
Data types mirroring the YAML configuration structure.

These dataclasses are populated by loader.py from YAML files, or built
directly in code with the documented defaults from constants.py.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, List, NamedTuple

import numpy as np

from .constants import (
    GRID_SIZE_DEFAULT,
    CELL_SIZE_DEFAULT,
    WORLD_SEED_DEFAULT,
    SOIL_INITIAL_MIN,
    SOIL_INITIAL_MAX,
    PLANT_COUNT_DEFAULT,
    PLANT_INITIAL_SIZE,
    GROWTH_RATE_MIN,
    GROWTH_RATE_MAX,
    MAX_AGE_MIN,
    MAX_AGE_MAX,
    PHOTOSYNTHETIC_EFFICIENCY_DEFAULT,
    BASE_MAINTENANCE_DEFAULT,
    MAINTENANCE_PER_SIZE_DEFAULT,
    ADSORPTION_EFFICIENCY_DEFAULT,
    SHADE_COEFFICIENT,
    DEAD_PLANTS_CAST_SHADE,
    AGE_MAINTENANCE_COEFFICIENT,
    GROWTH_SCALE,
    DEFICIT_GROWTH_PENALTY,
    MIN_PLANT_SIZE,
    DEMAND_SCALE,
    DEPLETION_SCALE,
    HEALTH_ENERGY_COEFFICIENT,
    HEALTH_DECAY,
    AGE_INCREMENT,
    HEIGHT_SCALE,
    GROUND_OFFSET,
    SENESCENCE_THRESHOLD,
    DRIFT_MAX,
    DRIFT_AGE_LIMIT,
)

if TYPE_CHECKING:
    from .plant import Plant
    from .soil import SoilGrid


class InvalidConfigError(ValueError):
    """Raised when configuration values cannot start a simulation"""
    pass


# ============================================================================
# Configuration
# ============================================================================

@dataclass
class GridConfig:
    """Soil grid dimensions"""
    size: int = GRID_SIZE_DEFAULT  # cells per side
    cell_size: float = CELL_SIZE_DEFAULT  # world units


@dataclass
class SoilConfig:
    """Initial soil resource range"""
    initial_min: float = SOIL_INITIAL_MIN
    initial_max: float = SOIL_INITIAL_MAX


@dataclass
class PopulationConfig:
    """Plant population and per-plant physiology drawn at creation"""
    plant_count: int = PLANT_COUNT_DEFAULT
    initial_size: float = PLANT_INITIAL_SIZE
    growth_rate_min: float = GROWTH_RATE_MIN
    growth_rate_max: float = GROWTH_RATE_MAX
    max_age_min: float = MAX_AGE_MIN
    max_age_max: float = MAX_AGE_MAX
    photosynthetic_efficiency: float = PHOTOSYNTHETIC_EFFICIENCY_DEFAULT
    base_maintenance: float = BASE_MAINTENANCE_DEFAULT
    maintenance_per_size: float = MAINTENANCE_PER_SIZE_DEFAULT
    adsorption_efficiency: float = ADSORPTION_EFFICIENCY_DEFAULT


@dataclass
class GrowthConfig:
    """Per-frame growth, uptake, health and light constants"""
    shade_coefficient: float = SHADE_COEFFICIENT
    dead_plants_cast_shade: bool = DEAD_PLANTS_CAST_SHADE
    age_maintenance_coefficient: float = AGE_MAINTENANCE_COEFFICIENT
    growth_scale: float = GROWTH_SCALE
    deficit_growth_penalty: float = DEFICIT_GROWTH_PENALTY
    min_size: float = MIN_PLANT_SIZE
    demand_scale: float = DEMAND_SCALE
    depletion_scale: float = DEPLETION_SCALE
    health_energy_coefficient: float = HEALTH_ENERGY_COEFFICIENT
    health_decay: float = HEALTH_DECAY
    age_increment: float = AGE_INCREMENT
    height_scale: float = HEIGHT_SCALE
    ground_offset: float = GROUND_OFFSET
    senescence_threshold: float = SENESCENCE_THRESHOLD
    drift_max: float = DRIFT_MAX
    drift_age_limit: float = DRIFT_AGE_LIMIT


@dataclass
class SimulationConfig:
    """Complete simulation configuration"""
    seed: int = WORLD_SEED_DEFAULT
    grid: GridConfig = field(default_factory=GridConfig)
    soil: SoilConfig = field(default_factory=SoilConfig)
    population: PopulationConfig = field(default_factory=PopulationConfig)
    growth: GrowthConfig = field(default_factory=GrowthConfig)

    def validate(self):
        """
        Reject configurations that cannot start a simulation.

        Raises:
            InvalidConfigError: On non-positive grid dimensions, negative plant
                count, inverted random ranges or a non-positive age increment
        """
        if self.grid.size <= 0:
            raise InvalidConfigError(f"grid.size must be positive, got {self.grid.size}")
        if self.grid.cell_size <= 0:
            raise InvalidConfigError(f"grid.cell_size must be positive, got {self.grid.cell_size}")
        if self.population.plant_count < 0:
            raise InvalidConfigError(
                f"population.plant_count must be >= 0, got {self.population.plant_count}")

        ranges = [
            ('soil.initial', self.soil.initial_min, self.soil.initial_max),
            ('population.growth_rate', self.population.growth_rate_min, self.population.growth_rate_max),
            ('population.max_age', self.population.max_age_min, self.population.max_age_max),
        ]
        for name, low, high in ranges:
            if low > high:
                raise InvalidConfigError(f"{name}_min ({low}) exceeds {name}_max ({high})")

        if self.soil.initial_min < 0:
            raise InvalidConfigError("soil.initial_min must be >= 0")
        if self.population.max_age_min <= 0:
            raise InvalidConfigError("population.max_age_min must be positive")
        if self.growth.age_increment <= 0:
            raise InvalidConfigError("growth.age_increment must be positive")
        if self.growth.min_size <= 0:
            raise InvalidConfigError("growth.min_size must be positive")

    def to_dict(self) -> dict:
        """Serialize to the nested dict layout used by the YAML files"""
        return {
            'seed': self.seed,
            'grid': vars(self.grid).copy(),
            'soil': vars(self.soil).copy(),
            'population': vars(self.population).copy(),
            'growth': vars(self.growth).copy(),
        }


# ============================================================================
# Per-frame Output
# ============================================================================

class UsageRecord(NamedTuple):
    """One plant's draw on one soil cell during a frame"""
    plant_id: int
    overlap_fraction: float  # intersection area / cell area
    amount_taken: float


@dataclass
class FrameResult:
    """
    Everything the output stage needs for a single completed frame.

    Attributes:
        frame: Frame index (0-based, monotonic)
        plants: Full plant collection after the frame's updates
        light_factors: (N,) shading factors computed from the frame-start snapshot
        cell_usage: {cell_index: [UsageRecord, ...]} for cells touched this frame
        soil: Read access to the soil grid after the frame's depletion
        deaths: Plant ids that died during this frame
    """
    frame: int
    plants: List["Plant"]
    light_factors: np.ndarray
    cell_usage: Dict[int, List[UsageRecord]]
    soil: "SoilGrid"
    deaths: List[int] = field(default_factory=list)

    @property
    def alive_count(self) -> int:
        return sum(1 for p in self.plants if p.alive)
