"""
Plant runtime representation.

Plants are created once at initialization and are never removed: a dead plant
stays in the population with alive == False and keeps its id for the run.
"""

import numpy as np
from dataclasses import dataclass

from .constants import (
    COLOR_LIVE,
    PHOTOSYNTHETIC_EFFICIENCY_DEFAULT,
    BASE_MAINTENANCE_DEFAULT,
    MAINTENANCE_PER_SIZE_DEFAULT,
    ADSORPTION_EFFICIENCY_DEFAULT,
)


@dataclass
class Plant:
    """
    Runtime plant in the simulation.

    Attributes:
        plant_id: Unique integer id (stable for the plant's lifetime)
        position: 3D position [x, y, z]; x/z on the soil plane, y derived from size
        size: Footprint side length, also the height proxy
        growth_rate: Fixed growth multiplier drawn at creation
        max_age: Lifespan drawn at creation
        health: Vitality in [0, 1]
        age: Accumulated in fixed per-frame increments
        color: RGBA tuple, cosmetic only
        photosynthetic_efficiency: Energy produced per unit of light/soil
        base_maintenance: Fixed per-frame energy cost
        maintenance_per_size: Energy cost per unit size
        adsorption_efficiency: Fraction of resource demand actually taken
        nutrient_intake: Resources taken this frame (reset every frame)
        area_occupied: Soil area covered this frame (reset every frame)
    """
    plant_id: int
    position: np.ndarray  # [x, y, z] float64
    size: float
    growth_rate: float
    max_age: float
    health: float = 1.0
    age: float = 0.0
    color: tuple = COLOR_LIVE
    photosynthetic_efficiency: float = PHOTOSYNTHETIC_EFFICIENCY_DEFAULT
    base_maintenance: float = BASE_MAINTENANCE_DEFAULT
    maintenance_per_size: float = MAINTENANCE_PER_SIZE_DEFAULT
    adsorption_efficiency: float = ADSORPTION_EFFICIENCY_DEFAULT
    nutrient_intake: float = 0.0
    area_occupied: float = 0.0

    def __post_init__(self):
        """Ensure position is a float64 array"""
        if not isinstance(self.position, np.ndarray):
            self.position = np.array(self.position, dtype=np.float64)
        else:
            self.position = self.position.astype(np.float64, copy=False)

    @property
    def alive(self) -> bool:
        """Derived from state: health > 0 and age < max_age"""
        return self.health > 0.0 and self.age < self.max_age

    @property
    def center(self) -> np.ndarray:
        """Footprint center (x, z) on the soil plane"""
        return self.position[[0, 2]]

    @property
    def half_extent(self) -> float:
        return self.size / 2.0

    @property
    def footprint_area(self) -> float:
        return self.size * self.size

    @property
    def canopy_top(self) -> float:
        """Upper bound of the plant's vertical extent"""
        return float(self.position[1]) + self.size / 2.0

    @property
    def age_fraction(self) -> float:
        return self.age / self.max_age

    def reset_frame_totals(self):
        """Clear per-frame reporting totals"""
        self.nutrient_intake = 0.0
        self.area_occupied = 0.0

    def to_dict(self) -> dict:
        """
        Serialize plant to JSON-compatible dict.

        Returns:
            Dict with all plant fields plus the derived alive flag
        """
        return {
            'plant_id': self.plant_id,
            'position': self.position.tolist(),
            'size': self.size,
            'growth_rate': self.growth_rate,
            'max_age': self.max_age,
            'health': self.health,
            'age': self.age,
            'alive': self.alive,
            'color': list(self.color),
            'photosynthetic_efficiency': self.photosynthetic_efficiency,
            'base_maintenance': self.base_maintenance,
            'maintenance_per_size': self.maintenance_per_size,
            'adsorption_efficiency': self.adsorption_efficiency,
            'nutrient_intake': self.nutrient_intake,
            'area_occupied': self.area_occupied,
        }

