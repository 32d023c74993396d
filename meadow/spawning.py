"""
World spawning system.

Creates the soil grid and the plant population from the simulation
configuration. All randomness is drawn from explicitly passed generators,
so the same seed always produces the same world.
"""

from typing import List

import numpy as np

from .constants import SOIL_RESOURCES
from .data_types import SimulationConfig
from .plant import Plant
from .rng import random_levels, random_in_range, random_grid_position
from .soil import SoilGrid


def spawn_soil(config: SimulationConfig, rng: np.random.Generator) -> SoilGrid:
    """
    Create the soil grid with randomized initial resource levels.

    Every resource of every cell is drawn independently from
    [soil.initial_min, soil.initial_max).

    Args:
        config: Simulation configuration
        rng: Generator dedicated to soil creation

    Returns:
        New SoilGrid
    """
    size = config.grid.size
    cell_count = size * size
    levels = random_levels(
        rng,
        cell_count * len(SOIL_RESOURCES),
        config.soil.initial_min,
        config.soil.initial_max
    ).reshape(cell_count, len(SOIL_RESOURCES))

    return SoilGrid(size=size, cell_size=config.grid.cell_size, levels=levels)


def resting_height(size: float, height_scale: float, ground_offset: float) -> float:
    """Vertical position that keeps a plant's base on the ground plane"""
    return size * height_scale / 2.0 + ground_offset


def spawn_plants(config: SimulationConfig, rng: np.random.Generator) -> List[Plant]:
    """
    Create the initial plant population.

    Plants get sequential ids starting at 0, a random corner-aligned position
    on the soil plane, a growth rate and a lifespan drawn from the configured
    ranges, and the population-wide physiology constants.

    Args:
        config: Simulation configuration
        rng: Generator dedicated to plant creation

    Returns:
        List of plants ordered by id
    """
    pop = config.population
    growth = config.growth
    plants = []

    for plant_id in range(pop.plant_count):
        x, z = random_grid_position(rng, config.grid.size, config.grid.cell_size)
        growth_rate = random_in_range(rng, pop.growth_rate_min, pop.growth_rate_max)
        max_age = random_in_range(rng, pop.max_age_min, pop.max_age_max)
        size = max(pop.initial_size, growth.min_size)
        y = resting_height(size, growth.height_scale, growth.ground_offset)

        plants.append(Plant(
            plant_id=plant_id,
            position=np.array([x, y, z], dtype=np.float64),
            size=size,
            growth_rate=growth_rate,
            max_age=max_age,
            photosynthetic_efficiency=pop.photosynthetic_efficiency,
            base_maintenance=pop.base_maintenance,
            maintenance_per_size=pop.maintenance_per_size,
            adsorption_efficiency=pop.adsorption_efficiency
        ))

    return plants
