"""
Per-plant, per-frame growth update.

Combines the plant's precomputed light factor with overlap-weighted soil
sampling to compute energy balance, growth, resource uptake, health and aging.
Writes depletion back into the SoilGrid and appends UsageRecords to the
frame's usage accumulator.

Update order for a living plant:
    1. Overlapping cells (zero-overlap plants only age)
    2. Overlap-weighted nutrient and water factors
    3. Age fraction
    4. Production, maintenance, net energy
    5. Growth delta and size floor
    6. Resource demand split by take-fraction, soil depletion, usage records
    7. Health
    8. Age
    9. Seedling drift and resting height
    10. Cosmetic color
    11. Alive (derived property on Plant)
"""

from typing import Dict, List, NamedTuple, Optional, Tuple

import numpy as np

from .constants import COLOR_LIVE, COLOR_SENESCENT, EDGE_SNAP_TOLERANCE
from .data_types import GrowthConfig, UsageRecord
from .geometry import occupied_cell_indices, cell_overlap_fraction, clamp_to_world
from .plant import Plant
from .rng import random_drift
from .soil import SoilGrid
from .spawning import resting_height


class GrowthOutcome(NamedTuple):
    """Diagnostics from one plant's update"""
    light_factor: float
    nutrient_factor: float
    water_factor: float
    net_energy: float
    growth_delta: float
    demand: float
    reached_soil: bool


def cell_overlaps(plant: Plant, soil: SoilGrid) -> List[Tuple[int, float]]:
    """
    Cells under a plant's footprint with their overlap fractions.

    Candidates from the conservative index range whose overlap is zero, or only
    floating-point residue below EDGE_SNAP_TOLERANCE, are dropped.

    Returns:
        [(cell_index, overlap_fraction), ...] in ascending index order
    """
    center = plant.center
    half = plant.half_extent

    overlaps = []
    for index in occupied_cell_indices(center, half, soil.size, soil.cell_size):
        fraction = cell_overlap_fraction(center, half, index, soil.size, soil.cell_size)
        if fraction > EDGE_SNAP_TOLERANCE:
            overlaps.append((index, fraction))
    return overlaps


def take_fractions(overlaps: List[Tuple[int, float]]) -> List[float]:
    """
    Each cell's share of a plant's resource demand.

    Proportional to the cell's overlap fraction; the shares sum to 1 whenever
    the total overlap is positive. Returns an empty list otherwise.
    """
    total = sum(fraction for _, fraction in overlaps)
    if total <= 0.0:
        return []
    return [fraction / total for _, fraction in overlaps]


def plant_color(age_fraction: float, senescence_threshold: float) -> tuple:
    """
    RGBA color as a pure function of age fraction.

    Steady live color below the threshold; past it, the senescent color with
    alpha fading linearly to 0 as the age fraction reaches 1.
    """
    if age_fraction < senescence_threshold:
        return COLOR_LIVE

    span = 1.0 - senescence_threshold
    fade = (age_fraction - senescence_threshold) / span if span > 0.0 else 1.0
    alpha = int(round((1.0 - min(1.0, max(0.0, fade))) * 255))
    return COLOR_SENESCENT + (alpha,)


def update_plant(
    plant: Plant,
    soil: SoilGrid,
    light_factor: float,
    config: GrowthConfig,
    cell_usage: Dict[int, List[UsageRecord]],
    rng: Optional[np.random.Generator] = None
) -> Optional[GrowthOutcome]:
    """
    Advance one plant by one frame.

    Args:
        plant: Plant to update (mutated in place)
        soil: Soil grid (depleted in place)
        light_factor: Shading factor from the frame-start snapshot
        config: Growth constants
        cell_usage: Frame accumulator {cell_index: [UsageRecord, ...]}
        rng: Generator for seedling drift (None disables drift)

    Returns:
        GrowthOutcome, or None if the plant was already dead
    """
    if not plant.alive:
        return None

    # 1. Overlapping cells
    overlaps = cell_overlaps(plant, soil)
    total_overlap = sum(fraction for _, fraction in overlaps)
    if total_overlap <= 0.0:
        plant.age += config.age_increment
        return GrowthOutcome(light_factor, 0.0, 0.0, 0.0, 0.0, 0.0, reached_soil=False)

    # 2. Resource availability, weighted by overlap
    nutrient_factor = sum(f * soil.nutrient_mean(i) for i, f in overlaps) / total_overlap
    water_factor = sum(f * soil.water(i) for i, f in overlaps) / total_overlap

    # 3. Age fraction (before this frame's aging)
    age_fraction = plant.age_fraction

    # 4. Energy balance
    production = (light_factor * nutrient_factor * water_factor
                  * plant.photosynthetic_efficiency * plant.growth_rate)
    maintenance = (plant.base_maintenance
                   + plant.maintenance_per_size * plant.size
                   + age_fraction * config.age_maintenance_coefficient)
    net_energy = production - maintenance

    # 5. Growth (stunted, never negative, when energy-deficient)
    multiplier = 1.0 if net_energy > 0.0 else config.deficit_growth_penalty
    delta = plant.growth_rate * config.growth_scale * multiplier
    plant.size = max(plant.size + delta, config.min_size)

    # 6. Uptake and depletion
    demand = max(0.0, delta * config.demand_scale)
    cell_area = soil.cell_size * soil.cell_size
    for (index, fraction), share in zip(overlaps, take_fractions(overlaps)):
        amount = demand * share * plant.adsorption_efficiency
        soil.deplete(index, amount * config.depletion_scale)
        cell_usage.setdefault(index, []).append(UsageRecord(plant.plant_id, fraction, amount))
        plant.nutrient_intake += amount
        plant.area_occupied += fraction * cell_area

    # 7. Health
    health = plant.health + net_energy * config.health_energy_coefficient - config.health_decay
    plant.health = min(1.0, max(0.0, health))

    # 8. Aging
    plant.age += config.age_increment

    # 9. Placement
    x, z = plant.position[0], plant.position[2]
    if rng is not None and age_fraction < config.drift_age_limit:
        dx, dz = random_drift(rng, config.drift_max)
        x, z = x + dx, z + dz
    # Clamped every update, drifting or not
    plant.position[0], plant.position[2] = clamp_to_world(x, z, soil.size, soil.cell_size)
    plant.position[1] = resting_height(plant.size, config.height_scale, config.ground_offset)

    # 10. Appearance
    plant.color = plant_color(age_fraction, config.senescence_threshold)

    return GrowthOutcome(
        light_factor=light_factor,
        nutrient_factor=nutrient_factor,
        water_factor=water_factor,
        net_energy=net_energy,
        growth_delta=delta,
        demand=demand,
        reached_soil=True
    )
