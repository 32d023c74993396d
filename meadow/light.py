"""
Canopy light competition.

A plant loses light to every other plant whose footprint overlaps its own and
whose canopy top is strictly higher. Each such neighbor multiplies the plant's
light factor by (1 - overlap_fraction * shade_coefficient), where
overlap_fraction is the overlap area over the shaded plant's footprint area.

Light for a frame is always computed from a PlantSnapshot taken at frame
start, so the result cannot depend on the order in which plants grow.
"""

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from .constants import SHADE_COEFFICIENT
from .geometry import axis_aligned_overlap_area
from .plant import Plant


@dataclass(frozen=True)
class PlantSnapshot:
    """
    Frozen copy of the plant geometry needed for light computation.

    Attributes:
        plant_ids: (N,) plant ids in population order
        centers: (N, 2) footprint centers (x, z)
        half_extents: (N,) footprint half side lengths
        canopy_tops: (N,) canopy top heights
        alive: (N,) alive mask at snapshot time
    """
    plant_ids: np.ndarray
    centers: np.ndarray
    half_extents: np.ndarray
    canopy_tops: np.ndarray
    alive: np.ndarray

    def __len__(self) -> int:
        return len(self.plant_ids)


def snapshot_plants(plants: Sequence[Plant]) -> PlantSnapshot:
    """
    Copy the geometry of all plants into a PlantSnapshot.

    The arrays are independent of the Plant objects: growing a plant after the
    snapshot is taken does not change it.
    """
    N = len(plants)
    if N == 0:
        return PlantSnapshot(
            plant_ids=np.empty(0, dtype=np.int64),
            centers=np.empty((0, 2), dtype=np.float64),
            half_extents=np.empty(0, dtype=np.float64),
            canopy_tops=np.empty(0, dtype=np.float64),
            alive=np.empty(0, dtype=bool)
        )

    return PlantSnapshot(
        plant_ids=np.array([p.plant_id for p in plants], dtype=np.int64),
        centers=np.array([p.center for p in plants], dtype=np.float64),
        half_extents=np.array([p.half_extent for p in plants], dtype=np.float64),
        canopy_tops=np.array([p.canopy_top for p in plants], dtype=np.float64),
        alive=np.array([p.alive for p in plants], dtype=bool)
    )


def shading_factor(
    plant: Plant,
    all_plants: Sequence[Plant],
    shade_coefficient: float = SHADE_COEFFICIENT,
    include_dead: bool = True
) -> float:
    """
    Light factor in [0, 1] for a single plant.

    Reference (per-pair) implementation of the shading rule. The simulation
    uses compute_light_factors() on a snapshot; both must agree.

    Args:
        plant: Plant receiving light
        all_plants: Whole population (the plant itself is skipped by id)
        shade_coefficient: Light loss for a fully overlapping taller canopy
        include_dead: Whether dead plants still cast shade

    Returns:
        Light factor, 1.0 when unshaded
    """
    own_area = plant.footprint_area
    if own_area <= 0.0:
        return 1.0

    light = 1.0
    own_top = plant.canopy_top
    for other in all_plants:
        if other.plant_id == plant.plant_id:
            continue
        if not include_dead and not other.alive:
            continue
        if other.canopy_top <= own_top:
            continue

        area = axis_aligned_overlap_area(plant.center, plant.half_extent,
                                         other.center, other.half_extent)
        if area > 0.0:
            light *= 1.0 - (area / own_area) * shade_coefficient

    return min(1.0, max(0.0, light))


def compute_light_factors(
    snapshot: PlantSnapshot,
    shade_coefficient: float = SHADE_COEFFICIENT,
    include_dead: bool = True
) -> np.ndarray:
    """
    Light factors for every plant in a snapshot.

    Vectorized over all pairs using broadcasting: O(N^2) memory and time,
    exact pairwise overlap.

    Args:
        snapshot: Frame-start plant geometry
        shade_coefficient: Light loss for a fully overlapping taller canopy
        include_dead: Whether dead plants still cast shade

    Returns:
        (N,) light factors aligned with snapshot.plant_ids
    """
    N = len(snapshot)
    if N == 0:
        return np.empty(0, dtype=np.float64)

    x = snapshot.centers[:, 0]
    z = snapshot.centers[:, 1]
    h = snapshot.half_extents

    # (N, N): row = shaded plant, column = potential shader
    width = (np.minimum(x[:, np.newaxis] + h[:, np.newaxis], x[np.newaxis, :] + h[np.newaxis, :])
             - np.maximum(x[:, np.newaxis] - h[:, np.newaxis], x[np.newaxis, :] - h[np.newaxis, :]))
    depth = (np.minimum(z[:, np.newaxis] + h[:, np.newaxis], z[np.newaxis, :] + h[np.newaxis, :])
             - np.maximum(z[:, np.newaxis] - h[:, np.newaxis], z[np.newaxis, :] - h[np.newaxis, :]))
    area = np.clip(width, 0.0, None) * np.clip(depth, 0.0, None)

    own_area = (2.0 * h) ** 2
    with np.errstate(divide='ignore', invalid='ignore'):
        fraction = np.where(own_area[:, np.newaxis] > 0.0, area / own_area[:, np.newaxis], 0.0)

    taller = snapshot.canopy_tops[np.newaxis, :] > snapshot.canopy_tops[:, np.newaxis]
    mask = (area > 0.0) & taller
    np.fill_diagonal(mask, False)
    if not include_dead:
        mask &= snapshot.alive[np.newaxis, :]

    multipliers = np.where(mask, 1.0 - fraction * shade_coefficient, 1.0)
    return np.clip(np.prod(multipliers, axis=1), 0.0, 1.0)
