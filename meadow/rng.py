"""
Deterministic RNG utilities for the meadow simulation.

Uses SHA256 hashing to derive stable seeds from hierarchical components
(world_seed, component_name, ...). All randomness flows through an explicitly
passed numpy.random.Generator(PCG64); there is no global random state.
"""

import hashlib
from typing import Any, Tuple

import numpy as np


def make_seed(*components: Any) -> int:
    """
    Generate deterministic 64-bit seed from hierarchical components.

    Args:
        *components: Seed components (world_seed, "soil", "plants", etc.)

    Returns:
        64-bit integer seed for numpy RNG

    Example:
        soil_seed = make_seed(world_seed, "soil")
    """
    hash_input = ":".join(str(c) for c in components)
    hash_bytes = hashlib.sha256(hash_input.encode('utf-8')).digest()
    return int.from_bytes(hash_bytes[:8], byteorder='big')


def make_generator(seed: int) -> np.random.Generator:
    """Create a PCG64-backed generator for the given seed"""
    return np.random.Generator(np.random.PCG64(seed))


def random_levels(rng: np.random.Generator, count: int, low: float, high: float) -> np.ndarray:
    """
    Draw `count` resource levels uniformly from [low, high).

    Returns a float64 array; a degenerate range (low == high) yields constants.
    """
    if low == high:
        return np.full(count, float(low), dtype=np.float64)
    return rng.uniform(low, high, size=count)


def random_in_range(rng: np.random.Generator, low: float, high: float) -> float:
    """Draw a single float from [low, high) (exactly `low` if the range is empty)"""
    if low == high:
        return float(low)
    return float(rng.uniform(low, high))


def random_grid_position(rng: np.random.Generator, grid_size: int, cell_size: float) -> Tuple[float, float]:
    """
    Pick a random planting spot on the soil plane.

    Spots sit on cell corners: integer grid offsets in [-grid_size/2, grid_size/2)
    scaled by the cell size, so a unit footprint straddles up to four cells.

    Returns:
        (x, z) world coordinates
    """
    half = grid_size // 2
    ix, iz = rng.integers(0, grid_size, size=2)
    return float((ix - half) * cell_size), float((iz - half) * cell_size)


def random_drift(rng: np.random.Generator, max_step: float) -> Tuple[float, float]:
    """Draw an (dx, dz) drift step uniformly from [-max_step, max_step] per axis"""
    if max_step <= 0.0:
        return 0.0, 0.0
    dx, dz = rng.uniform(-max_step, max_step, size=2)
    return float(dx), float(dz)
