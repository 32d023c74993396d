"""
Overlap geometry on the soil plane.

This module provides small, focused functions with no simulation state.
Footprints are axis-aligned squares in the X/Z plane described by a 2D
center and a half extent. The soil plane is centered on the origin; cell
(ix, iz) covers [ix*c - W/2, (ix+1)*c - W/2) on X (likewise Z), where c is
the cell size and W = grid_size * c.
"""
from __future__ import annotations

import math
from typing import List, Sequence, Tuple

import numpy as np

from .constants import EDGE_SNAP_TOLERANCE


def axis_aligned_overlap_area(
    center_a: Sequence[float],
    half_a: float,
    center_b: Sequence[float],
    half_b: float,
) -> float:
    """
    Intersection area of two axis-aligned squares.

    Disjoint squares and squares sharing only an edge give 0.0.

    Parameters
    - center_a: (x, z) center of square A
    - half_a: half side length of A
    - center_b: (x, z) center of square B
    - half_b: half side length of B

    Returns
    - non-negative overlap area
    """
    ax, az = float(center_a[0]), float(center_a[1])
    bx, bz = float(center_b[0]), float(center_b[1])

    width = min(ax + half_a, bx + half_b) - max(ax - half_a, bx - half_b)
    depth = min(az + half_a, bz + half_b) - max(az - half_a, bz - half_b)
    if width <= 0.0 or depth <= 0.0:
        return 0.0
    return width * depth


def overlap_fraction(
    center: Sequence[float],
    half: float,
    cell_center: Sequence[float],
    cell_half: float,
) -> float:
    """
    Fraction of a cell covered by a footprint, clamped to [0, 1].

    The clamp absorbs floating-point overshoot at exact alignment.
    """
    cell_area = (2.0 * cell_half) ** 2
    if cell_area <= 0.0:
        return 0.0
    area = axis_aligned_overlap_area(center, half, cell_center, cell_half)
    return min(1.0, max(0.0, area / cell_area))


def to_cell_space(coord: float, grid_size: int, cell_size: float) -> float:
    """
    World coordinate to cell-index space, where cell ix spans [ix, ix + 1].

    Values within EDGE_SNAP_TOLERANCE of a grid line are snapped onto it, so
    edges that coincide in world units also coincide exactly here.
    """
    value = (coord + grid_size * cell_size / 2.0) / cell_size
    nearest = round(value)
    if abs(value - nearest) < EDGE_SNAP_TOLERANCE:
        return float(nearest)
    return value


def _axis_range(center: float, half: float, grid_size: int, cell_size: float) -> Tuple[int, int]:
    """Inclusive [first, last] cell range along one axis, clipped to the grid"""
    low = to_cell_space(center - half, grid_size, cell_size)
    high = to_cell_space(center + half, grid_size, cell_size)
    first = max(0, math.floor(low))
    last = min(grid_size - 1, math.ceil(high) - 1)
    return first, last


def occupied_cell_indices(
    center: Sequence[float],
    half: float,
    grid_size: int,
    cell_size: float,
) -> List[int]:
    """
    Enumerate cells whose bounds may intersect a footprint.

    Conservative bounding-range test, not exact overlap: callers still compute
    the overlap fraction and discard zero-overlap cells. Cells outside
    [0, grid_size) on either axis are dropped silently.

    Returns
    - cell indices (z * grid_size + x) in ascending order
    """
    x_first, x_last = _axis_range(float(center[0]), half, grid_size, cell_size)
    z_first, z_last = _axis_range(float(center[1]), half, grid_size, cell_size)

    indices = []
    for iz in range(z_first, z_last + 1):
        for ix in range(x_first, x_last + 1):
            indices.append(iz * grid_size + ix)
    return indices


def cell_coords(index: int, grid_size: int) -> Tuple[int, int]:
    """Decode a cell index into (ix, iz)"""
    return index % grid_size, index // grid_size


def cell_overlap_fraction(
    center: Sequence[float],
    half: float,
    index: int,
    grid_size: int,
    cell_size: float,
) -> float:
    """
    Fraction of grid cell `index` covered by a footprint, clamped to [0, 1].

    Computed in cell-index space, where the cell's bounds are the exact
    integers ix, ix + 1 and iz, iz + 1 and its area is 1. A footprint edge that
    lies on a grid line therefore gives zero overlap with the neighbouring cell
    for any cell size. Multiply by cell_size ** 2 for the world-space area.
    """
    ix, iz = cell_coords(index, grid_size)
    cx, cz = float(center[0]), float(center[1])

    x_low = to_cell_space(cx - half, grid_size, cell_size)
    x_high = to_cell_space(cx + half, grid_size, cell_size)
    z_low = to_cell_space(cz - half, grid_size, cell_size)
    z_high = to_cell_space(cz + half, grid_size, cell_size)

    width = min(x_high, ix + 1) - max(x_low, ix)
    depth = min(z_high, iz + 1) - max(z_low, iz)
    if width <= 0.0 or depth <= 0.0:
        return 0.0
    return min(1.0, width * depth)


def cell_center(index: int, grid_size: int, cell_size: float) -> np.ndarray:
    """World-space (x, z) center of a cell"""
    ix, iz = cell_coords(index, grid_size)
    offset = grid_size * cell_size / 2.0
    return np.array([(ix + 0.5) * cell_size - offset,
                     (iz + 0.5) * cell_size - offset], dtype=np.float64)


def clamp_to_world(x: float, z: float, grid_size: int, cell_size: float) -> Tuple[float, float]:
    """Clamp an (x, z) point to the soil plane bounds [-W/2, W/2]"""
    half_world = grid_size * cell_size / 2.0
    x = min(max(x, -half_world), half_world)
    z = min(max(z, -half_world), half_world)
    return x, z
