"""
Soil grid representation.

The grid stores its four depletable resources (water, nitrogen, phosphorus,
potassium) as a single (N*N, 4) float64 array, one row per cell, indexed
z * size + x. SoilCell is a lightweight view onto one row.
"""

from typing import Optional, Tuple

import numpy as np

from .constants import SOIL_RESOURCES, GRID_SIZE_DEFAULT, CELL_SIZE_DEFAULT
from .data_types import InvalidConfigError

WATER, NITROGEN, PHOSPHORUS, POTASSIUM = range(len(SOIL_RESOURCES))


class SoilCell:
    """
    View into one soil cell's resource levels.

    Reads and writes go straight to the owning grid's array, so a cell obtained
    before a frame reflects depletion applied during it. Writes are floored at 0.
    """

    __slots__ = ('_levels', 'index', 'position')

    def __init__(self, levels: np.ndarray, index: int, position: Tuple[int, int]):
        self._levels = levels
        self.index = index
        self.position = position  # (x, z) grid coordinates

    def _get(self, column: int) -> float:
        return float(self._levels[self.index, column])

    def _set(self, column: int, value: float):
        self._levels[self.index, column] = max(0.0, float(value))

    water = property(lambda self: self._get(WATER), lambda self, v: self._set(WATER, v))
    nitrogen = property(lambda self: self._get(NITROGEN), lambda self, v: self._set(NITROGEN, v))
    phosphorus = property(lambda self: self._get(PHOSPHORUS), lambda self, v: self._set(PHOSPHORUS, v))
    potassium = property(lambda self: self._get(POTASSIUM), lambda self, v: self._set(POTASSIUM, v))

    @property
    def nutrient_mean(self) -> float:
        """(nitrogen + phosphorus + potassium) / 3"""
        return float(self._levels[self.index, NITROGEN:POTASSIUM + 1].mean())

    def to_dict(self) -> dict:
        return {
            'index': self.index,
            'x': self.position[0],
            'z': self.position[1],
            **{name: self._get(col) for col, name in enumerate(SOIL_RESOURCES)},
        }

    def __repr__(self):
        return (f"SoilCell(position={self.position}, water={self.water:.4f}, "
                f"nitrogen={self.nitrogen:.4f}, phosphorus={self.phosphorus:.4f}, "
                f"potassium={self.potassium:.4f})")


class SoilGrid:
    """
    Fixed-size square grid of soil cells.

    Cells are created once and never destroyed; resources only ever decrease
    and are clamped at zero.
    """

    def __init__(
        self,
        size: int = GRID_SIZE_DEFAULT,
        cell_size: float = CELL_SIZE_DEFAULT,
        levels: Optional[np.ndarray] = None
    ):
        """
        Args:
            size: Cells per side
            cell_size: Cell side length in world units
            levels: Optional (size*size, 4) initial resource levels (default all 1.0)

        Raises:
            InvalidConfigError: If size or cell_size is not positive, or levels
                has the wrong shape
        """
        if size <= 0:
            raise InvalidConfigError(f"Soil grid size must be positive, got {size}")
        if cell_size <= 0:
            raise InvalidConfigError(f"Soil cell size must be positive, got {cell_size}")

        self.size = int(size)
        self.cell_size = float(cell_size)

        shape = (self.size * self.size, len(SOIL_RESOURCES))
        if levels is None:
            self.levels = np.ones(shape, dtype=np.float64)
        else:
            levels = np.asarray(levels, dtype=np.float64)
            if levels.shape != shape:
                raise InvalidConfigError(f"Soil levels must have shape {shape}, got {levels.shape}")
            self.levels = np.maximum(levels, 0.0)

    def __len__(self) -> int:
        return self.size * self.size

    def index_of(self, x: int, z: int) -> int:
        """Encode grid coordinates as a cell index"""
        if not (0 <= x < self.size and 0 <= z < self.size):
            raise IndexError(f"Cell ({x}, {z}) outside {self.size}x{self.size} grid")
        return z * self.size + x

    def cell_at(self, x: int, z: int) -> SoilCell:
        """Return the cell at grid coordinates (x, z)"""
        return SoilCell(self.levels, self.index_of(x, z), (x, z))

    def cell(self, index: int) -> SoilCell:
        """Return the cell with the given index"""
        if not (0 <= index < len(self)):
            raise IndexError(f"Cell index {index} outside grid of {len(self)} cells")
        return SoilCell(self.levels, index, (index % self.size, index // self.size))

    def water(self, index: int) -> float:
        return float(self.levels[index, WATER])

    def nutrient_mean(self, index: int) -> float:
        return float(self.levels[index, NITROGEN:POTASSIUM + 1].mean())

    def deplete(self, index: int, amount: float):
        """Subtract `amount` from all four resources of a cell, floored at 0"""
        row = self.levels[index]
        np.maximum(row - amount, 0.0, out=row)

    def mean_levels(self) -> dict:
        """Grid-wide mean of each resource"""
        means = self.levels.mean(axis=0)
        return {name: float(means[col]) for col, name in enumerate(SOIL_RESOURCES)}

    def min_level(self) -> float:
        """Smallest resource value anywhere on the grid"""
        return float(self.levels.min())
