import numpy as np
import pytest

from meadow.data_types import InvalidConfigError, SimulationConfig
from meadow.rng import make_generator
from meadow.soil import SoilGrid
from meadow.spawning import spawn_soil


def test_invalid_dimensions_rejected():
    with pytest.raises(InvalidConfigError):
        SoilGrid(size=0)
    with pytest.raises(InvalidConfigError):
        SoilGrid(size=-4)
    with pytest.raises(InvalidConfigError):
        SoilGrid(size=4, cell_size=0.0)


def test_levels_shape_checked():
    with pytest.raises(InvalidConfigError):
        SoilGrid(size=3, levels=np.ones((4, 4)))


def test_cell_at_reads_and_writes_grid():
    soil = SoilGrid(size=4)
    cell = soil.cell_at(2, 3)
    assert cell.index == 3 * 4 + 2
    assert cell.position == (2, 3)

    cell.nitrogen = 0.25
    assert soil.levels[cell.index, 1] == 0.25
    assert soil.cell_at(2, 3).nitrogen == 0.25

    data = soil.cell_at(2, 3).to_dict()
    assert data["index"] == 14
    assert (data["x"], data["z"]) == (2, 3)
    assert data["nitrogen"] == 0.25
    assert data["water"] == 1.0


def test_cell_at_out_of_range():
    soil = SoilGrid(size=4)
    with pytest.raises(IndexError):
        soil.cell_at(4, 0)
    with pytest.raises(IndexError):
        soil.cell(16)


def test_deplete_floors_at_zero():
    soil = SoilGrid(size=2)
    soil.levels[1] = [0.5, 0.001, 0.2, 0.0]
    soil.deplete(1, 0.01)
    assert np.allclose(soil.levels[1], [0.49, 0.0, 0.19, 0.0])
    assert soil.min_level() >= 0.0

    cell = soil.cell(0)
    cell.water = -3.0
    assert cell.water == 0.0


def test_nutrient_mean_excludes_water():
    soil = SoilGrid(size=1)
    soil.levels[0] = [0.1, 0.3, 0.6, 0.9]
    assert np.isclose(soil.nutrient_mean(0), 0.6)
    assert np.isclose(soil.cell(0).nutrient_mean, 0.6)
    assert soil.water(0) == pytest.approx(0.1)


def test_spawned_soil_in_initial_range():
    config = SimulationConfig()
    soil = spawn_soil(config, make_generator(42))
    assert soil.levels.shape == (40 * 40, 4)
    assert soil.levels.min() >= 0.5
    assert soil.levels.max() < 1.0


def test_spawned_soil_is_reproducible():
    config = SimulationConfig()
    a = spawn_soil(config, make_generator(7))
    b = spawn_soil(config, make_generator(7))
    c = spawn_soil(config, make_generator(8))
    assert np.array_equal(a.levels, b.levels)
    assert not np.array_equal(a.levels, c.levels)
