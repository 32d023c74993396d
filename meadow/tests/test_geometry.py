import numpy as np

from meadow.geometry import (
    axis_aligned_overlap_area,
    occupied_cell_indices,
    overlap_fraction,
    cell_overlap_fraction,
    to_cell_space,
    cell_center,
    cell_coords,
    clamp_to_world,
)


def test_overlap_area_partial():
    # Unit squares offset by half a side on both axes
    area = axis_aligned_overlap_area((0.0, 0.0), 0.5, (0.5, 0.5), 0.5)
    assert np.isclose(area, 0.25)


def test_overlap_area_contained():
    area = axis_aligned_overlap_area((0.0, 0.0), 2.0, (0.5, -0.5), 0.5)
    assert np.isclose(area, 1.0)


def test_overlap_area_disjoint_and_shared_edge():
    assert axis_aligned_overlap_area((0.0, 0.0), 0.5, (3.0, 0.0), 0.5) == 0.0
    # Coincident edges give zero area
    assert axis_aligned_overlap_area((0.0, 0.0), 0.5, (1.0, 0.0), 0.5) == 0.0
    assert axis_aligned_overlap_area((0.0, 0.0), 0.5, (1.0, 1.0), 0.5) == 0.0


def test_single_cell_footprint_occupies_exactly_that_cell():
    """Unit footprint centered on a unit cell touches only that cell."""
    grid_size, cell_size = 40, 1.0
    index = 7 * grid_size + 12
    center = cell_center(index, grid_size, cell_size)

    indices = occupied_cell_indices(center, 0.5, grid_size, cell_size)
    assert indices == [index]

    fraction = overlap_fraction(center, 0.5, center, cell_size / 2.0)
    assert fraction == 1.0


def test_exact_cell_footprint_for_non_unit_cell_sizes():
    """A footprint covering exactly one cell touches only that cell at any cell size."""
    grid_size = 40
    for cell_size in (0.1, 0.25, 0.3, 0.7, 2.5):
        for index in (0, 41, 185, 799, grid_size * grid_size - 1):
            center = cell_center(index, grid_size, cell_size)
            half = cell_size / 2.0

            assert occupied_cell_indices(center, half, grid_size, cell_size) == [index]
            assert cell_overlap_fraction(center, half, index, grid_size, cell_size) == 1.0
            for neighbour in (index - 1, index + 1, index - grid_size, index + grid_size):
                if 0 <= neighbour < grid_size * grid_size:
                    assert cell_overlap_fraction(center, half, neighbour, grid_size, cell_size) == 0.0


def test_cell_overlap_fraction_partial_cover():
    # World spans [-1, 1) on a 4x4 grid of 0.5 cells; footprint straddles the center corner
    for index in (5, 6, 9, 10):
        assert np.isclose(cell_overlap_fraction((0.0, 0.0), 0.25, index, 4, 0.5), 0.25)
    assert cell_overlap_fraction((0.0, 0.0), 0.25, 0, 4, 0.5) == 0.0


def test_to_cell_space_snaps_grid_lines():
    assert to_cell_space(-2.0, 40, 0.1) == 0.0
    assert to_cell_space(-1.9, 40, 0.1) == 1.0
    assert np.isclose(to_cell_space(-1.95, 40, 0.1), 0.5)


def test_corner_footprint_touches_four_cells():
    # Plant at the origin of an even grid sits on a cell corner
    indices = occupied_cell_indices((0.0, 0.0), 0.5, 4, 1.0)
    assert indices == [5, 6, 9, 10]
    for index in indices:
        f = overlap_fraction((0.0, 0.0), 0.5, cell_center(index, 4, 1.0), 0.5)
        assert np.isclose(f, 0.25)


def test_indices_are_clipped_at_grid_edges():
    # World spans [-2, 2); footprint hangs off the low corner
    indices = occupied_cell_indices((-2.0, -2.0), 0.5, 4, 1.0)
    assert indices == [0]


def test_fully_off_grid_footprint_is_empty():
    assert occupied_cell_indices((50.0, 50.0), 0.5, 4, 1.0) == []
    assert occupied_cell_indices((-50.0, 0.0), 0.5, 4, 1.0) == []


def test_index_encoding_is_z_major():
    grid_size = 5
    index = 3 * grid_size + 1
    assert cell_coords(index, grid_size) == (1, 3)
    center = cell_center(index, grid_size, 2.0)
    # World spans [-5, 5); cell x=1 covers [-3, -1), z=3 covers [1, 3)
    assert np.allclose(center, [-2.0, 2.0])


def test_overlap_fraction_is_clamped():
    # Footprint much larger than the cell still reports 1.0
    f = overlap_fraction((0.0, 0.0), 10.0, (0.25, 0.25), 0.5)
    assert f == 1.0
    assert overlap_fraction((0.0, 0.0), 0.5, (5.0, 5.0), 0.5) == 0.0


def test_non_unit_cell_size():
    # 4x4 grid of 0.5 cells spans [-1, 1); a unit footprint at the origin covers 4 cells fully
    indices = occupied_cell_indices((0.0, 0.0), 0.5, 4, 0.5)
    assert indices == [5, 6, 9, 10]
    for index in indices:
        f = overlap_fraction((0.0, 0.0), 0.5, cell_center(index, 4, 0.5), 0.25)
        assert np.isclose(f, 1.0)


def test_clamp_to_world():
    assert clamp_to_world(25.0, -30.0, 40, 1.0) == (20.0, -20.0)
    assert clamp_to_world(1.5, -2.5, 40, 1.0) == (1.5, -2.5)
