"""
Tests for canopy light competition.

Covers the shading rule, agreement between the per-pair and vectorized
implementations, and the frame-start snapshot rule.
"""

import copy

import numpy as np

from meadow.data_types import GrowthConfig, SimulationConfig
from meadow.growth import update_plant
from meadow.light import snapshot_plants, compute_light_factors, shading_factor
from meadow.plant import Plant
from meadow.rng import make_generator
from meadow.soil import SoilGrid
from meadow.spawning import spawn_plants


def make_plant(plant_id, x=0.0, z=0.0, size=1.0, y=None, max_age=100.0):
    if y is None:
        y = size * 5.0 / 2.0 + 0.1
    return Plant(
        plant_id=plant_id,
        position=[x, y, z],
        size=size,
        growth_rate=0.025,
        max_age=max_age
    )


def test_lone_plant_gets_full_light():
    plant = make_plant(0)
    assert shading_factor(plant, [plant]) == 1.0
    assert np.allclose(compute_light_factors(snapshot_plants([plant])), [1.0])


def test_taller_coincident_plant_shades_shorter():
    """Identical footprints: only the plant with the lower canopy top is shaded."""
    short = make_plant(0, y=2.6)
    tall = make_plant(1, y=3.0)
    plants = [short, tall]

    short_light = shading_factor(short, plants)
    tall_light = shading_factor(tall, plants)

    assert short_light < 1.0
    assert np.isclose(short_light, 0.5)  # full overlap * 0.5
    assert tall_light == 1.0

    factors = compute_light_factors(snapshot_plants(plants))
    assert np.allclose(factors, [short_light, tall_light])


def test_equal_canopy_tops_do_not_shade():
    a = make_plant(0)
    b = make_plant(1)
    factors = compute_light_factors(snapshot_plants([a, b]))
    assert np.allclose(factors, [1.0, 1.0])


def test_partial_overlap_scales_with_own_footprint():
    # Small plant half-covered by a big tall neighbor
    small = make_plant(0, x=0.0, size=1.0)
    big = make_plant(1, x=1.0, size=2.0)
    # Big covers x in [0, 2]; small covers [-0.5, 0.5] -> overlap 0.5 of small's area
    light = shading_factor(small, [small, big])
    assert np.isclose(light, 1.0 - 0.5 * 0.5)


def test_shared_edge_does_not_shade():
    a = make_plant(0, x=0.0, size=1.0)
    b = make_plant(1, x=1.0, size=1.0, y=10.0)
    assert shading_factor(a, [a, b]) == 1.0


def test_multiple_shaders_multiply():
    low = make_plant(0, size=1.0)
    mid = make_plant(1, size=1.0, y=3.0)
    high = make_plant(2, size=1.0, y=4.0)
    plants = [low, mid, high]
    factors = compute_light_factors(snapshot_plants(plants), shade_coefficient=0.5)
    assert np.allclose(factors, [0.25, 0.5, 1.0])


def test_dead_plants_can_be_excluded():
    low = make_plant(0)
    dead_tall = make_plant(1, y=9.0)
    dead_tall.health = 0.0
    plants = [low, dead_tall]

    with_dead = compute_light_factors(snapshot_plants(plants), include_dead=True)
    without_dead = compute_light_factors(snapshot_plants(plants), include_dead=False)
    assert with_dead[0] < 1.0
    assert without_dead[0] == 1.0
    assert shading_factor(low, plants, include_dead=False) == 1.0


def test_vectorized_matches_per_pair_reference():
    config = SimulationConfig()
    config.population.plant_count = 80
    config.grid.size = 12
    plants = spawn_plants(config, make_generator(123))

    rng = make_generator(5)
    for plant in plants:
        plant.size = float(rng.uniform(0.3, 3.0))
        plant.position[1] = plant.size * 2.5 + 0.1

    factors = compute_light_factors(snapshot_plants(plants))
    reference = np.array([shading_factor(p, plants) for p in plants])

    assert np.allclose(factors, reference)
    assert np.all((factors >= 0.0) & (factors <= 1.0))
    assert np.any(factors < 1.0)


def test_snapshot_is_independent_of_later_growth():
    plants = [make_plant(0, y=2.6), make_plant(1, y=3.0)]
    snapshot = snapshot_plants(plants)
    before = compute_light_factors(snapshot)

    plants[0].size = 5.0
    plants[0].position[1] = 50.0
    plants[1].position[0] = 30.0

    assert np.allclose(compute_light_factors(snapshot), before)


def test_light_factors_do_not_depend_on_growth_order():
    """Light from a frame-start snapshot gives the same frame result in any growth order."""
    plants = [
        make_plant(0, x=-4.0, z=-4.0, y=2.6),
        make_plant(1, x=-4.0, z=-4.0, y=3.0),
        make_plant(2, x=4.0, z=4.0, size=1.5),
        make_plant(3, x=4.5, z=4.0, size=1.0),
        make_plant(4, x=0.0, z=4.0),
    ]
    config = GrowthConfig(drift_max=0.0)
    factors = compute_light_factors(snapshot_plants(plants))

    def run(order):
        grown = copy.deepcopy(plants)
        soil = SoilGrid(size=12, cell_size=1.0)
        usage = {}
        outcomes = {}
        for i in order:
            outcomes[i] = update_plant(grown[i], soil, float(factors[i]), config, usage)
        return grown, soil, outcomes

    forward, soil_a, out_a = run([0, 1, 2, 3, 4])
    backward, soil_b, out_b = run([4, 3, 2, 1, 0])

    # Every plant saw the same light whatever the order
    for i in range(len(plants)):
        assert out_a[i].light_factor == out_b[i].light_factor == float(factors[i])

    # Shared cells only shift soil reads by the tiny depletion of a neighbor
    for a, b in zip(forward, backward):
        assert np.isclose(a.size, b.size)
        assert np.isclose(a.health, b.health)
        assert np.allclose(a.position, b.position)
    assert np.allclose(soil_a.levels, soil_b.levels)

    # Growing after the fact leaves the frame's factors untouched
    assert np.allclose(factors, compute_light_factors(snapshot_plants(plants)))
    assert factors[0] < 1.0 and factors[1] == 1.0


def test_empty_population():
    assert compute_light_factors(snapshot_plants([])).shape == (0,)
