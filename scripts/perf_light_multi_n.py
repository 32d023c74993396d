"""
Multi-N performance check for canopy light computation.

Times compute_light_factors() at 60, 250, 500 and 1000 plants and reports
median/p90, alongside the per-pair reference implementation at small N.
"""

# Pin threading for stable measurement
import os
os.environ.update({
    'OPENBLAS_NUM_THREADS': '1',
    'MKL_NUM_THREADS': '1',
    'NUMEXPR_NUM_THREADS': '1',
    'OMP_NUM_THREADS': '1'
})

import gc
import sys
import time
from pathlib import Path

import numpy as np

sys.path.insert(0, str(Path(__file__).parent.parent))

from meadow.data_types import SimulationConfig
from meadow.light import snapshot_plants, compute_light_factors, shading_factor
from meadow.rng import make_generator
from meadow.spawning import spawn_plants


def run_light_perf_test(plant_count: int, runs: int = 7) -> dict:
    """
    Time light factor computation for a random population.

    Args:
        plant_count: Number of plants
        runs: Number of timed runs (default 7 for stable median)

    Returns:
        Dict with p50, p90, min, max and the number of shaded plants
    """
    config = SimulationConfig()
    config.population.plant_count = plant_count
    plants = spawn_plants(config, make_generator(42))

    # Vary sizes so canopy tops differ
    rng = make_generator(7)
    for plant in plants:
        plant.size = float(rng.uniform(0.5, 3.0))
        plant.position[1] = plant.size * config.growth.height_scale / 2.0 + config.growth.ground_offset

    snapshot = snapshot_plants(plants)
    factors = compute_light_factors(snapshot)  # Warmup

    gc.collect()
    gc.disable()
    times_ns = []
    try:
        for _ in range(runs):
            start = time.perf_counter_ns()
            compute_light_factors(snapshot)
            times_ns.append(time.perf_counter_ns() - start)
    finally:
        gc.enable()

    times_ms = np.array(times_ns) / 1_000_000
    return {
        'plant_count': plant_count,
        'runs': runs,
        'p50_ms': np.percentile(times_ms, 50),
        'p90_ms': np.percentile(times_ms, 90),
        'min_ms': np.min(times_ms),
        'max_ms': np.max(times_ms),
        'shaded': int(np.sum(factors < 1.0)),
        'plants': plants,
        'factors': factors,
    }


def main():
    """Run multi-N light performance validation."""
    print("=" * 80)
    print("Canopy Light Multi-N Performance")
    print("=" * 80)
    print()

    results = []
    for plant_count in [60, 250, 500, 1000]:
        print(f"[N = {plant_count}]")
        result = run_light_perf_test(plant_count)

        print(f"  p50: {result['p50_ms']:.3f}ms")
        print(f"  p90: {result['p90_ms']:.3f}ms")
        print(f"  min: {result['min_ms']:.3f}ms, max: {result['max_ms']:.3f}ms")
        print(f"  Shaded plants: {result['shaded']}")

        # Cross-check against the per-pair reference at small N
        if plant_count <= 250:
            plants = result['plants']
            reference = np.array([shading_factor(p, plants) for p in plants])
            if np.allclose(reference, result['factors']):
                print("  PASS: vectorized matches per-pair reference")
            else:
                print("  WARNING: vectorized result differs from per-pair reference!")
        else:
            print("  (reference check skipped)")

        results.append(result)
        print()

    print("=" * 80)
    print("| Plants | p50 (ms) | p90 (ms) | Shaded |")
    print("|--------|----------|----------|--------|")
    for r in results:
        print(f"| {r['plant_count']:6d} | {r['p50_ms']:8.3f} | {r['p90_ms']:8.3f} | {r['shaded']:6d} |")
    print("=" * 80)


if __name__ == '__main__':
    main()
