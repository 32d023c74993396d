"""
Meadow simulation kernel.

Main simulation class that owns the soil grid and the plant population and
advances them one frame at a time. Each frame runs in two phases:

    Phase A (read):  snapshot plant geometry, compute all light factors
    Phase B (write): grow every plant in stable id order against the soil grid

The frame's usage records are then handed to the registered sinks and
dropped. Execution is single-threaded and deterministic for a given seed.
"""

import os
import time
from collections import defaultdict
from typing import Dict, List, Optional, Sequence

import numpy as np

from .constants import FRAME_TIME_WINDOW, ECOLOGY_LOG_INTERVAL
from .data_types import SimulationConfig, FrameResult, UsageRecord
from .growth import update_plant
from .light import snapshot_plants, compute_light_factors
from .plant import Plant
from .rng import make_seed, make_generator
from .soil import SoilGrid
from .spawning import spawn_soil, spawn_plants


class MeadowSimulation:
    """
    Main simulation class for the plant-soil meadow.

    Owns the soil grid and plant population exclusively; nothing else may
    mutate them while a frame is in progress.
    """

    def __init__(
        self,
        config: Optional[SimulationConfig] = None,
        sinks: Optional[Sequence] = None,
        soil: Optional[SoilGrid] = None,
        plants: Optional[List[Plant]] = None,
        verbose: bool = True
    ):
        """
        Initialize simulation from configuration.

        Args:
            config: Simulation configuration (defaults if None)
            sinks: Output collaborators; each gets consume(FrameResult) per frame
            soil: Optional prebuilt soil grid (for testing); must match config.grid
            plants: Optional prebuilt population (for testing)
            verbose: Print initialization messages

        Raises:
            InvalidConfigError: If the configuration is invalid
        """
        self.config = config if config is not None else SimulationConfig()
        self.config.validate()
        self.verbose = verbose

        seed = self.config.seed
        self._drift_rng = make_generator(make_seed(seed, "drift"))

        self.soil: SoilGrid = soil if soil is not None else \
            spawn_soil(self.config, make_generator(make_seed(seed, "soil")))
        if plants is None:
            plants = spawn_plants(self.config, make_generator(make_seed(seed, "plants")))
        # Growth runs in stable id order; the caller's list is left as given
        self.plants: List[Plant] = sorted(plants, key=lambda p: p.plant_id)

        grid = self.config.grid
        if soil is not None and (soil.size != grid.size or soil.cell_size != grid.cell_size):
            print(f"[WARN] Soil grid {soil.size}x{soil.size} (cell {soil.cell_size}) does not match "
                  f"config {grid.size}x{grid.size} (cell {grid.cell_size}), using soil grid")

        self.sinks = list(sinks) if sinks else []
        self.frame_count: int = 0

        # Performance metrics
        self._frame_times: List[float] = []
        self._frame_time_sum: float = 0.0
        self._frame_time_window: int = FRAME_TIME_WINDOW
        self._light_times: List[float] = []
        self._growth_times: List[float] = []

        # Ecology telemetry
        self._ecology_telemetry: Dict = {
            'total_deaths': 0,
            'deaths_this_frame': 0,
            'cells_touched': 0,
        }

        if self.verbose:
            print(f"[OK] Simulation initialized: {len(self.plants)} plants, "
                  f"{self.soil.size}x{self.soil.size} soil grid, seed={seed}")

    def add_sink(self, sink):
        """Register an output collaborator"""
        self.sinks.append(sink)

    def step(self) -> FrameResult:
        """
        Advance the simulation by one frame.

        Returns:
            FrameResult for the completed frame (also passed to every sink)
        """
        start_time = time.perf_counter()
        growth_config = self.config.growth

        for plant in self.plants:
            plant.reset_frame_totals()

        # ============================================================
        # PHASE A: LIGHT (Read-only, frame-start snapshot)
        # ============================================================
        # Every light factor for this frame comes from geometry frozen here,
        # before any plant grows or drifts.

        light_start = time.perf_counter()
        snapshot = snapshot_plants(self.plants)
        light_factors = compute_light_factors(
            snapshot,
            shade_coefficient=growth_config.shade_coefficient,
            include_dead=growth_config.dead_plants_cast_shade
        )
        self._light_times.append(time.perf_counter() - light_start)

        # ============================================================
        # PHASE B: GROWTH (Write, stable id order)
        # ============================================================

        growth_start = time.perf_counter()
        cell_usage: Dict[int, List[UsageRecord]] = defaultdict(list)
        drift_rng = self._drift_rng if growth_config.drift_max > 0.0 else None
        deaths = []

        for plant, light in zip(self.plants, light_factors):
            outcome = update_plant(plant, self.soil, float(light), growth_config, cell_usage, drift_rng)
            if outcome is not None and not plant.alive:
                deaths.append(plant.plant_id)

        self._growth_times.append(time.perf_counter() - growth_start)

        self._ecology_telemetry['deaths_this_frame'] = len(deaths)
        self._ecology_telemetry['total_deaths'] += len(deaths)
        self._ecology_telemetry['cells_touched'] = len(cell_usage)

        # ============================================================
        # PHASE C: OUTPUT
        # ============================================================

        result = FrameResult(
            frame=self.frame_count,
            plants=self.plants,
            light_factors=light_factors,
            cell_usage=dict(cell_usage),
            soil=self.soil,
            deaths=deaths
        )
        for sink in self.sinks:
            sink.consume(result)

        self.frame_count += 1
        self._record_frame_time(time.perf_counter() - start_time)

        # Debug invariant check (zero cost when env var not set)
        if os.getenv('MEADOW_DEBUG_INVARIANTS') == '1':
            self.check_invariants()

        return result

    def run(self, frames: int, log_every: int = ECOLOGY_LOG_INTERVAL) -> Optional[FrameResult]:
        """
        Run a fixed number of frames.

        Args:
            frames: Number of frames to run
            log_every: Ecology summary interval in frames (0 disables)

        Returns:
            Result of the last frame, or None if frames == 0
        """
        result = None
        for _ in range(frames):
            result = self.step()
            if self.verbose and log_every:
                self.print_ecology_summary(every=log_every)
        return result

    def check_invariants(self):
        """Assert soil, size and health invariants (debug aid)"""
        min_size = self.config.growth.min_size
        assert self.soil.min_level() >= 0.0, "negative soil resource"
        for plant in self.plants:
            assert plant.size >= min_size, f"plant {plant.plant_id} below size floor"
            assert 0.0 <= plant.health <= 1.0, f"plant {plant.plant_id} health out of range"
            assert plant.alive == (plant.health > 0.0 and plant.age < plant.max_age)

    def alive_count(self) -> int:
        return sum(1 for p in self.plants if p.alive)

    def get_frame_stats(self) -> dict:
        """
        Get current frame timing statistics.

        Returns:
            Dict with frame_count, avg_frame_time_ms, last_frame_time_ms
        """
        if not self._frame_times:
            return {
                'frame_count': self.frame_count,
                'avg_frame_time_ms': 0.0,
                'last_frame_time_ms': 0.0
            }

        avg_time = self._frame_time_sum / len(self._frame_times)
        last_time = self._frame_times[-1]

        return {
            'frame_count': self.frame_count,
            'avg_frame_time_ms': avg_time * 1000.0,
            'last_frame_time_ms': last_time * 1000.0
        }

    def _record_frame_time(self, elapsed: float):
        """
        Record frame timing for rolling average.

        Args:
            elapsed: Frame time in seconds
        """
        self._frame_times.append(elapsed)
        self._frame_time_sum += elapsed

        # Maintain rolling window
        if len(self._frame_times) > self._frame_time_window:
            removed = self._frame_times.pop(0)
            self._frame_time_sum -= removed
        if len(self._light_times) > self._frame_time_window:
            self._light_times.pop(0)
            self._growth_times.pop(0)

    def get_snapshot(self) -> dict:
        """
        Get complete simulation state snapshot.

        Returns:
            Dict with frame_count, plants, soil means, timing
        """
        return {
            'frame_count': self.frame_count,
            'plant_count': len(self.plants),
            'alive_count': self.alive_count(),
            'plants': [p.to_dict() for p in self.plants],
            'soil_means': self.soil.mean_levels(),
            'timing': self.get_frame_stats()
        }

    def print_frame_summary(self):
        """Print frame summary to console (lightweight monitoring)"""
        stats = self.get_frame_stats()
        print(f"Frame {stats['frame_count']:6d} | "
              f"Avg: {stats['avg_frame_time_ms']:6.3f} ms | "
              f"Last: {stats['last_frame_time_ms']:6.3f} ms | "
              f"Alive: {self.alive_count()}/{len(self.plants)}")

    def print_ecology_summary(self, every: int = ECOLOGY_LOG_INTERVAL):
        """
        Print ecology and timing breakdown on interval.

        Args:
            every: Print interval in frames
        """
        if every <= 0 or self.frame_count % every != 0:
            return

        alive = [p for p in self.plants if p.alive]
        mean_health = float(np.mean([p.health for p in alive])) if alive else 0.0
        mean_size = float(np.mean([p.size for p in alive])) if alive else 0.0
        soil = self.soil.mean_levels()

        window = len(self._light_times)
        avg_light = sum(self._light_times) / window * 1000.0 if window else 0.0
        avg_growth = sum(self._growth_times) / window * 1000.0 if window else 0.0

        print(f"\n[Ecology] Frame {self.frame_count} | alive={len(alive)}/{len(self.plants)} "
              f"deaths={self._ecology_telemetry['total_deaths']} | "
              f"health_mean={mean_health:.3f} size_mean={mean_size:.3f}")
        print(f"  Soil means: water={soil['water']:.4f} nitrogen={soil['nitrogen']:.4f} "
              f"phosphorus={soil['phosphorus']:.4f} potassium={soil['potassium']:.4f}")
        print(f"  Light:  {avg_light:6.3f} ms")
        print(f"  Growth: {avg_growth:6.3f} ms")
