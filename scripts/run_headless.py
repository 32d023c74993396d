"""
Headless meadow run.

Loads a YAML configuration, runs a fixed number of frames without rendering,
and records per-frame plant and soil state as CSV.

Usage:
    python scripts/run_headless.py --config data/meadow.yaml --frames 2000 --out results
"""

import argparse
import sys
from pathlib import Path

# Allow running from a source checkout without installing
sys.path.insert(0, str(Path(__file__).parent.parent))

from meadow.export import CsvFrameRecorder
from meadow.loader import load_config
from meadow.simulation import MeadowSimulation


def main():
    root = Path(__file__).parent.parent

    parser = argparse.ArgumentParser(description="Run the meadow simulation headless")
    parser.add_argument("--config", type=Path, default=root / "data" / "meadow.yaml", help="YAML config file")
    parser.add_argument("--frames", type=int, default=1000, help="Number of frames to run")
    parser.add_argument("--out", type=Path, default=Path("results"), help="Output directory for CSV files")
    parser.add_argument("--seed", type=int, default=None, help="Override the configured seed")
    parser.add_argument("--log-every", type=int, default=500, help="Ecology summary interval (0 = off)")
    args = parser.parse_args()

    config = load_config(args.config, schema_dir=root / "data" / "schemas")
    if args.seed is not None:
        config.seed = args.seed

    print("=" * 70)
    print(f"Meadow headless run: {args.frames} frames, config={args.config}")
    print("=" * 70)

    with CsvFrameRecorder(args.out) as recorder:
        sim = MeadowSimulation(config, sinks=[recorder])
        sim.run(args.frames, log_every=args.log_every)

    sim.print_frame_summary()
    print(f"[OK] Wrote {recorder.frames_written} frames to {recorder.plant_path} and {recorder.soil_path}")


if __name__ == '__main__':
    main()
