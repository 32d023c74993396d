"""
CSV frame recorder.

Consumes FrameResults and appends one row per plant to plant_growth.csv and
one row per touched soil cell to soil_status.csv. Soil rows end with the
per-plant breakdown as repeated "plantId:overlapFraction:amountTaken" fields.
"""

import csv
import os
from pathlib import Path

from .data_types import FrameResult

PLANT_HEADER = [
    "Frame", "PlantID", "X", "Y", "Z", "Age", "Size", "Health", "Alive",
    "LightFactor", "NutrientIntake", "AreaOccupied",
]
SOIL_HEADER = [
    "Frame", "SoilX", "SoilZ", "Water", "Nitrogen", "Phosphorus", "Potassium",
    "Occupancy", "PlantUsage",
]


class CsvFrameRecorder:
    """
    Output sink writing per-frame plant and soil state as CSV.

    Use as a context manager, or call open()/close() explicitly:

        with CsvFrameRecorder("results") as recorder:
            sim = MeadowSimulation(config, sinks=[recorder])
            sim.run(1000)
    """

    def __init__(self, output_dir, plant_file: str = "plant_growth.csv", soil_file: str = "soil_status.csv"):
        self.output_dir = Path(output_dir)
        self.plant_path = self.output_dir / plant_file
        self.soil_path = self.output_dir / soil_file
        self._plant_fh = None
        self._soil_fh = None
        self._plant_writer = None
        self._soil_writer = None
        self.frames_written = 0

    def open(self):
        """Create the output directory and write both headers"""
        os.makedirs(self.output_dir, exist_ok=True)
        self._plant_fh = open(self.plant_path, "w", newline="")
        self._soil_fh = open(self.soil_path, "w", newline="")
        self._plant_writer = csv.writer(self._plant_fh)
        self._soil_writer = csv.writer(self._soil_fh)
        self._plant_writer.writerow(PLANT_HEADER)
        self._soil_writer.writerow(SOIL_HEADER)
        return self

    def close(self):
        for fh in (self._plant_fh, self._soil_fh):
            if fh is not None:
                fh.close()
        self._plant_fh = self._soil_fh = None
        self._plant_writer = self._soil_writer = None

    def __enter__(self):
        return self.open()

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def consume(self, result: FrameResult):
        """Append the rows for one frame"""
        if self._plant_writer is None:
            raise RuntimeError("CsvFrameRecorder is not open")

        frame = result.frame
        for plant, light in zip(result.plants, result.light_factors):
            x, y, z = plant.position
            self._plant_writer.writerow([
                frame, plant.plant_id, x, y, z,
                plant.age, plant.size, plant.health, int(plant.alive),
                float(light), plant.nutrient_intake, plant.area_occupied,
            ])

        soil = result.soil
        for index in sorted(result.cell_usage):
            records = result.cell_usage[index]
            cell = soil.cell(index)
            row = [
                frame, cell.position[0], cell.position[1],
                cell.water, cell.nitrogen, cell.phosphorus, cell.potassium,
                len(records),
            ]
            row.extend(f"{r.plant_id}:{r.overlap_fraction:.6g}:{r.amount_taken:.6g}" for r in records)
            self._soil_writer.writerow(row)

        self.frames_written += 1
