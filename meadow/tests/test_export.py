"""
Tests for the CSV frame recorder.
"""

import csv

import pytest

from meadow.data_types import SimulationConfig
from meadow.export import CsvFrameRecorder, PLANT_HEADER, SOIL_HEADER
from meadow.simulation import MeadowSimulation


def read_rows(path):
    with open(path, newline="") as f:
        return list(csv.reader(f))


def make_sim(sinks):
    config = SimulationConfig(seed=5)
    config.grid.size = 10
    config.population.plant_count = 12
    return MeadowSimulation(config, sinks=sinks, verbose=False)


def test_writes_headers_and_rows(tmp_path):
    with CsvFrameRecorder(tmp_path / "out") as recorder:
        sim = make_sim([recorder])
        sim.run(3, log_every=0)

    assert recorder.frames_written == 3

    plant_rows = read_rows(recorder.plant_path)
    assert plant_rows[0] == PLANT_HEADER
    assert len(plant_rows) == 1 + 3 * 12
    assert [int(r[0]) for r in plant_rows[1:13]] == [0] * 12
    assert [int(r[1]) for r in plant_rows[1:13]] == sorted(p.plant_id for p in sim.plants)
    for row in plant_rows[1:]:
        assert len(row) == len(PLANT_HEADER)
        assert 0.0 <= float(row[PLANT_HEADER.index("LightFactor")]) <= 1.0

    soil_rows = read_rows(recorder.soil_path)
    assert soil_rows[0] == SOIL_HEADER
    assert len(soil_rows) > 1
    for row in soil_rows[1:]:
        occupancy = int(row[7])
        usage = row[8:]
        assert occupancy == len(usage) > 0
        for field in usage:
            plant_id, fraction, amount = field.split(":")
            assert 0 <= int(plant_id) < 12
            assert 0.0 < float(fraction) <= 1.0
            assert float(amount) >= 0.0


def test_soil_rows_sorted_per_frame(tmp_path):
    with CsvFrameRecorder(tmp_path) as recorder:
        make_sim([recorder]).run(2, log_every=0)

    rows = read_rows(recorder.soil_path)[1:]
    for frame in (0, 1):
        cells = [(float(r[2]), float(r[1])) for r in rows if int(r[0]) == frame]
        assert cells == sorted(cells)


def test_custom_file_names(tmp_path):
    recorder = CsvFrameRecorder(tmp_path, plant_file="p.csv", soil_file="s.csv")
    recorder.open()
    try:
        make_sim([recorder]).step()
    finally:
        recorder.close()

    assert (tmp_path / "p.csv").exists()
    assert (tmp_path / "s.csv").exists()


def test_consume_requires_open(tmp_path):
    recorder = CsvFrameRecorder(tmp_path)
    with pytest.raises(RuntimeError):
        make_sim([recorder]).step()
