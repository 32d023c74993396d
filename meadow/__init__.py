"""
Meadow Plant-Soil Simulation

A deterministic, frame-stepped ecological simulator. Plants on a square soil
grid compete for light through overlapping canopies and draw water and
nutrients from the cells under their footprints.

Architecture: MeadowSimulation is the source of truth. CSV recorders and
renderers are consumers of its per-frame output.
"""

__version__ = "0.1.0"
