# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Adapters for element downloads, tabulated ephemerides and export.

External dependencies (urllib, csv, skyfield, file I/O) are confined to
this layer.
"""
from perihelion.adapters.csv_exporter import CsvEphemerisExporter
from perihelion.adapters.jpl_small_body import (
    JplSmallBodyAdapter,
    default_cache_dir,
    parse_asteroid_table,
    parse_comet_table,
)
from perihelion.adapters.skyfield_ephemeris import SkyfieldEphemeris

__all__ = [
    "CsvEphemerisExporter",
    "JplSmallBodyAdapter",
    "SkyfieldEphemeris",
    "default_cache_dir",
    "parse_asteroid_table",
    "parse_comet_table",
]
