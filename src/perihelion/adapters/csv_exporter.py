# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
CSV ephemeris exporter.

Exports ephemeris rows with RA/Dec, distances and light-time.
External dependencies (csv, file I/O) are confined to this adapter.
"""
import csv
import logging
import math

from perihelion.ports import EphemerisExporter
from perihelion.domain.ephemeris import EphemerisItem

logger = logging.getLogger(__name__)


_HEADER = [
    'date_tdb', 'jd_tdb', 'target', 'center',
    'ra_deg', 'dec_deg', 'ra_of_date_deg', 'dec_of_date_deg',
    'distance_au', 'true_distance_au', 'light_time_min',
    'x_au', 'y_au', 'z_au', 'altitude_deg', 'azimuth_deg',
]


class CsvEphemerisExporter(EphemerisExporter):
    """Exports ephemeris rows to CSV, one row per epoch."""

    def export(self, items: list[EphemerisItem], path: str) -> int:
        with open(path, 'w', newline='', encoding='utf-8') as f:
            writer = csv.writer(f)
            writer.writerow(_HEADER)

            for item in items:
                ra, dec = item.radec_j2000()
                ra_date, dec_date = item.radec_of_date()
                x, y, z = item.astrometric_vector.position
                horizon = item.horizontal()
                alt, az = ('', '') if horizon is None else (
                    f'{horizon[0]:.4f}', f'{horizon[1]:.4f}')

                writer.writerow([
                    item.epoch.isoformat(),
                    f'{item.epoch.jd_tdb:.6f}',
                    item.target_name,
                    item.center_name,
                    f'{math.degrees(ra):.7f}',
                    f'{math.degrees(dec):.7f}',
                    f'{math.degrees(ra_date):.7f}',
                    f'{math.degrees(dec_date):.7f}',
                    f'{item.distance_au:.10f}',
                    f'{item.distance_true_au:.10f}',
                    f'{item.light_time_days * 1440.0:.6f}',
                    f'{x:.10f}',
                    f'{y:.10f}',
                    f'{z:.10f}',
                    alt,
                    az,
                ])

        logger.debug("Wrote %d ephemeris rows to %s", len(items), path)
        return len(items)
