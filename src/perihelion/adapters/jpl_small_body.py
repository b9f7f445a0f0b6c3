# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
JPL small-body adapter: downloads, caches and parses element tables.

External dependencies (urllib, gzip, file I/O) are confined to this layer.

Data sources:
    https://ssd.jpl.nasa.gov/dat/ELEMENTS.COMET       comets
    https://ssd.jpl.nasa.gov/dat/ELEMENTS.NUMBR.gz   numbered asteroids

Both files are fixed-width with a header line and a line of dashes that
marks the column spans. Local copies are refreshed when older than the
update interval (6 hours by default).
"""
import gzip
import logging
import os
import time
import urllib.error
import urllib.request
from pathlib import Path

from perihelion.ports.orbital_data import SmallBodyElementSource
from perihelion.domain.orbital_elements import OrbitalElements
from perihelion.domain.time_systems import AstroTime, calendar_to_jd


_log = logging.getLogger(__name__)

BASE_URL = "https://ssd.jpl.nasa.gov/dat"

_FILES = {
    "comet": ("ELEMENTS.COMET", "comet.dat"),
    "asteroid": ("ELEMENTS.NUMBR.gz", "asteroid_numbered.dat"),
}

_COMET_FIELDS = ("name", "epoch", "q", "e", "i", "w", "node", "tp", "ref")
_ASTEROID_FIELDS = ("num", "name", "epoch", "a", "e", "i", "w", "node", "m",
                    "h", "g", "ref")


def default_cache_dir() -> Path:
    """$PERIHELION_CACHE_DIR, else ~/.cache/perihelion."""
    env = os.environ.get("PERIHELION_CACHE_DIR")
    if env:
        return Path(env)
    return Path.home() / ".cache" / "perihelion"


def _column_spans(dash_line: str) -> list[tuple[int, int | None]]:
    """Column (start, end) pairs from a '---- ------ ---' ruler line.

    The last column runs to the end of the line.
    """
    spans: list[tuple[int, int | None]] = []
    start = None
    for idx, ch in enumerate(dash_line.rstrip("\n")):
        if ch == "-" and start is None:
            start = idx
        elif ch != "-" and start is not None:
            spans.append((start, idx))
            start = None
    if start is not None:
        spans.append((start, None))
    if spans:
        spans[-1] = (spans[-1][0], None)
    return spans


def _split_table(lines: list[str], fields: tuple[str, ...]) -> list[dict[str, str]]:
    """Split a fixed-width element table into dicts keyed by ``fields``."""
    ruler = next((i for i, line in enumerate(lines)
                  if line.strip() and set(line.strip()) <= {"-", " "}), None)
    if ruler is None:
        raise ValueError("Element table has no column ruler line")
    spans = _column_spans(lines[ruler])
    if len(spans) != len(fields):
        raise ValueError(
            f"Expected {len(fields)} columns, ruler has {len(spans)}"
        )

    # The first column absorbs any leading padding left of its dashes.
    spans[0] = (0, spans[0][1])
    records = []
    for line in lines[ruler + 1:]:
        if not line.strip():
            continue
        records.append({
            key: line[start:end].strip() if end is not None else line[start:].strip()
            for key, (start, end) in zip(fields, spans)
        })
    return records


def parse_perihelion_date(text: str) -> AstroTime:
    """Parse a JPL 'YYYYMMDD.ddddd' time of perihelion (TDB)."""
    text = text.strip()
    year, month = int(text[0:4]), int(text[4:6])
    day = float(text[6:])
    return AstroTime(calendar_to_jd(year, month, day))


def parse_comet_record(record: dict[str, str]) -> OrbitalElements:
    """OrbitalElements from one ELEMENTS.COMET row."""
    return OrbitalElements.comet(
        epoch=AstroTime.from_mjd(float(record["epoch"])),
        q_au=float(record["q"]),
        e=float(record["e"]),
        inclination_deg=float(record["i"]),
        arg_perihelion_deg=float(record["w"]),
        node_deg=float(record["node"]),
        perihelion_time=parse_perihelion_date(record["tp"]),
        name=record["name"],
    )


def parse_asteroid_record(record: dict[str, str]) -> OrbitalElements:
    """OrbitalElements from one ELEMENTS.NUMBR row."""
    h = record.get("h", "")
    g = record.get("g", "")
    return OrbitalElements.asteroid(
        epoch=AstroTime.from_mjd(float(record["epoch"])),
        a_au=float(record["a"]),
        e=float(record["e"]),
        inclination_deg=float(record["i"]),
        arg_perihelion_deg=float(record["w"]),
        node_deg=float(record["node"]),
        mean_anomaly_deg=float(record["m"]),
        name=f"({record['num']}) {record['name']}",
        abs_magnitude=float(h) if h else None,
        slope=float(g) if g else None,
    )


def parse_comet_table(text: str) -> list[OrbitalElements]:
    """Parse ELEMENTS.COMET; malformed rows are logged and skipped."""
    comets = []
    for record in _split_table(text.splitlines(), _COMET_FIELDS):
        try:
            comets.append(parse_comet_record(record))
        except ValueError as e:
            _log.warning("Skipping %s: %s", record.get("name", "?"), e)
    return comets


def parse_asteroid_table(text: str) -> list[OrbitalElements]:
    """Parse ELEMENTS.NUMBR; malformed rows are logged and skipped."""
    asteroids = []
    for record in _split_table(text.splitlines(), _ASTEROID_FIELDS):
        try:
            asteroids.append(parse_asteroid_record(record))
        except (ValueError, KeyError) as e:
            _log.warning("Skipping %s: %s", record.get("name", "?"), e)
    return asteroids


def _find(bodies: list[OrbitalElements], name: str, kind: str) -> OrbitalElements:
    """Exact (case-insensitive) match first, then first substring match."""
    needle = name.strip().lower()
    for body in bodies:
        if body.name.lower() == needle:
            return body
    for body in bodies:
        if needle in body.name.lower():
            return body
    raise KeyError(f"No {kind} matching {name!r}")


class JplSmallBodyAdapter(SmallBodyElementSource):
    """
    Comet and asteroid elements from the JPL small-body element files.

    Files are cached under ``cache_dir`` and refreshed at most every
    ``update_interval_hours``. When a refresh fails and a stale copy
    exists, the stale copy is used and a warning logged.
    """

    def __init__(
        self,
        cache_dir: str | Path | None = None,
        update_interval_hours: float = 6.0,
        base_url: str = BASE_URL,
        timeout: int = 60,
    ):
        self._cache_dir = Path(cache_dir) if cache_dir else default_cache_dir()
        self._update_interval_s = update_interval_hours * 3600.0
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._comets: list[OrbitalElements] | None = None
        self._asteroids: list[OrbitalElements] | None = None

    @property
    def cache_dir(self) -> Path:
        return self._cache_dir

    def find_comet(self, name: str) -> OrbitalElements:
        return _find(self._load_comets(), name, "comet")

    def find_asteroid(self, name: str) -> OrbitalElements:
        asteroids = self._load_asteroids()
        needle = name.strip()
        if needle.isdigit():
            prefix = f"({needle}) "
            for body in asteroids:
                if body.name.startswith(prefix):
                    return body
            raise KeyError(f"No numbered asteroid {needle}")
        return _find(asteroids, needle, "asteroid")

    def comet_names(self) -> list[str]:
        return [c.name for c in self._load_comets()]

    def _load_comets(self) -> list[OrbitalElements]:
        if self._comets is None:
            self._comets = parse_comet_table(self._read("comet"))
            _log.info("Loaded %d comets", len(self._comets))
        return self._comets

    def _load_asteroids(self) -> list[OrbitalElements]:
        if self._asteroids is None:
            self._asteroids = parse_asteroid_table(self._read("asteroid"))
            _log.info("Loaded %d numbered asteroids", len(self._asteroids))
        return self._asteroids

    def _read(self, kind: str) -> str:
        return self.local_file(kind).read_text(encoding="utf-8", errors="replace")

    def local_file(self, kind: str) -> Path:
        """Path of the cached file for ``kind``, downloading it if stale."""
        remote, local = _FILES[kind]
        path = self._cache_dir / local
        if path.exists():
            age = time.time() - path.stat().st_mtime
            if age < self._update_interval_s:
                _log.debug("Using cached %s (%.1f h old)", path, age / 3600.0)
                return path
        try:
            self._download(f"{self._base_url}/{remote}", path)
        except ConnectionError as e:
            if not path.exists():
                raise
            _log.warning("Update of %s failed, using stale copy: %s", remote, e)
        return path

    def _download(self, url: str, dest: Path) -> None:
        """Fetch ``url`` into ``dest``, gunzipping .gz payloads."""
        _log.info("Downloading %s", url)
        req = urllib.request.Request(url, headers={"User-Agent": "perihelion/1.0"})
        try:
            with urllib.request.urlopen(req, timeout=self._timeout) as response:
                payload = response.read()
        except urllib.error.HTTPError as e:
            raise ConnectionError(f"JPL download error {e.code}: {e.reason}") from e
        except urllib.error.URLError as e:
            raise ConnectionError(f"JPL connection failed: {e.reason}") from e

        if url.endswith(".gz"):
            payload = gzip.decompress(payload)

        dest.parent.mkdir(parents=True, exist_ok=True)
        tmp = dest.with_suffix(dest.suffix + ".part")
        tmp.write_bytes(payload)
        tmp.replace(dest)
