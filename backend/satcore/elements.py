"""
Element set parsing.

Validates two-line element sets and builds one immutable OrbitalRecord per
catalog entry. Malformed entries are dropped with a warning so a single bad
set never sinks the whole catalog; the position of a record in the returned
list is its identity for the rest of the session.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from sgp4.api import Satrec

from satcore.errors import ElementSetError

log = logging.getLogger(__name__)

LINE1_MARKER = "1 "
LINE2_MARKER = "2 "
TLE_LINE_LENGTH = 69


# ---------------------------------------------------------------------------
# Dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CatalogEntry:
    """Raw catalog input: display name plus the two element lines."""

    name: str
    line1: str
    line2: str
    country: str | None = None


@dataclass(frozen=True)
class OrbitalRecord:
    """Parsed element set with its sgp4 state. Never mutated after load."""

    name: str
    line1: str
    line2: str
    satrec: Any = field(compare=False, repr=False)
    catalog_number: int | None = None
    country: str | None = None

    @property
    def epoch_jd(self) -> float:
        return self.satrec.jdsatepoch + self.satrec.jdsatepochF

    @property
    def mean_motion_rev_per_day(self) -> float:
        # no_kozai is radians/minute
        return self.satrec.no_kozai * 1440.0 / (2.0 * math.pi)

    @property
    def period_minutes(self) -> float:
        revs = self.mean_motion_rev_per_day
        return 1440.0 / revs if revs > 0 else float("inf")

    @property
    def inclination_deg(self) -> float:
        return math.degrees(self.satrec.inclo)

    @property
    def eccentricity(self) -> float:
        return self.satrec.ecco


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def _catalog_number(line1: str, satrec: Any) -> int | None:
    try:
        return int(line1[2:7])
    except ValueError:
        # Alpha-5 numbers ("A0001") are decoded by sgp4 itself
        number = getattr(satrec, "satnum", None)
        return number if isinstance(number, int) else None


def parse_element_set(
    name: str,
    line1: str,
    line2: str,
    country: str | None = None,
) -> OrbitalRecord:
    """
    Build an OrbitalRecord from one name + two-line pair.

    Raises:
        ElementSetError: a line is missing its "1 " / "2 " marker, sgp4 could
            not parse the lines, or sgp4 flagged the elements with an error.
    """
    name = (name or "").strip()
    line1 = (line1 or "").rstrip()
    line2 = (line2 or "").rstrip()

    if not line1.startswith(LINE1_MARKER):
        raise ElementSetError(name, "line 1 does not start with '1 '")
    if not line2.startswith(LINE2_MARKER):
        raise ElementSetError(name, "line 2 does not start with '2 '")

    try:
        satrec = Satrec.twoline2rv(line1, line2)
    except (ValueError, TypeError, IndexError) as exc:
        raise ElementSetError(name, f"sgp4 rejected the element set: {exc}") from exc

    if satrec.error != 0:
        raise ElementSetError(name, f"sgp4 error code {satrec.error}")

    catalog_number = _catalog_number(line1, satrec)
    return OrbitalRecord(
        name=name or (f"NORAD {catalog_number}" if catalog_number is not None else "UNKNOWN"),
        line1=line1,
        line2=line2,
        satrec=satrec,
        catalog_number=catalog_number,
        country=country or None,
    )


def _as_entry(raw: CatalogEntry | Mapping[str, Any] | tuple) -> CatalogEntry:
    if isinstance(raw, CatalogEntry):
        return raw
    if isinstance(raw, Mapping):
        return CatalogEntry(
            name=str(raw.get("name", "") or ""),
            line1=str(raw.get("line1", "") or ""),
            line2=str(raw.get("line2", "") or ""),
            country=raw.get("country") or None,
        )
    if isinstance(raw, tuple) and len(raw) in (3, 4):
        return CatalogEntry(*raw)
    raise TypeError(f"unsupported catalog entry: {type(raw).__name__}")


def parse_catalog(
    entries: Iterable[CatalogEntry | Mapping[str, Any] | tuple],
) -> list[OrbitalRecord]:
    """
    Parse a catalog, keeping input order and skipping malformed entries.

    Entries may be CatalogEntry instances, mappings with name/line1/line2
    (and optional country) keys, or (name, line1, line2[, country]) tuples.
    """
    records: list[OrbitalRecord] = []
    skipped = 0
    for position, raw in enumerate(entries):
        try:
            entry = _as_entry(raw)
            records.append(
                parse_element_set(entry.name, entry.line1, entry.line2, entry.country)
            )
        except (ElementSetError, TypeError) as exc:
            skipped += 1
            log.warning("Skipping catalog entry %d: %s", position, exc)
    if skipped:
        log.info("Parsed %d element sets (%d skipped).", len(records), skipped)
    return records


# ---------------------------------------------------------------------------
# Raw catalog formats
# ---------------------------------------------------------------------------


def split_tle_text(text: str) -> list[CatalogEntry]:
    """
    Split TLE text into catalog entries.

    Handles the usual three-line layout (name, line 1, line 2) and bare
    two-line blocks, which are named after their catalog number. Blank lines
    are ignored. Line validation is left to parse_catalog.
    """
    lines = [line.strip() for line in text.splitlines()]
    lines = [line for line in lines if line]

    entries: list[CatalogEntry] = []
    i = 0
    while i < len(lines):
        line = lines[i]
        if line.startswith(LINE1_MARKER) and i + 1 < len(lines) and lines[i + 1].startswith(LINE2_MARKER):
            entries.append(CatalogEntry(f"NORAD {line[2:7].strip()}", line, lines[i + 1]))
            i += 2
            continue
        if i + 2 >= len(lines):
            log.warning("Dropping %d trailing line(s) of TLE text.", len(lines) - i)
            break
        orphan_line2 = line.startswith(LINE2_MARKER) and len(line) == TLE_LINE_LENGTH
        if not orphan_line2 and (
            lines[i + 1].startswith(LINE1_MARKER) or lines[i + 2].startswith(LINE2_MARKER)
        ):
            # 3LE files prefix the name line with "0 "
            name = line[2:].strip() if line.startswith("0 ") else line
            entries.append(CatalogEntry(name, lines[i + 1], lines[i + 2]))
            i += 3
            continue
        # Not the start of a block: step one line to resynchronise
        log.warning("Skipping unrecognised TLE line %d: %r", i + 1, line[:30])
        i += 1
    return entries


def entries_from_gp(raw_records: Iterable[Mapping[str, Any]]) -> list[CatalogEntry]:
    """
    Convert GP JSON records (Space-Track / CelesTrak keys) into entries.

    Skips records with missing or empty TLE lines (they cannot be propagated).
    """
    entries: list[CatalogEntry] = []
    skipped = 0
    for rec in raw_records:
        tle1 = rec.get("TLE_LINE1", "") or ""
        tle2 = rec.get("TLE_LINE2", "") or ""
        if not tle1 or not tle2:
            skipped += 1
            continue
        entries.append(
            CatalogEntry(
                name=(rec.get("OBJECT_NAME") or "UNKNOWN").strip(),
                line1=tle1,
                line2=tle2,
                country=rec.get("COUNTRY_CODE") or None,
            )
        )
    if skipped:
        log.debug("Skipped %d GP records with missing TLE data.", skipped)
    return entries
