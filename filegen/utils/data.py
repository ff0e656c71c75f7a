import os
import csv
import logging
from pathlib import Path


logger = logging.getLogger(__name__)

_UNITS = {"": 1, "b": 1,
          "k": 1024, "kb": 1024, "kib": 1024,
          "m": 1024**2, "mb": 1024**2, "mib": 1024**2,
          "g": 1024**3, "gb": 1024**3, "gib": 1024**3,
          "t": 1024**4, "tb": 1024**4, "tib": 1024**4}


def human_size_to_bytes(s: str) -> int:
    """'4096' -> 4096, '64KB' -> 65536, '1.5MB' -> 1572864 (binary units)."""
    s = str(s).strip().lower()
    num, unit = "", ""
    for ch in s:
        if (ch.isdigit() or ch == ".") and not unit:
            num += ch
        else:
            unit += ch
    if not num:
        raise ValueError(f"Invalid size: {s!r}")
    unit = unit.strip()
    if unit not in _UNITS:
        raise ValueError(f"Unknown unit in {s!r}")
    try:
        return int(float(num) * _UNITS[unit]) if "." in num else int(num) * _UNITS[unit]
    except ValueError:
        raise ValueError(f"Invalid size: {s!r}")


def human(n: int) -> str:
    for unit in ("B", "KB", "MB", "GB", "TB"):
        if n < 1024 or unit == "TB":
            return f"{n:.2f} {unit}" if unit != "B" else f"{n} {unit}"
        n /= 1024


MANIFEST_COLUMNS = ["index", "file_name", "path", "size_bytes", "write_time_ms"]


def write_manifest(records, path: str) -> int:
    """One CSV row per generated file record, in creation order. Returns the row count."""
    Path(os.path.dirname(path) or ".").mkdir(parents=True, exist_ok=True)
    with open(path, "w", newline="", encoding="utf-8") as f:
        w = csv.writer(f)
        w.writerow(MANIFEST_COLUMNS)
        for i, r in enumerate(records):
            w.writerow([i, r.name, r.path, r.size_bytes, f"{r.elapsed_ms:.3f}"])
    logger.info("GENERATOR,MANIFEST,%s,END,SUCCESS,rows=%d", path, len(records))
    return len(records)
