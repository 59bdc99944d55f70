from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from specviz.spec_model import SpecDataset, SpecHandler, not_loaded


_logger = logging.getLogger(__name__)

HEADER_KEYWORDS = (
    "DESCRIPTOR",
    "ORIGINATOR",
    "CREATED",
    "MEAS_TYPE",
    "SPECTRAL_BANDS",
    "SPECTRAL_START_NM",
    "SPECTRAL_END_NM",
    "SPECTRAL_NORM",
    "NUMBER_OF_FIELDS",
    "NUMBER_OF_SETS",
)

DEFAULT_NAME = "Argyll spectral reflectance/emission data"

MEAS_TYPE_UNITS = {
    "AMBIENT": "ambient illuminance",
    "REFLECTIVE": "reflectance sensitivity",
}


def _round_half_away(value: float) -> int:
    if value >= 0:
        return int(math.floor(value + 0.5))
    return int(math.ceil(value - 0.5))


def _to_int(key: str, value: str) -> int:
    try:
        return int(value)
    except ValueError:
        pass
    try:
        f = float(value)
        if f.is_integer():
            return int(f)
    except ValueError:
        pass
    _logger.warning("Argyll: %s is not an integer: %r", key, value)
    return 0


def _to_float(key: str, value: str) -> float:
    try:
        return float(value)
    except ValueError:
        _logger.warning("Argyll: %s is not a number: %r", key, value)
        return 0.0


def _split_header_line(line: str) -> Tuple[str, str]:
    parts = line.split(None, 1)
    key = parts[0].strip()
    value = parts[1].strip().replace('"', "") if len(parts) > 1 else ""
    return key, value


def _format_number(value: float) -> str:
    f = float(value)
    if f.is_integer() and abs(f) < 1e16:
        return str(int(f))
    return repr(f)


def _parse_data_line(line: str, line_no: int) -> List[float]:
    out: List[float] = []
    for tok in line.split():
        try:
            out.append(float(tok))
        except ValueError:
            _logger.warning("Argyll: skipping non-numeric token %r on line %d", tok, line_no)
    return out


def _build_rows(
    flat: List[float],
    lines: List[List[float]],
    *,
    bands: int,
    num_sets: int,
    start_nm: float,
    end_nm: float,
    format_fields: int = 0,
) -> Dict[int, List[float]]:
    step = (end_nm - start_nm) / (bands - 1) if bands > 1 else 0.0

    # One line per wavelength, at most one token per set, and one declared
    # field per set. Short lines are rows shorter than `indices`.
    per_band = (
        num_sets > 1
        and format_fields == num_sets
        and len(lines) == bands
        and all(1 <= len(vals) <= num_sets for vals in lines)
    )

    rows: Dict[int, List[float]] = {}
    for i in range(bands):
        wl = _round_half_away(start_nm + i * step)
        if per_band:
            row = list(lines[i])
        else:
            row = []
            for s in range(num_sets):
                idx = s * bands + i
                if idx < len(flat):
                    row.append(flat[idx])
        rows[wl] = row
    return rows


class ArgyllFile(SpecHandler):
    """CGATS/Argyll-style keyword header plus a flat numeric data block."""

    name = "Argyll"
    extensions = ("agryll", "cgats", "sp", "ti3")

    def read(self, path: Path) -> SpecDataset:
        p = Path(path)
        dataset = SpecDataset(path=p)

        bands = 0
        num_sets = 0
        start_nm = 0.0
        end_nm = 0.0
        format_fields = 0
        flat: List[float] = []
        lines: List[List[float]] = []

        try:
            with p.open("r", encoding="utf-8-sig", errors="replace") as fh:
                it = enumerate(fh, start=1)
                for line_no, raw in it:
                    line = raw.strip()
                    if not line or line.startswith("#"):
                        continue

                    if line.startswith(HEADER_KEYWORDS):
                        key, value = _split_header_line(line)
                        dataset.header[key] = value
                        if key == "SPECTRAL_BANDS":
                            bands = _to_int(key, value)
                        elif key == "SPECTRAL_START_NM":
                            start_nm = _to_float(key, value)
                        elif key == "SPECTRAL_END_NM":
                            end_nm = _to_float(key, value)
                        elif key == "NUMBER_OF_SETS":
                            num_sets = _to_int(key, value)
                        continue

                    if line.startswith("BEGIN_DATA_FORMAT"):
                        for _n, fmt_raw in it:
                            fmt_line = fmt_raw.strip()
                            if fmt_line.startswith("END_DATA_FORMAT"):
                                break
                            format_fields += len(fmt_line.split())
                        continue

                    if line.startswith("BEGIN_DATA"):
                        for data_no, data_raw in it:
                            data_line = data_raw.strip()
                            if data_line.startswith("END_DATA"):
                                break
                            vals = _parse_data_line(data_line, data_no)
                            if vals:
                                lines.append(vals)
                                flat.extend(vals)
        except (OSError, UnicodeError) as exc:
            _logger.warning("Argyll: cannot open file %s: %s", p, exc)
            return not_loaded(p)

        if num_sets <= 0:
            num_sets = 1
        dataset.indices = [f"Set {s + 1}" for s in range(num_sets)]

        if flat and bands > 0:
            dataset.data = _build_rows(
                flat,
                lines,
                bands=bands,
                num_sets=num_sets,
                start_nm=start_nm,
                end_nm=end_nm,
                format_fields=format_fields,
            )
            dataset.sort_rows()

        dataset.name = str(dataset.header.get("ORIGINATOR", DEFAULT_NAME))
        meas_type = str(dataset.header.get("MEAS_TYPE", "")).upper()
        dataset.units = MEAS_TYPE_UNITS.get(meas_type, "")

        dataset.loaded = True
        _logger.info("Argyll: read %s (%d bands, %d sets)", p.name, len(dataset.data), num_sets)
        return dataset

    def write(self, dataset: SpecDataset, path: Path) -> bool:
        p = Path(path)
        if not dataset.data:
            _logger.warning("Argyll: dataset has no spectral data to write: %s", p)
            return False

        wls = sorted(dataset.data.keys())
        bands = len(wls)
        num_sets = dataset.channel_count or 1

        out: List[str] = []
        for key, value in dataset.header.items():
            text = _header_text(value)
            if text is None:
                _logger.debug("Argyll: skipping nested header entry %r", key)
                continue
            k = str(key)
            if k.split() != [k]:
                _logger.debug("Argyll: skipping header key with whitespace %r", key)
                continue
            flat_text = " ".join(text.split())
            if flat_text != text:
                _logger.debug("Argyll: flattened whitespace in header %r", key)
            out.append(f"{k} {flat_text}".rstrip())

        out.append(f"SPECTRAL_BANDS {bands}")
        out.append(f"SPECTRAL_START_NM {wls[0]}")
        out.append(f"SPECTRAL_END_NM {wls[-1]}")
        out.append(f"NUMBER_OF_SETS {num_sets}")
        out.append("BEGIN_DATA_FORMAT")
        out.append(" ".join(_field_name(dataset.indices, s) for s in range(num_sets)))
        out.append("END_DATA_FORMAT")
        out.append("BEGIN_DATA")
        for wl in wls:
            row = dataset.data[wl][:num_sets]
            out.append(" ".join(_format_number(v) for v in row))
        out.append("END_DATA")

        try:
            with p.open("w", encoding="utf-8", newline="\n") as fh:
                fh.write("\n".join(out) + "\n")
        except OSError as exc:
            _logger.warning("Argyll: cannot write file %s: %s", p, exc)
            return False
        return True


def _field_name(indices: List[str], pos: int) -> str:
    # One token per set, so the reader can count the declared fields.
    label = str(indices[pos]) if pos < len(indices) else ""
    return "_".join(label.split()) or f"Set_{pos + 1}"


def _header_text(value: Any) -> Optional[str]:
    if isinstance(value, (dict, list, tuple)):
        return None
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return _format_number(value)
    return str(value)
