from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

from specviz.spec_model import SpecDataset, SpecFormatError, SpecHandler, not_loaded


_logger = logging.getLogger(__name__)

_INT_KEY = re.compile(r"[+-]?\d+")


def _load_document(path: Path) -> Dict[str, Any]:
    try:
        raw = path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeError) as exc:
        raise SpecFormatError(f"cannot open file: {exc}") from exc
    try:
        doc = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise SpecFormatError(f"JSON parse error: {exc}") from exc
    if not isinstance(doc, dict):
        raise SpecFormatError("document root must be an object")
    return doc


def _parse_wavelength(key: Any) -> Optional[int]:
    s = str(key).strip()
    if not _INT_KEY.fullmatch(s):
        return None
    return int(s)


def _parse_values(wl: int, raw: Any) -> List[float]:
    if not isinstance(raw, list):
        _logger.warning("AMPAS: values for %d nm are not an array", wl)
        return []
    out: List[float] = []
    for v in raw:
        if isinstance(v, bool):
            _logger.warning("AMPAS: skipping non-numeric value %r at %d nm", v, wl)
            continue
        if isinstance(v, (int, float)):
            out.append(float(v))
            continue
        try:
            out.append(float(str(v)))
        except ValueError:
            _logger.warning("AMPAS: skipping non-numeric value %r at %d nm", v, wl)
    return out


def _label(v: Any) -> str:
    if isinstance(v, str):
        return v
    if isinstance(v, (int, float)) and not isinstance(v, bool):
        return str(v)
    return ""


def _derive_name(header: Dict[str, Any], path: Path) -> str:
    desc = header.get("description")
    if isinstance(desc, str) and desc.strip():
        return desc.strip()
    parts = [str(header.get(k)).strip() for k in ("manufacturer", "model") if header.get(k)]
    parts = [x for x in parts if x]
    if parts:
        return " ".join(parts)
    return path.stem


class AmpasFile(SpecHandler):
    """AMPAS-style spectral JSON: explicit wavelength keys, no implicit grid."""

    name = "AMPAS"
    extensions = ("json",)

    def read(self, path: Path) -> SpecDataset:
        p = Path(path)
        try:
            doc = _load_document(p)
        except SpecFormatError as exc:
            _logger.warning("AMPAS: %s: %s", p, exc)
            return not_loaded(p)

        dataset = SpecDataset(path=p)

        header = doc.get("header")
        if isinstance(header, dict):
            for k, v in header.items():
                dataset.header[str(k)] = v

        spectral = doc.get("spectral_data")
        if isinstance(spectral, dict):
            units = spectral.get("units")
            if isinstance(units, str):
                dataset.units = units

            index = spectral.get("index")
            if isinstance(index, dict) and isinstance(index.get("main"), list):
                dataset.indices = [_label(v) for v in index["main"]]

            data = spectral.get("data")
            if isinstance(data, dict) and isinstance(data.get("main"), dict):
                for key, raw in data["main"].items():
                    wl = _parse_wavelength(key)
                    if wl is None:
                        _logger.warning("AMPAS: invalid wavelength key: %r", key)
                        continue
                    dataset.set_row(wl, _parse_values(wl, raw))
                dataset.sort_rows()

        dataset.name = _derive_name(dataset.header, p)
        dataset.loaded = True
        _logger.info("AMPAS: read %s (%d rows, %d channels)", p.name, len(dataset.data), len(dataset.indices))
        return dataset

    def write(self, dataset: SpecDataset, path: Path) -> bool:
        p = Path(path)
        if not dataset.data:
            _logger.warning("AMPAS: dataset has no spectral data to write: %s", p)
            return False

        main: Dict[str, List[float]] = {}
        for wl in sorted(dataset.data.keys()):
            main[str(int(wl))] = [float(v) for v in dataset.data[wl]]

        payload = {
            "header": dict(dataset.header),
            "spectral_data": {
                "units": str(dataset.units or ""),
                "index": {"main": [str(x) for x in (dataset.indices or ["Set 1"])]},
                "data": {"main": main},
            },
        }

        try:
            text = json.dumps(payload, ensure_ascii=False, indent=2, default=str)
            with p.open("w", encoding="utf-8") as fh:
                fh.write(text + "\n")
        except (OSError, TypeError, ValueError) as exc:
            _logger.warning("AMPAS: cannot write file %s: %s", p, exc)
            return False
        return True
