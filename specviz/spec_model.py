from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import numpy as np
import pandas as pd


class SpecFormatError(Exception):
    pass


@dataclass
class SpecDataset:
    name: str = ""
    # Insertion order is the write order.
    header: Dict[str, Any] = field(default_factory=dict)
    units: str = ""
    indices: List[str] = field(default_factory=list)
    # wavelength (nm) -> one value per entry in `indices`
    data: Dict[int, List[float]] = field(default_factory=dict)
    loaded: bool = False
    path: Optional[Path] = None

    def set_row(self, wavelength: int, values: Sequence[float]) -> None:
        self.data[int(wavelength)] = [float(v) for v in values]

    def sort_rows(self) -> None:
        """Reorder `data` so it iterates in ascending wavelength order."""
        self.data = dict(sorted(self.data.items()))

    @property
    def wavelengths(self) -> List[int]:
        return sorted(self.data.keys())

    @property
    def channel_count(self) -> int:
        return len(self.indices)

    @property
    def is_empty(self) -> bool:
        return not self.data

    def value(self, wavelength: int, channel: int) -> float:
        row = self.data.get(int(wavelength))
        if row is None or channel < 0 or channel >= len(row):
            return 0.0
        return float(row[channel])

    def to_frame(self) -> pd.DataFrame:
        """Tabulate the rows, one column per channel label.

        Missing trailing channel values are NaN. Duplicate labels are
        disambiguated with their position so every channel gets a column.
        """
        columns: List[str] = []
        seen: set[str] = set()
        for i, label in enumerate(self.indices or ["Set 1"]):
            col = str(label)
            if col in seen:
                col = f"{col} ({i + 1})"
            seen.add(col)
            columns.append(col)

        wls = self.wavelengths
        arr = np.full((len(wls), len(columns)), np.nan, dtype=float)
        for r, wl in enumerate(wls):
            row = self.data[wl][: len(columns)]
            if row:
                arr[r, : len(row)] = np.asarray(row, dtype=float)

        df = pd.DataFrame(arr, index=pd.Index(wls, name="wavelength"), columns=columns)
        return df


def not_loaded(path: Optional[Path] = None) -> SpecDataset:
    return SpecDataset(loaded=False, path=path)


class SpecHandler:
    """One file format: the extensions it claims plus its read/write paths."""

    name: str = ""
    extensions: tuple[str, ...] = ()

    def read(self, path: Path) -> SpecDataset:
        raise NotImplementedError

    def write(self, dataset: SpecDataset, path: Path) -> bool:
        raise NotImplementedError

    def claims(self, ext: str) -> bool:
        return str(ext or "").lower().lstrip(".") in self.extensions
