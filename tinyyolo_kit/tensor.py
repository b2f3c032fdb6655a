from __future__ import annotations

from typing import Optional

import numpy as np

from .config import GridConfig


class RawOutput:
    """
    Read-only view of one grid detector output, indexed `[0, row, col, channel]`.

    Accepts NHWC arrays shaped `(1, rows, cols, channels)` or the same
    without the batch axis. The shape must match `config` exactly; nothing
    is clamped or reshaped to fit.
    """

    def __init__(self, data: np.ndarray, config: Optional[GridConfig] = None):
        self.config = config if config is not None else GridConfig()

        arr = np.asarray(data, dtype=np.float32)
        if arr.ndim == 3:
            arr = arr[None, ...]
        if arr.ndim != 4:
            raise ValueError(f"Expected a 4-D output (1, rows, cols, channels), got shape {arr.shape}")
        if arr.shape[0] != 1:
            raise ValueError(f"Batch > 1 is not supported (got shape {arr.shape}). Pass one image at a time.")
        if tuple(arr.shape) != self.config.expected_shape:
            raise ValueError(f"Output shape {arr.shape} does not match model geometry {self.config.expected_shape}")

        # Own a private read-only copy so callers cannot mutate it mid-decode.
        arr = np.array(arr, copy=True)
        arr.setflags(write=False)
        self._data = arr

    @property
    def shape(self):
        return self._data.shape

    @property
    def array(self) -> np.ndarray:
        return self._data

    def _check(self, row: int, col: int, channel: Optional[int] = None) -> None:
        _, rows, cols, channels = self._data.shape
        if not 0 <= row < rows:
            raise IndexError(f"row {row} out of range [0, {rows})")
        if not 0 <= col < cols:
            raise IndexError(f"col {col} out of range [0, {cols})")
        if channel is not None and not 0 <= channel < channels:
            raise IndexError(f"channel {channel} out of range [0, {channels})")

    def at(self, row: int, col: int, channel: int) -> float:
        self._check(row, col, channel)
        return float(self._data[0, row, col, channel])

    def cell(self, row: int, col: int) -> np.ndarray:
        """Channel vector of one grid cell (read-only)."""
        self._check(row, col)
        return self._data[0, row, col]
