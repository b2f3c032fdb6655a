from __future__ import annotations

from typing import List

import numpy as np

from tinyyolo_kit.config import GridConfig


VOC_LABELS: List[str] = [
    "aeroplane",
    "bicycle",
    "bird",
    "boat",
    "bottle",
    "bus",
    "car",
    "cat",
    "chair",
    "cow",
    "diningtable",
    "dog",
    "horse",
    "motorbike",
    "person",
    "pottedplant",
    "sheep",
    "sofa",
    "train",
    "tvmonitor",
]


def zeros_output(cfg: GridConfig = GridConfig()) -> np.ndarray:
    return np.zeros(cfg.expected_shape, dtype=np.float32)


def set_slot(
    out: np.ndarray,
    row: int,
    col: int,
    box: int,
    *,
    tx: float = 0.0,
    ty: float = 0.0,
    tw: float = 0.0,
    th: float = 0.0,
    objectness: float = 10.0,
    class_index: int = 0,
    class_logit: float = 10.0,
    cfg: GridConfig = GridConfig(),
) -> None:
    channel = box * cfg.channels_per_box
    out[0, row, col, channel : channel + 5] = [tx, ty, tw, th, objectness]
    out[0, row, col, channel + 5 + class_index] = class_logit
