from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Tuple, Union


Anchor = Tuple[float, float]

# Tiny YOLOv2 (VOC) priors, in cell units, one (w, h) pair per box slot.
DEFAULT_ANCHORS: Tuple[Anchor, ...] = (
    (1.08, 1.19),
    (3.42, 4.41),
    (6.63, 11.38),
    (9.42, 5.11),
    (16.62, 10.52),
)


@dataclass(frozen=True)
class GridConfig:
    """
    Geometry and filtering constants of a single-scale grid detector.

    Defaults match the 416x416 Tiny YOLOv2 VOC export: a 13x13 grid of
    32 px cells, 5 anchor boxes per cell, 20 classes.
    """

    rows: int = 13
    cols: int = 13
    boxes_per_cell: int = 5
    # tx, ty, tw, th, objectness
    box_info_feature_count: int = 5
    class_count: int = 20
    cell_width: float = 32.0
    cell_height: float = 32.0
    anchors: Tuple[Anchor, ...] = DEFAULT_ANCHORS
    image_size: int = 416
    confidence_threshold: float = 0.3
    iou_threshold: float = 0.3
    max_results: int = 5
    image_mean: float = 0.0
    image_std: float = 1.0

    def __post_init__(self) -> None:
        for key in ("rows", "cols", "boxes_per_cell", "class_count", "image_size"):
            if getattr(self, key) <= 0:
                raise ValueError(f"{key} must be > 0")
        if self.box_info_feature_count != 5:
            raise ValueError("box_info_feature_count must be 5 (tx, ty, tw, th, objectness)")
        if self.cell_width <= 0 or self.cell_height <= 0:
            raise ValueError("cell_width and cell_height must be > 0")
        if len(self.anchors) != self.boxes_per_cell:
            raise ValueError(
                f"Expected {self.boxes_per_cell} anchors (one per box slot), got {len(self.anchors)}"
            )
        for anchor in self.anchors:
            if len(anchor) != 2:
                raise ValueError(f"Each anchor must be a (width, height) pair, got {anchor!r}")
        if not 0.0 <= self.confidence_threshold <= 1.0:
            raise ValueError("confidence_threshold must be in [0, 1]")
        if not 0.0 <= self.iou_threshold <= 1.0:
            raise ValueError("iou_threshold must be in [0, 1]")
        if self.max_results <= 0:
            raise ValueError("max_results must be > 0")
        if self.image_std == 0:
            raise ValueError("image_std must be non-zero")

    @property
    def channels_per_box(self) -> int:
        return self.class_count + self.box_info_feature_count

    @property
    def channel_count(self) -> int:
        return self.boxes_per_cell * self.channels_per_box

    @property
    def expected_shape(self) -> Tuple[int, int, int, int]:
        return 1, self.rows, self.cols, self.channel_count


_INT_KEYS = ("rows", "cols", "boxes_per_cell", "box_info_feature_count", "class_count", "image_size", "max_results")
_FLOAT_KEYS = (
    "cell_width",
    "cell_height",
    "confidence_threshold",
    "iou_threshold",
    "image_mean",
    "image_std",
)


def _require_number(payload: Dict[str, Any], key: str) -> float:
    value = payload[key]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{key} must be a number")
    return float(value)


def _require_int(payload: Dict[str, Any], key: str) -> int:
    value = payload[key]
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{key} must be an integer")
    return int(value)


def _parse_anchors(value: Any) -> Tuple[Anchor, ...]:
    if not isinstance(value, list) or not value:
        raise ValueError("anchors must be a non-empty list of [width, height] pairs")
    anchors = []
    for item in value:
        if (
            not isinstance(item, list)
            or len(item) != 2
            or any(isinstance(v, bool) or not isinstance(v, (int, float)) for v in item)
        ):
            raise ValueError(f"Invalid anchor entry: {item!r}")
        anchors.append((float(item[0]), float(item[1])))
    return tuple(anchors)


def load_grid_config(path: Union[str, Path]) -> GridConfig:
    """
    Load a `GridConfig` from a JSON object. Omitted keys keep their defaults.
    """

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Grid config not found: {path}")
    raw = path.read_text(encoding="utf-8")
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid grid config JSON: {path}") from exc
    if not isinstance(payload, dict):
        raise ValueError("Grid config must be a JSON object")

    allowed = set(_INT_KEYS) | set(_FLOAT_KEYS) | {"anchors"}
    unknown = sorted(set(payload.keys()) - allowed)
    if unknown:
        raise ValueError(f"Unknown grid config keys: {unknown}")

    kwargs: Dict[str, Any] = {}
    for key in _INT_KEYS:
        if key in payload:
            kwargs[key] = _require_int(payload, key)
    for key in _FLOAT_KEYS:
        if key in payload:
            kwargs[key] = _require_number(payload, key)
    if "anchors" in payload:
        kwargs["anchors"] = _parse_anchors(payload["anchors"])

    return GridConfig(**kwargs)
