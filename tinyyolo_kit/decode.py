from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np

from .config import GridConfig
from .mathops import sigmoid, sigmoid_array, softmax
from .tensor import RawOutput
from .types import Candidate, Rect


logger = logging.getLogger(__name__)


class GridDecoder:
    """
    Decode a single-scale grid output into labeled candidate boxes.

    Each (row, col, box) slot holds `[tx, ty, tw, th, objectness, class_logits...]`.
    A slot is kept when both sigmoid(objectness) and the best class score
    (softmax probability * objectness confidence) reach the threshold.

    Boxes are returned in grid order (row, then col, then box slot) in the
    model's `image_size x image_size` pixel space. No suppression is applied.
    """

    def __init__(self, config: Optional[GridConfig] = None):
        self.config = config if config is not None else GridConfig()

    def decode(
        self,
        output: Union[RawOutput, np.ndarray],
        labels: Sequence[str],
        threshold: Optional[float] = None,
    ) -> List[Candidate]:
        cfg = self.config
        if threshold is None:
            threshold = cfg.confidence_threshold
        if not 0.0 <= threshold <= 1.0:
            raise ValueError(f"threshold must be in [0, 1], got {threshold}")
        if len(labels) < cfg.class_count:
            raise ValueError(
                f"Model predicts {cfg.class_count} classes but only {len(labels)} labels were given."
            )

        raw = output if isinstance(output, RawOutput) else RawOutput(output, cfg)
        if raw.config.expected_shape != cfg.expected_shape:
            raise ValueError(f"Output geometry {raw.shape} does not match decoder geometry {cfg.expected_shape}")

        # (rows, cols, boxes) objectness confidences; NaN compares False and is dropped.
        slots = raw.array[0].reshape(cfg.rows, cfg.cols, cfg.boxes_per_cell, cfg.channels_per_box)
        confidences = sigmoid_array(slots[..., 4])
        keep = confidences >= threshold

        candidates: List[Candidate] = []
        # argwhere yields (row, col, box) in grid order
        for row, col, box in np.argwhere(keep).tolist():
            channel = box * cfg.channels_per_box
            confidence = float(confidences[row, col, box])

            top_index, top_prob = self._top_class(raw, row, col, channel)
            top_score = top_prob * confidence
            if not top_score >= threshold:
                continue

            rect = self._map_box_to_cell(raw, row, col, box, channel)
            candidates.append(Candidate(rect=rect, confidence=top_score, label=labels[top_index]))

        logger.debug("decoded %d candidates (threshold=%.3f)", len(candidates), threshold)
        return candidates

    # ------------------------------------------------------------------ #
    # Helper internal
    # ------------------------------------------------------------------ #
    def _top_class(self, raw: RawOutput, row: int, col: int, channel: int) -> Tuple[int, float]:
        start = channel + self.config.box_info_feature_count
        logits = raw.cell(row, col)[start : start + self.config.class_count]
        probs = softmax(logits)
        # argmax keeps the first index on ties
        top_index = int(np.argmax(probs))
        return top_index, float(probs[top_index])

    def _map_box_to_cell(self, raw: RawOutput, row: int, col: int, box: int, channel: int) -> Rect:
        cfg = self.config
        tx = raw.at(row, col, channel)
        ty = raw.at(row, col, channel + 1)
        tw = raw.at(row, col, channel + 2)
        th = raw.at(row, col, channel + 3)
        anchor_w, anchor_h = cfg.anchors[box]

        # The x center pairs col with cell_height and the y center pairs row
        # with cell_width. This matches the exported model's coordinate
        # convention and only matters when cells are not square.
        cx = (col + sigmoid(tx)) * cfg.cell_height
        cy = (row + sigmoid(ty)) * cfg.cell_width
        # Huge raw sizes give an infinite box rather than an OverflowError.
        with np.errstate(over="ignore"):
            scale_w, scale_h = np.exp([tw, th])
        w = float(scale_w) * cfg.cell_width * anchor_w
        h = float(scale_h) * cfg.cell_height * anchor_h
        return Rect.from_center(cx, cy, w, h)


def decode(
    output: Union[RawOutput, np.ndarray],
    labels: Sequence[str],
    threshold: Optional[float] = None,
    config: Optional[GridConfig] = None,
) -> List[Candidate]:
    """
    Functional wrapper around `GridDecoder.decode`.

    `threshold=None` uses the config's `confidence_threshold` (0.3 by default).
    """
    if config is None and isinstance(output, RawOutput):
        config = output.config
    return GridDecoder(config).decode(output, labels, threshold)
