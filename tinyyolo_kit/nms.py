from __future__ import annotations

import logging
import numbers
from dataclasses import dataclass
from typing import List, Sequence

from .types import Candidate, Rect


logger = logging.getLogger(__name__)


@dataclass
class NMSConfig:
    iou_threshold: float = 0.3
    max_detections: int = 5


def iou(a: Rect, b: Rect) -> float:
    """
    Intersection over union of two rectangles.

    A rectangle with zero or negative area overlaps nothing (IoU 0).
    """

    area_a = a.area
    if area_a <= 0:
        return 0.0
    area_b = b.area
    if area_b <= 0:
        return 0.0

    ix = max(0.0, min(a.x_max, b.x_max) - max(a.x_min, b.x_min))
    iy = max(0.0, min(a.y_max, b.y_max) - max(a.y_min, b.y_min))
    inter = ix * iy
    union = area_a + area_b - inter
    if union <= 0:
        return 0.0
    return inter / union


def suppress(candidates: Sequence[Candidate], limit: int = 5, iou_threshold: float = 0.3) -> List[Candidate]:
    """
    Greedy NMS over decoded candidates.

    Candidates are ranked by confidence (descending, stable, so ties keep
    their input order). Each kept box deactivates every lower-ranked box
    whose IoU with it exceeds `iou_threshold`. Returns at most `limit`
    boxes, highest confidence first. The input sequence is not modified.
    """

    if isinstance(limit, bool) or not isinstance(limit, numbers.Integral) or limit <= 0:
        raise ValueError(f"limit must be a positive integer, got {limit!r}")
    if not 0.0 <= iou_threshold <= 1.0:
        raise ValueError(f"iou_threshold must be in [0, 1], got {iou_threshold}")

    ranked = sorted(candidates, key=lambda c: c.confidence, reverse=True)
    active = [True] * len(ranked)
    active_count = len(ranked)
    results: List[Candidate] = []

    for i, box_a in enumerate(ranked):
        if not active[i]:
            continue
        results.append(box_a)
        active_count -= 1
        if len(results) >= limit or active_count <= 0:
            break

        for j in range(i + 1, len(ranked)):
            if not active[j]:
                continue
            if iou(box_a.rect, ranked[j].rect) > iou_threshold:
                active[j] = False
                active_count -= 1
                if active_count <= 0:
                    break
        if active_count <= 0:
            break

    logger.debug("suppress kept %d of %d candidates", len(results), len(ranked))
    return results


def nms(candidates: Sequence[Candidate], cfg: NMSConfig) -> List[Candidate]:
    return suppress(candidates, limit=cfg.max_detections, iou_threshold=cfg.iou_threshold)
