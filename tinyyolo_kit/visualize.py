from __future__ import annotations

from typing import Iterable, Tuple

import numpy as np

from .types import Candidate, Rect


def scale_rect(rect: Rect, scale: float = 1.0, shift: Tuple[float, float] = (0.0, 0.0)) -> Rect:
    """
    Map a rect from model space into display space: `value * scale + shift`.
    """

    shift_x, shift_y = shift
    return Rect(
        x=rect.x * scale + shift_x,
        y=rect.y * scale + shift_y,
        width=rect.width * scale,
        height=rect.height * scale,
    )


def format_label(candidate: Candidate) -> str:
    return f"{candidate.label}: {int(candidate.confidence * 100)}%"


def draw_candidates(
    image: np.ndarray,
    candidates: Iterable[Candidate],
    *,
    scale: float = 1.0,
    shift: Tuple[float, float] = (0.0, 0.0),
    color: Tuple[int, int, int] = (255, 0, 0),
    box_thickness: int = 4,
    font_scale: float = 0.6,
    font_thickness: int = 1,
) -> np.ndarray:
    """
    Draw candidate boxes and "label: NN%" captions on an (H, W, 3) image and return a copy.

    Args:
        image: image the boxes are drawn on.
        candidates: boxes in model pixel space.
        scale, shift: mapping from model space into `image` space (see `scale_rect`).
    """

    try:
        import cv2  # type: ignore
    except Exception as e:  # pragma: no cover
        raise ImportError("OpenCV is required for draw_candidates(). Install with `pip install opencv-python`.") from e

    if image is None or not hasattr(image, "shape"):
        raise TypeError("image must be a NumPy array (H, W, 3).")
    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(f"Expected image shape (H, W, 3), got {getattr(image, 'shape', None)}")

    out = image.copy()
    h, w = out.shape[:2]

    for cand in candidates:
        rect = scale_rect(cand.rect, scale, shift)
        x1, y1, x2, y2 = rect.as_xyxy()
        x1i = int(np.clip(round(x1), 0, w - 1))
        y1i = int(np.clip(round(y1), 0, h - 1))
        x2i = int(np.clip(round(x2), 0, w - 1))
        y2i = int(np.clip(round(y2), 0, h - 1))

        cv2.rectangle(out, (x1i, y1i), (x2i, y2i), color, thickness=box_thickness)

        # Caption sits inside the top-left corner of the box.
        (_, th), _ = cv2.getTextSize(format_label(cand), cv2.FONT_HERSHEY_SIMPLEX, font_scale, font_thickness)
        cv2.putText(
            out,
            format_label(cand),
            (min(x1i + 10, w - 1), min(y1i + 10 + th, h - 1)),
            cv2.FONT_HERSHEY_SIMPLEX,
            font_scale,
            color,
            thickness=font_thickness,
            lineType=cv2.LINE_AA,
        )

    return out
