from __future__ import annotations

from typing import Optional

import numpy as np

from .config import GridConfig


def _require_image(image: np.ndarray) -> None:
    if image is None or not hasattr(image, "shape"):
        raise TypeError("image must be a NumPy array (H, W, 3).")
    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(f"Expected image shape (H, W, 3), got {getattr(image, 'shape', None)}")


def crop_square(image: np.ndarray) -> np.ndarray:
    """
    Center-crop the largest square that fits in `image`.

    Offsets are floored, so an odd leftover puts the extra pixel on the
    right/bottom edge.
    """

    _require_image(image)
    h, w = image.shape[:2]
    side = min(h, w)
    top = (h - side) // 2
    left = (w - side) // 2
    return image[top : top + side, left : left + side]


def transform_input(image: np.ndarray, config: Optional[GridConfig] = None) -> np.ndarray:
    """
    Convert an RGB (H, W, 3) image into the model's NHWC float32 input.

    Pixels are normalized as `(value - image_mean) / image_std`; with the
    default config the raw 0..255 range is passed through.
    """

    cfg = config if config is not None else GridConfig()
    _require_image(image)
    blob = (image.astype(np.float32) - np.float32(cfg.image_mean)) / np.float32(cfg.image_std)
    return blob[None, ...]


def prepare_frame(image: np.ndarray, config: Optional[GridConfig] = None) -> np.ndarray:
    """
    Crop a camera frame to a square, resize it to `image_size` and normalize.
    """

    try:
        import cv2  # type: ignore
    except Exception as e:  # pragma: no cover
        raise ImportError("OpenCV is required for prepare_frame(). Install with `pip install opencv-python`.") from e

    cfg = config if config is not None else GridConfig()
    square = crop_square(image)
    size = cfg.image_size
    if square.shape[0] != size:
        square = cv2.resize(square, (size, size), interpolation=cv2.INTER_LINEAR)
    return transform_input(square, cfg)
