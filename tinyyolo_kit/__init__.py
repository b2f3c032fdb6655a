"""
Decoding and filtering for single-scale YOLO grid detectors.

Turns the raw `(1, 13, 13, 125)` output of a Tiny YOLOv2 style model into a
short list of labeled boxes: grid decode with anchors, per-cell class
scoring, confidence thresholding and greedy NMS. The core depends only on
NumPy; OpenCV and ONNX Runtime are needed for the frame/backend helpers.
"""

from .types import Candidate, Rect
from .config import DEFAULT_ANCHORS, GridConfig, load_grid_config
from .mathops import sigmoid, softmax
from .tensor import RawOutput
from .decode import GridDecoder, decode
from .nms import NMSConfig, iou, nms, suppress
from .preprocess import crop_square, prepare_frame, transform_input
from .metadata import load_labels
from .runtime import DetectorPipeline, load_pipeline, to_nhwc
from .visualize import draw_candidates, scale_rect

__all__ = [
    "Candidate",
    "Rect",
    "DEFAULT_ANCHORS",
    "GridConfig",
    "load_grid_config",
    "sigmoid",
    "softmax",
    "RawOutput",
    "GridDecoder",
    "decode",
    "NMSConfig",
    "iou",
    "nms",
    "suppress",
    "crop_square",
    "prepare_frame",
    "transform_input",
    "load_labels",
    "DetectorPipeline",
    "load_pipeline",
    "to_nhwc",
    "draw_candidates",
    "scale_rect",
]
