from __future__ import annotations

from pathlib import Path
from typing import Callable, List, Optional, Sequence, Union

import numpy as np

from .config import GridConfig
from .decode import GridDecoder
from .nms import suppress
from .preprocess import prepare_frame
from .types import Candidate


PathLike = Union[str, Path]


def to_nhwc(output: np.ndarray, config: GridConfig) -> np.ndarray:
    """
    Bring a grid output into `(1, rows, cols, channels)` layout.

    Channels-first exports, shaped `(1, channels, rows, cols)`, are
    transposed. Any other shape is passed through for `RawOutput` to reject.
    """

    p = np.asarray(output)
    channels = config.channel_count
    if p.ndim == 4 and p.shape[1] == channels and p.shape[-1] != channels:
        p = np.transpose(p, (0, 2, 3, 1))
    return p


class DetectorPipeline:
    """
    Plug-and-play pipeline: preprocess -> inference -> grid decode -> NMS.

    Expects RGB frames as `np.ndarray` and returns at most
    `config.max_results` candidates in model (`image_size` square) pixel space.
    Runs synchronously on the calling thread; frame scheduling belongs to the caller.
    """

    def __init__(
        self,
        infer_fn: Callable[[np.ndarray], np.ndarray],
        labels: Sequence[str],
        *,
        config: Optional[GridConfig] = None,
        backend: Optional[object] = None,
        backend_name: Optional[str] = None,
    ):
        self.config = config if config is not None else GridConfig()
        if len(labels) < self.config.class_count:
            raise ValueError(
                f"Model predicts {self.config.class_count} classes but only {len(labels)} labels were given."
            )
        self._infer_fn = infer_fn
        self.labels = tuple(labels)
        self.backend = backend
        self.backend_name = backend_name
        self.decoder = GridDecoder(self.config)

    def preprocess(self, image: np.ndarray) -> np.ndarray:
        return prepare_frame(image, self.config)

    def postprocess(self, output: np.ndarray) -> List[Candidate]:
        cfg = self.config
        candidates = self.decoder.decode(to_nhwc(output, cfg), self.labels, cfg.confidence_threshold)
        return suppress(candidates, limit=cfg.max_results, iou_threshold=cfg.iou_threshold)

    def __call__(self, image: np.ndarray) -> List[Candidate]:
        blob = self.preprocess(image)
        return self.postprocess(self._infer_fn(blob))


def load_pipeline(
    model_path: PathLike,
    labels: Union[PathLike, Sequence[str]],
    *,
    config: Optional[GridConfig] = None,
    onnx_providers: Optional[Sequence[str]] = None,
    onnx_input_name: Optional[str] = "image",
    onnx_output_name: Optional[str] = "grid",
) -> DetectorPipeline:
    """
    Create a pipeline around an ONNX model on disk.

    Args:
        model_path: path to the `.onnx` model
        labels: label file path (see `load_labels`) or the label sequence itself
        config: model geometry; defaults to Tiny YOLOv2 VOC
    """

    from .backends.onnxruntime_backend import OnnxRuntimeBackend, OnnxRuntimeBackendConfig
    from .metadata import load_labels

    if isinstance(labels, (str, Path)):
        labels = load_labels(labels)

    ort_backend = OnnxRuntimeBackend(
        model_path,
        OnnxRuntimeBackendConfig(
            providers=onnx_providers,
            input_name=onnx_input_name,
            output_name=onnx_output_name,
        ),
    )
    return DetectorPipeline(
        ort_backend.infer,
        labels,
        config=config,
        backend=ort_backend,
        backend_name="onnxruntime",
    )
