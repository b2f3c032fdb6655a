from __future__ import annotations

import math
from typing import Sequence, Union

import numpy as np


def sigmoid(value: float) -> float:
    # Split on sign so exp() never overflows for large |value|.
    if value >= 0:
        return 1.0 / (1.0 + math.exp(-value))
    k = math.exp(value)
    return k / (1.0 + k)


def softmax(values: Union[Sequence[float], np.ndarray]) -> np.ndarray:
    """
    Numerically stable softmax over a 1-D vector of logits.

    The max logit is subtracted before exponentiation. Returns float64
    probabilities that are non-negative and sum to 1.
    """

    v = np.asarray(values, dtype=np.float64)
    if v.ndim != 1:
        raise ValueError(f"softmax expects a 1-D vector, got shape {v.shape}")
    if v.size == 0:
        raise ValueError("softmax of an empty vector is undefined")

    exp = np.exp(v - v.max())
    return exp / exp.sum()


def sigmoid_array(values: np.ndarray) -> np.ndarray:
    """Elementwise sigmoid; saturates to 0/1 instead of overflowing, NaN stays NaN."""
    v = np.asarray(values, dtype=np.float64)
    with np.errstate(over="ignore"):
        return 1.0 / (1.0 + np.exp(-v))
