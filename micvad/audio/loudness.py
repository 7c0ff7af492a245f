"""Per-frame loudness metric."""

import numpy as np


def frame_loudness(frame: np.ndarray) -> float:
    """Mean absolute sample value of a 16-bit PCM frame.

    Samples are widened before ``abs`` so that -32768 does not wrap around.
    An empty frame has loudness 0.0.
    """
    samples = np.asarray(frame)
    if samples.size == 0:
        return 0.0
    return float(np.mean(np.abs(samples.astype(np.int32))))
