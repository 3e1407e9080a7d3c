from __future__ import annotations

import sys
from pathlib import Path

import numpy as np
import pytest


ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


def tukey_burst(
    n: int,
    fs: float,
    *,
    freq: float,
    center: int,
    length: int,
    amplitude: float = 10.0,
) -> np.ndarray:
    """Zero trace of length ``n`` with one tapered sinusoidal burst centred on ``center``."""
    from scipy.signal.windows import tukey

    out = np.zeros(n)
    start = center - length // 2
    t = np.arange(length) / fs
    out[start:start + length] = amplitude * tukey(length, alpha=0.5) * np.sin(2 * np.pi * freq * t)
    return out


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(1234)
