# swr_core/characterize.py
"""
Fine-grained wavelet characterisation of validated ripple events.

Re-runs the Morlet decomposition at a finer frequency grid, but only around
each event (with enough context for the widest kernel), and derives the
spectral features used downstream.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional
import numpy as np
import pandas as pd

from .errors import DataError
from .signal.wavelet import morlet_wavelet, wavconv


@dataclass
class CharacterizationResult:
    rpwin: np.ndarray          # (n, 3) start / peak / end, peak at max wavelet power
    rpdur: np.ndarray          # s
    domfreq: np.ndarray        # Hz, mode of the time-averaged power spectrum
    entropy: np.ndarray        # bits
    power: np.ndarray          # max |c|^2 (AU)
    iei: np.ndarray            # forward inter-event interval of peaks (s), NaN for the last
    instfreq: List[np.ndarray]
    instphase: List[np.ndarray]

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame({
            "IEI (s)": self.iei,
            "Duration (s)": self.rpdur,
            "Frequency (Hz)": self.domfreq,
            "Entropy (bits)": self.entropy,
            "Power (AU)": self.power,
        })


def characterize_events(
    fdata_lfp: np.ndarray,
    fs: float,
    rpwin: np.ndarray,
    *,
    freqs: Optional[np.ndarray] = None,
    wav_cycles: float = 5.0,
    manvalid: Optional[np.ndarray] = None,
    n_jobs: int = 1,
) -> CharacterizationResult:
    """
    Characterise each event window of ``rpwin`` (n, 3).

    Parameters
    ----------
    fdata_lfp : np.ndarray
        Preprocessed trace the events were detected on.
    rpwin : np.ndarray
        Start / peak / end sample indices (inclusive).
    freqs : np.ndarray, optional
        Frequency grid; defaults to 80-250 Hz in 0.25 Hz steps.
    manvalid : np.ndarray, optional
        Boolean review flags; only flagged events are characterised.
    """
    x = np.asarray(fdata_lfp, dtype=float).ravel()
    win = np.asarray(rpwin, dtype=int).reshape(-1, 3)
    freqs = np.arange(80, 250.25, 0.25) if freqs is None else np.asarray(freqs, dtype=float)

    if manvalid is not None:
        sel = np.asarray(manvalid, dtype=bool).ravel()
        if sel.size != win.shape[0]:
            raise DataError("characterize", f"manvalid has {sel.size} flags for {win.shape[0]} events",
                            index=min(sel.size, win.shape[0]))
        win = win[sel]
    win = win.copy()
    if win.size and (win[:, 0].min() < 0 or win[:, 2].max() >= x.size):
        bad = int(np.flatnonzero((win[:, 0] < 0) | (win[:, 2] >= x.size))[0])
        raise DataError("characterize", "event window outside the trace", index=bad)

    # context needed by the longest (lowest-frequency) kernel
    ctx = (morlet_wavelet(float(freqs.min()), wav_cycles, fs).size - 1) // 2

    n = win.shape[0]
    domfreq = np.zeros(n)
    entropy = np.zeros(n)
    power = np.zeros(n)
    instfreq: List[np.ndarray] = []
    instphase: List[np.ndarray] = []

    for r, (s, _, e) in enumerate(win):
        lo, hi = max(0, s - ctx), min(x.size, e + ctx + 1)
        coeff = wavconv(x[lo:hi], freqs, wav_cycles, fs, n_jobs=n_jobs)[:, s - lo:e - lo + 1]
        tmppower = np.abs(coeff) ** 2
        tmpphase = np.angle(coeff)

        power[r] = tmppower.max()
        win[r, 1] = s + int(np.argmax(tmppower.max(axis=0)))

        pf = tmppower.mean(axis=1)
        pf = pf / pf.sum()
        domfreq[r] = freqs[int(np.argmax(pf))]
        nz = pf[pf > 0]
        entropy[r] = -np.sum(nz * np.log2(nz))

        best = np.argmax(tmppower, axis=0)
        instfreq.append(freqs[best])
        instphase.append(tmpphase[best, np.arange(tmpphase.shape[1])])

    iei = np.append(np.diff(win[:, 1]) / fs, np.nan) if n else np.empty(0)

    return CharacterizationResult(
        rpwin=win,
        rpdur=(win[:, 2] - win[:, 0]) / fs,
        domfreq=domfreq,
        entropy=entropy,
        power=power,
        iei=iei,
        instfreq=instfreq,
        instphase=instphase,
    )
