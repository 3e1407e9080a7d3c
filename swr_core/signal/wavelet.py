# swr_core/signal/wavelet.py
"""
Complex Morlet wavelet bank and FFT-based convolution.

Each row of the coefficient matrix is the linear convolution of the trace
with one wavelet, trimmed by half a kernel at both ends so that column ``n``
lines up with sample ``n`` of the input.
"""

from __future__ import annotations
from typing import List, Sequence
import numpy as np
from scipy import fft as sp_fft
from joblib import Parallel, delayed

from ..errors import ConfigurationError, DataError


def morlet_wavelet(freq: float, cycles: float, fs: float) -> np.ndarray:
    """
    Gaussian-windowed complex exponential at ``freq`` Hz.

    sigma = cycles / (2*pi*freq); the kernel spans +/- ceil(4*sigma*fs)
    samples (always odd length) and is L1-normalised so that a unit-amplitude
    sinusoid at ``freq`` yields a coefficient magnitude of 0.5 whatever the
    kernel length.
    """
    sigma = cycles / (2 * np.pi * freq)
    half = int(np.ceil(4 * sigma * fs))
    t = np.arange(-half, half + 1) / fs
    wavelet = np.exp(2j * np.pi * freq * t) * np.exp(-t ** 2 / (2 * sigma ** 2))
    return wavelet / np.sum(np.abs(wavelet))


def morlet_bank(freqs: Sequence[float], cycles: float, fs: float) -> List[np.ndarray]:
    return [morlet_wavelet(float(f), cycles, fs) for f in freqs]


def fft_convolve(kernel: np.ndarray, signal: np.ndarray) -> np.ndarray:
    """Linear convolution via FFT, trimmed to ``len(signal)`` (centre part)."""
    n_kernel = kernel.size
    n_signal = signal.size
    n_conv = n_kernel + n_signal - 1
    half = (n_kernel - 1) // 2
    nfft = sp_fft.next_fast_len(n_conv)

    res = sp_fft.ifft(sp_fft.fft(kernel, nfft) * sp_fft.fft(signal, nfft), nfft)[:n_conv]
    return res[half:half + n_signal]


def _convolve_row(kernel: np.ndarray, signal_fft: np.ndarray, nfft: int, n_signal: int) -> np.ndarray:
    half = (kernel.size - 1) // 2
    res = sp_fft.ifft(sp_fft.fft(kernel, nfft) * signal_fft, nfft)
    return res[half:half + n_signal]


def wavconv(
    lfp: np.ndarray,
    freqs: Sequence[float],
    cycles: float,
    fs: float,
    *,
    n_jobs: int = 1,
) -> np.ndarray:
    """
    Wavelet-transform ``lfp`` at every frequency in ``freqs``.

    Parameters
    ----------
    lfp : np.ndarray
        1-D trace (N,).
    freqs : sequence of float
        Ascending target frequencies (Hz).
    cycles : float
        Number of wavelet cycles (time/frequency resolution trade-off).
    fs : float
        Sampling rate (Hz).
    n_jobs : int
        joblib workers for the per-frequency map. Rows only read the shared
        trace spectrum, so threads are used.

    Returns
    -------
    np.ndarray
        Complex coefficient matrix (len(freqs), N).
    """
    freqs = np.asarray(freqs, dtype=float).ravel()
    if freqs.size == 0:
        raise ConfigurationError("rp_freqs", [], "frequency list is empty")
    if np.any(freqs <= 0):
        raise ConfigurationError("rp_freqs", freqs.tolist(), "frequencies must be positive")
    x = np.asarray(lfp, dtype=float).ravel()
    if x.size == 0:
        raise DataError("wavelet", "empty trace", index=0)

    bank = morlet_bank(freqs, cycles, fs)

    # one zero-padded spectrum of the trace, long enough for the widest kernel
    n_kernel_max = max(k.size for k in bank)
    nfft = sp_fft.next_fast_len(x.size + n_kernel_max - 1)
    signal_fft = sp_fft.fft(x, nfft)

    rows = Parallel(n_jobs=n_jobs, prefer="threads")(
        delayed(_convolve_row)(kernel, signal_fft, nfft, x.size) for kernel in bank
    )
    return np.vstack(rows)
