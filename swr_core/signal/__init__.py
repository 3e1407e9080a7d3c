# swr_core/signal/__init__.py

from .preprocess import interpolate_gaps, apply_filters, preprocess_lfp
from .wavelet import morlet_wavelet, morlet_bank, fft_convolve, wavconv
from .inclusion import (
    mask_to_windows,
    windows_to_mask,
    window_indices,
    movement_inclusion,
    artifact_windows_to_interp_mask,
)

__all__ = [
    "interpolate_gaps",
    "apply_filters",
    "preprocess_lfp",
    "morlet_wavelet",
    "morlet_bank",
    "fft_convolve",
    "wavconv",
    "mask_to_windows",
    "windows_to_mask",
    "window_indices",
    "movement_inclusion",
    "artifact_windows_to_interp_mask",
]
