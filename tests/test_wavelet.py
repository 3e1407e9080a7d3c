from __future__ import annotations

import numpy as np
import pytest

from swr_core.errors import ConfigurationError
from swr_core.signal.wavelet import fft_convolve, morlet_bank, morlet_wavelet, wavconv


def test_morlet_kernel_is_odd_l1_normalised_and_centred() -> None:
    for freq in (80.0, 120.0, 250.0):
        kernel = morlet_wavelet(freq, 5, 1000.0)
        assert kernel.size % 2 == 1
        assert np.sum(np.abs(kernel)) == pytest.approx(1.0)
        assert int(np.argmax(np.abs(kernel))) == (kernel.size - 1) // 2


def test_lower_frequencies_get_longer_kernels() -> None:
    bank = morlet_bank([80.0, 160.0, 240.0], 5, 1000.0)
    sizes = [k.size for k in bank]
    assert sizes[0] > sizes[1] > sizes[2]


def test_fft_convolution_matches_direct_same_mode(rng: np.random.Generator) -> None:
    signal = rng.standard_normal(500)
    kernel = morlet_wavelet(100.0, 5, 1000.0)

    expected = np.convolve(signal, kernel, mode="same")
    result = fft_convolve(kernel, signal)

    assert result.shape == signal.shape
    assert np.allclose(result, expected)


def test_wavconv_rows_align_with_per_row_convolution(rng: np.random.Generator) -> None:
    signal = rng.standard_normal(700)
    freqs = [90.0, 150.0, 220.0]

    coeff = wavconv(signal, freqs, 5, 1000.0)

    assert coeff.shape == (3, 700)
    assert np.iscomplexobj(coeff)
    for row, f in zip(coeff, freqs):
        assert np.allclose(row, fft_convolve(morlet_wavelet(f, 5, 1000.0), signal))


def test_pure_sinusoid_peaks_at_nearest_bin() -> None:
    fs = 1000.0
    f0 = 131.4
    t = np.arange(4000) / fs
    signal = np.sin(2 * np.pi * f0 * t)
    freqs = np.arange(80, 251, dtype=float)

    amp = np.abs(wavconv(signal, freqs, 5, fs))
    profile = amp[:, 500:-500].mean(axis=1)

    assert freqs[int(np.argmax(profile))] == 131.0


def test_unit_sinusoid_gives_half_amplitude_at_every_matching_frequency() -> None:
    fs = 2000.0
    t = np.arange(6000) / fs
    for f0 in (90.0, 200.0):
        amp = np.abs(wavconv(np.sin(2 * np.pi * f0 * t), [f0], 5, fs))[0]
        assert np.allclose(amp[1000:-1000], 0.5, rtol=1e-3)


def test_threaded_map_matches_serial(rng: np.random.Generator) -> None:
    signal = rng.standard_normal(1500)
    freqs = np.arange(80, 121, 5, dtype=float)

    serial = wavconv(signal, freqs, 5, 1000.0, n_jobs=1)
    threaded = wavconv(signal, freqs, 5, 1000.0, n_jobs=2)

    assert np.allclose(serial, threaded)


def test_empty_frequency_list_is_a_configuration_error() -> None:
    with pytest.raises(ConfigurationError) as exc:
        wavconv(np.zeros(100), [], 5, 1000.0)
    assert exc.value.parameter == "rp_freqs"
