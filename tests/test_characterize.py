from __future__ import annotations

import numpy as np
import pytest

from conftest import tukey_burst
from swr_core.characterize import characterize_events
from swr_core.errors import DataError


FS = 1000.0


def _two_bursts(rng: np.random.Generator) -> np.ndarray:
    n = 3000
    x = 0.05 * rng.standard_normal(n)
    x += tukey_burst(n, FS, freq=140.0, center=800, length=60)
    x += tukey_burst(n, FS, freq=200.0, center=2000, length=60, amplitude=5.0)
    return x


def test_features_of_clean_bursts(rng: np.random.Generator) -> None:
    x = _two_bursts(rng)
    rpwin = np.array([[770, 790, 830], [1970, 1980, 2030]])
    freqs = np.arange(80, 251, 1.0)

    res = characterize_events(x, FS, rpwin, freqs=freqs)

    assert res.domfreq.tolist() == pytest.approx([140.0, 200.0], abs=3.0)
    assert abs(res.rpwin[0, 1] - 800) <= 10
    assert abs(res.rpwin[1, 1] - 2000) <= 10
    assert res.rpdur.tolist() == pytest.approx([0.060, 0.060])
    assert res.power[0] > res.power[1]
    assert res.iei[0] == pytest.approx((res.rpwin[1, 1] - res.rpwin[0, 1]) / FS)
    assert np.isnan(res.iei[-1])
    assert np.all(res.entropy > 0)
    assert [len(f) for f in res.instfreq] == [61, 61]
    assert [len(p) for p in res.instphase] == [61, 61]

    frame = res.to_frame()
    assert list(frame.columns) == ["IEI (s)", "Duration (s)", "Frequency (Hz)",
                                   "Entropy (bits)", "Power (AU)"]
    assert len(frame) == 2


def test_only_validated_events_are_characterised(rng: np.random.Generator) -> None:
    x = _two_bursts(rng)
    rpwin = np.array([[770, 790, 830], [1970, 1980, 2030]])

    res = characterize_events(x, FS, rpwin, freqs=np.arange(80, 251, 2.0),
                              manvalid=np.array([False, True]))

    assert res.rpwin.shape == (1, 3)
    assert res.rpwin[0, 0] == 1970
    assert np.isnan(res.iei[0])


def test_segment_matches_full_trace_transform(rng: np.random.Generator) -> None:
    from swr_core.signal.wavelet import wavconv

    x = _two_bursts(rng)
    freqs = np.arange(80, 251, 10.0)
    s, e = 770, 830

    res = characterize_events(x, FS, np.array([[s, 800, e]]), freqs=freqs)

    power = np.abs(wavconv(x, freqs, 5, FS)[:, s:e + 1]) ** 2
    assert res.power[0] == pytest.approx(power.max())


def test_bad_inputs() -> None:
    x = np.zeros(100)
    with pytest.raises(DataError):
        characterize_events(x, FS, np.array([[90, 95, 120]]))
    with pytest.raises(DataError):
        characterize_events(x, FS, np.array([[10, 15, 20]]), manvalid=np.array([True, False]))


def test_no_events() -> None:
    res = characterize_events(np.zeros(100), FS, np.empty((0, 3), dtype=int))
    assert res.rpwin.shape == (0, 3)
    assert res.iei.size == 0
    assert res.to_frame().empty
