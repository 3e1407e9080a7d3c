# load.py
import numpy as np
import scipy.io as sio
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

# --------------------------------------------------------------------------------
# Column layout of Data.dspon_data
# --------------------------------------------------------------------------------
TIME_COL = 0
LFP_COL = 1
VEL_COL = 2

# --------------------------------------------------------------------------------
# Loaded recording
# --------------------------------------------------------------------------------
@dataclass
class Datproc:
    """One processed recording: LFP, velocity and any previous review state."""
    name:        str
    lfp:         np.ndarray
    velocity:    np.ndarray
    fs:          float
    interp_mask: Optional[np.ndarray] = None
    manvalid:    Optional[np.ndarray] = None


def _field(obj, key):
    """Field access that works for mat_struct objects, dicts and h5py groups."""
    if isinstance(obj, dict):
        return obj.get(key)
    if hasattr(obj, "_fieldnames"):
        return getattr(obj, key) if key in obj._fieldnames else None
    try:
        return obj[key] if key in obj else None
    except TypeError:
        return None


def _read_v73(mat_path: Path) -> Datproc:
    import h5py
    with h5py.File(mat_path, "r") as f:
        if "Data" not in f:
            raise KeyError(f"'Data' missing in {mat_path}")
        data = f["Data"]
        # MATLAB stores column-major: (3, T) on the HDF5 side
        dspon = np.asarray(data["dspon_data"][()], dtype=float)
        if dspon.shape[0] != dspon.shape[1] and dspon.shape[0] <= 3:
            dspon = dspon.T
        fs = float(np.asarray(data["nFs"][()]).squeeze())
        interp = manvalid = None
        swr = _field(data, "SWR")
        if swr is not None:
            if "interpvec" in swr:
                interp = np.asarray(swr["interpvec"][()]).astype(bool).ravel()
            if "manvalid" in swr:
                manvalid = np.asarray(swr["manvalid"][()]).astype(bool).ravel()
    print(f"Loaded {dspon.shape[0]} samples at {fs:g} Hz from {mat_path.name}.")
    return Datproc(mat_path.stem, dspon[:, LFP_COL], dspon[:, VEL_COL], fs, interp, manvalid)


def load_datproc(mat_path: Union[str, Path]) -> Datproc:
    """
    Load a processed recording saved as a MATLAB ``Data`` struct.

    Parameters:
      mat_path (str | Path): file holding ``Data.dspon_data`` ([time, lfp, velocity]
                             columns), ``Data.nFs`` and optionally ``Data.SWR``

    Returns:
      Datproc: traces, sampling rate and any stored interp mask / review flags
    """
    mat_path = Path(mat_path)
    if not mat_path.is_file():
        raise FileNotFoundError(f"Could not find {mat_path}")

    try:
        S = sio.loadmat(mat_path, squeeze_me=True, struct_as_record=False)
    except NotImplementedError:
        # v7.3 files are HDF5 containers
        return _read_v73(mat_path)

    if "Data" not in S:
        raise KeyError(f"'Data' missing in {mat_path}")
    data = S["Data"]
    dspon = np.atleast_2d(np.asarray(_field(data, "dspon_data"), dtype=float))
    fs = float(np.asarray(_field(data, "nFs")).squeeze())

    interp = manvalid = None
    swr = _field(data, "SWR")
    if swr is not None:
        iv = _field(swr, "interpvec")
        mv = _field(swr, "manvalid")
        interp = None if iv is None else np.asarray(iv).astype(bool).ravel()
        manvalid = None if mv is None else np.asarray(mv).astype(bool).ravel()

    print(f"Loaded {dspon.shape[0]} samples at {fs:g} Hz from {mat_path.name}.")
    return Datproc(mat_path.stem, dspon[:, LFP_COL], dspon[:, VEL_COL], fs, interp, manvalid)


def save_swr(out_path: Union[str, Path], result) -> Path:
    """
    Write the ``SWR`` fields of a :class:`~swr_core.analyze.SWRResult`.

    Indices are stored 0-based, exactly as returned by the detector.
    """
    out_path = Path(out_path)
    swr = {
        "data_lfp":  result.fdata_lfp,
        "inclvec":   result.incl_mask,
        "interpvec": result.interp_mask,
        "scores":    result.scores,
        "manvalid":  result.manvalid,
        "rpwin":     result.rpwin,
        "rpdur":     result.rpdur,
        "rppow":     result.rppow,
        "rpfrq":     result.rpfrq,
        "params":    {k: v for k, v in result.params.to_dict().items() if v is not None},
    }
    sio.savemat(out_path, {"SWR": swr}, do_compression=True)
    print(f"Finished saving to {out_path}!")
    return out_path


def load_swr(mat_path: Union[str, Path]) -> dict:
    """Read back the review state written by :func:`save_swr`."""
    S = sio.loadmat(Path(mat_path), squeeze_me=True, struct_as_record=False)
    if "SWR" not in S:
        raise KeyError(f"'SWR' missing in {mat_path}")
    swr = S["SWR"]
    rpwin = _field(swr, "rpwin")
    return {
        "interp_mask": np.asarray(_field(swr, "interpvec")).astype(bool).ravel(),
        "incl_mask":   np.asarray(_field(swr, "inclvec")).astype(bool).ravel(),
        "manvalid":    np.atleast_1d(np.asarray(_field(swr, "manvalid"))).astype(bool).ravel(),
        "rpwin":       np.asarray(rpwin, dtype=int).reshape(-1, 3),
    }
