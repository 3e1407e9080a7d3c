# swr_core/__init__.py

from .errors import SWRError, ConfigurationError, DataError, StatisticalDegenerate
from .params import FilterSpec, SWRParams
from .events import RippleCandidate, RippleEvent
from .detect import Thresholds, amplitude_thresholds, detect_candidates
from .merge import merge_candidates
from .validate import unwrap_phase, count_cycles, validate_candidates
from .score import rank_scores, score_events
from .analyze import SWRResult, detect_swr
from .characterize import CharacterizationResult, characterize_events
from .review import ReviewSession

__all__ = [
    "SWRError",
    "ConfigurationError",
    "DataError",
    "StatisticalDegenerate",
    "FilterSpec",
    "SWRParams",
    "RippleCandidate",
    "RippleEvent",
    "Thresholds",
    "amplitude_thresholds",
    "detect_candidates",
    "merge_candidates",
    "unwrap_phase",
    "count_cycles",
    "validate_candidates",
    "rank_scores",
    "score_events",
    "SWRResult",
    "detect_swr",
    "CharacterizationResult",
    "characterize_events",
    "ReviewSession",
]
