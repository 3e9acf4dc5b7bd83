"""Core LineageHub primitives.

This package turns per-prefecture, per-week lineage ratio tables into
normalized weekly shares, heatmap matrices and per-week rankings, and
provides the ingestion, storage and publication around them.
"""

from .aggregation import aggregate, aggregate_by_prefecture, shares_frame, to_lineage_shares, week_totals
from .config import (
    COMBINED_WAVE_LABEL,
    DEFAULT_OVERFLOW_RANK,
    DEFAULT_TOP_K,
    SUPPORTED_WAVES,
    MalformedWeekStrategy,
    ValidationPolicy,
    ValueScale,
    load_ingestion_config,
)
from .errors import (
    EmptyInputError,
    IngestionConfigError,
    LineageHubError,
    MalformedDateError,
    UnknownAdapterError,
    UnknownPrefectureError,
    UnknownWaveError,
)
from .matrix import build_heat_cells, build_matrix, matrix_frame, ordered_lineages, ordered_weeks
from .models import (
    DominantLineage,
    HeatCell,
    LineageShare,
    Observation,
    RankEntry,
    RankMismatch,
    RawObservation,
    WeekKey,
)
from .pipeline import IngestionPipeline, IngestionReport
from .quality import ObservationValidator, ValidationIssue, ValidationResult
from .ranking import build_ranks, compare_ranks, dominant_lineages, rank_entries, select_top_lineages
from .registry import AdapterPluginSpec, AdapterRegistry, build_default_adapter_registry
from .selection import COMBINED, WaveSelection, all_selections, parse_wave
from .service import LineageViewService, PrefectureSummary, SelectionViews
from .weeks import canonicalize, normalize, render

__all__ = [
    "WeekKey",
    "Observation",
    "RawObservation",
    "LineageShare",
    "RankEntry",
    "HeatCell",
    "DominantLineage",
    "RankMismatch",
    "COMBINED",
    "COMBINED_WAVE_LABEL",
    "DEFAULT_OVERFLOW_RANK",
    "DEFAULT_TOP_K",
    "SUPPORTED_WAVES",
    "MalformedWeekStrategy",
    "ValidationPolicy",
    "ValueScale",
    "LineageHubError",
    "MalformedDateError",
    "EmptyInputError",
    "UnknownWaveError",
    "UnknownPrefectureError",
    "UnknownAdapterError",
    "IngestionConfigError",
    "IngestionPipeline",
    "IngestionReport",
    "ObservationValidator",
    "ValidationIssue",
    "ValidationResult",
    "AdapterRegistry",
    "AdapterPluginSpec",
    "LineageViewService",
    "SelectionViews",
    "PrefectureSummary",
    "WaveSelection",
    "aggregate",
    "aggregate_by_prefecture",
    "all_selections",
    "build_default_adapter_registry",
    "build_heat_cells",
    "build_matrix",
    "build_ranks",
    "canonicalize",
    "compare_ranks",
    "dominant_lineages",
    "load_ingestion_config",
    "matrix_frame",
    "normalize",
    "ordered_lineages",
    "ordered_weeks",
    "parse_wave",
    "rank_entries",
    "render",
    "select_top_lineages",
    "shares_frame",
    "to_lineage_shares",
    "week_totals",
]
