"""Input adapters for LineageHub."""

from .base import ObservationAdapter
from .common import expand_input_paths
from .long_csv import LongObservationCsvAdapter
from .rank_table import prefecture_from_rank_filename, read_rank_table
from .wide_csv import WideRatioCsvAdapter

__all__ = [
    "ObservationAdapter",
    "LongObservationCsvAdapter",
    "WideRatioCsvAdapter",
    "expand_input_paths",
    "prefecture_from_rank_filename",
    "read_rank_table",
]
