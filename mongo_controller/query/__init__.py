from .builder import AggregateBuilder, Stage, StageSequence
from .classifier import build_filter_conditions, build_search_condition, classify_pairs, transform_regexp_search
from .normalizer import normalize
from .pipeline import compute_option, compute_pipeline, compute_post_query, compute_pre_query, compute_sort
from .tokenizer import FilterPair, find_next_pair, iter_pairs
from .update import is_update_query, merge_update_query_data, retrieve_update_query_data

__all__ = [
    "AggregateBuilder",
    "FilterPair",
    "Stage",
    "StageSequence",
    "build_filter_conditions",
    "build_search_condition",
    "classify_pairs",
    "compute_option",
    "compute_pipeline",
    "compute_post_query",
    "compute_pre_query",
    "compute_sort",
    "find_next_pair",
    "is_update_query",
    "iter_pairs",
    "merge_update_query_data",
    "normalize",
    "retrieve_update_query_data",
    "transform_regexp_search",
]
