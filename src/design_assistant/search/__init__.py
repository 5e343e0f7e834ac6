"""
Search Package

Tokenization, tiered candidate fetching, heuristic scoring, optional
semantic reranking and access filtering for design-file retrieval.
"""

from .tokenizer import tokenize, primary_token
from .scoring import ScoredCandidate, score, score_record, rank
from .fetcher import FetchResult, TieredFetcher
from .rerank import PassthroughRanker, SemanticReranker
from .access import can_view, filter_accessible
from .pipeline import SearchPipeline

__all__ = [
    "tokenize",
    "primary_token",
    "ScoredCandidate",
    "score",
    "score_record",
    "rank",
    "FetchResult",
    "TieredFetcher",
    "PassthroughRanker",
    "SemanticReranker",
    "can_view",
    "filter_accessible",
    "SearchPipeline",
]
