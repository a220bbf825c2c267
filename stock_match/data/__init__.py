"""Data access layer for candidates and word embeddings."""

from .base import CandidateLoader, Embedder, VolatilityPredictor
from .candidates import Candidate, CandidateStore
from .csv_loader import CsvCandidateLoader, LoadReport, RowResult, parse_candidates, parse_row
from .embeddings import NullEmbedder, WordVectorEmbedder, get_embedder

__all__ = [
    'Candidate',
    'CandidateStore',
    'CandidateLoader',
    'CsvCandidateLoader',
    'LoadReport',
    'RowResult',
    'parse_candidates',
    'parse_row',
    'Embedder',
    'NullEmbedder',
    'WordVectorEmbedder',
    'get_embedder',
    'VolatilityPredictor',
]
