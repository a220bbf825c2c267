"""Word-embedding providers."""

import logging
from pathlib import Path
from typing import Dict, Mapping, Optional, Sequence, Union

import numpy as np

from .base import Embedder
from ..config import get_config
from ..exceptions import FeatureDimensionError

logger = logging.getLogger(__name__)


class WordVectorEmbedder(Embedder):
    """In-memory token -> vector lookup table."""
    
    def __init__(self, vectors: Mapping[str, Sequence[float]], dimension: int = 300):
        """
        Initialize embedder.
        
        Args:
            vectors: Mapping of token to vector
            dimension: Expected length of every vector
        """
        self._dimension = dimension
        self._vectors: Dict[str, np.ndarray] = {}
        for token, vector in vectors.items():
            array = np.asarray(vector, dtype=float)
            if array.shape != (dimension,):
                raise FeatureDimensionError(
                    f"Vector for {token!r} has shape {array.shape}, expected ({dimension},)"
                )
            array.setflags(write=False)
            self._vectors[token] = array
    
    @property
    def dimension(self) -> int:
        return self._dimension
    
    def __len__(self) -> int:
        return len(self._vectors)
    
    def vector(self, token: str) -> Optional[np.ndarray]:
        return self._vectors.get(token)
    
    @classmethod
    def from_text_file(
        cls,
        path: Union[str, Path],
        dimension: int = 300,
        limit: Optional[int] = None
    ) -> "WordVectorEmbedder":
        """
        Read vectors in GloVe / word2vec text format.
        
        Each line is a token followed by ``dimension`` floats. A word2vec
        "<count> <dimension>" header line is ignored, as are lines of the
        wrong width.
        
        Args:
            path: Vector file path
            dimension: Expected vector length
            limit: Stop after this many vectors (files are frequency sorted)
        """
        vectors: Dict[str, np.ndarray] = {}
        skipped = 0
        with open(path, 'r', encoding='utf-8') as f:
            for line in f:
                parts = line.rstrip().split(' ')
                if len(parts) != dimension + 1:
                    skipped += 1
                    continue
                try:
                    vectors[parts[0]] = np.array(parts[1:], dtype=float)
                except ValueError:
                    skipped += 1
                    continue
                if limit is not None and len(vectors) >= limit:
                    break
        
        if skipped:
            logger.debug("Ignored %d lines in %s", skipped, path)
        logger.info("Loaded %d word vectors from %s", len(vectors), path)
        return cls(vectors, dimension=dimension)


class NullEmbedder(Embedder):
    """Embedder with an empty vocabulary; every text embeds to zeros."""
    
    def __init__(self, dimension: int = 300):
        self._dimension = dimension
    
    @property
    def dimension(self) -> int:
        return self._dimension
    
    def vector(self, token: str) -> Optional[np.ndarray]:
        return None


def get_embedder() -> Embedder:
    """
    Factory function to get the configured embedder.
    
    Returns:
        Embedder instance
    """
    config = get_config()
    dimension = config.embedding_dimension
    path = config.embeddings_path
    
    if path is None:
        return NullEmbedder(dimension)
    if not Path(path).exists():
        logger.warning("Word vectors not found at %s, text features disabled", path)
        return NullEmbedder(dimension)
    return WordVectorEmbedder.from_text_file(
        path,
        dimension=dimension,
        limit=config.get('embeddings.limit')
    )
