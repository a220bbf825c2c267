"""Base classes and interfaces for candidate loaders, embedders and predictors."""

import asyncio
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional

import numpy as np

if TYPE_CHECKING:
    from .candidates import Candidate, CandidateStore


class DataProvider(ABC):
    """Base class for all data providers."""
    
    @abstractmethod
    def health_check(self) -> bool:
        """Check if the provider is accessible."""
        pass


class CandidateLoader(DataProvider):
    """Abstract interface for loaders that supply session candidates."""
    
    @abstractmethod
    def load(self) -> "CandidateStore":
        """
        Load validated candidates in their source order.
        
        Returns:
            CandidateStore with every accepted candidate
        
        Raises:
            StockMatchError or OSError when the load fails as a whole
        """
        pass
    
    async def load_async(self) -> "CandidateStore":
        """Load candidates on a worker thread so callers can await it."""
        return await asyncio.to_thread(self.load)
    
    def health_check(self) -> bool:
        """Default health check - can be overridden."""
        try:
            self.load()
            return True
        except Exception:
            return False


class Embedder(DataProvider):
    """Abstract interface for word-embedding providers."""
    
    @property
    @abstractmethod
    def dimension(self) -> int:
        """Length of every vector this embedder returns."""
        pass
    
    @abstractmethod
    def vector(self, token: str) -> Optional[np.ndarray]:
        """
        Look up a single token.
        
        Returns:
            Vector of length ``dimension``, or None when the token is unknown
        """
        pass
    
    def health_check(self) -> bool:
        """Embedders are in-memory and always reachable once built."""
        return True


class VolatilityPredictor(ABC):
    """
    Auxiliary per-candidate volatility estimate.
    
    Not consumed by ranking; presentation layers may show it next to a
    candidate.
    """
    
    @abstractmethod
    def predict(self, candidate: "Candidate") -> Optional[float]:
        """Predict volatility for a candidate, or None when unavailable."""
        pass
