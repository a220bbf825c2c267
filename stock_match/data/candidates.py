"""Candidate records and the per-session candidate store."""

from dataclasses import asdict, dataclass
from typing import Dict, Iterable, Iterator, List, Tuple

import pandas as pd

from ..exceptions import CandidateValidationError


@dataclass(frozen=True)
class Candidate:
    """A single rankable stock."""

    ticker: str
    price: float
    market_cap: float
    pe_ratio: float
    sector: str
    volatility: float
    volatility_category: str = ""
    summary: str = ""

    def __post_init__(self):
        if not self.ticker:
            raise CandidateValidationError("Ticker cannot be empty")
        if not self.price >= 0:
            raise CandidateValidationError(f"{self.ticker}: price must be non-negative")
        if not self.market_cap >= 0:
            raise CandidateValidationError(f"{self.ticker}: market cap must be non-negative")
        if not self.sector:
            raise CandidateValidationError(f"{self.ticker}: sector cannot be empty")

    def to_dict(self) -> Dict[str, object]:
        return asdict(self)


class CandidateStore:
    """Ordered, read-only set of candidates keyed by ticker."""

    def __init__(self, candidates: Iterable[Candidate] = ()):
        self._candidates: Tuple[Candidate, ...] = tuple(candidates)
        self._index: Dict[str, int] = {}
        for i, candidate in enumerate(self._candidates):
            if candidate.ticker in self._index:
                raise CandidateValidationError(f"Duplicate ticker: {candidate.ticker}")
            self._index[candidate.ticker] = i

    def __len__(self) -> int:
        return len(self._candidates)

    def __iter__(self) -> Iterator[Candidate]:
        return iter(self._candidates)

    def __getitem__(self, index: int) -> Candidate:
        return self._candidates[index]

    def __contains__(self, ticker: object) -> bool:
        return ticker in self._index

    @property
    def tickers(self) -> List[str]:
        return [c.ticker for c in self._candidates]

    def index_of(self, ticker: str) -> int:
        """Position of ``ticker`` in load order; KeyError when absent."""
        return self._index[ticker]

    def get(self, ticker: str) -> Candidate:
        return self._candidates[self._index[ticker]]

    def to_frame(self) -> pd.DataFrame:
        """
        Candidates as a DataFrame indexed by ticker, in load order.
        """
        columns = [
            'ticker', 'price', 'market_cap', 'pe_ratio', 'sector',
            'volatility', 'volatility_category', 'summary'
        ]
        df = pd.DataFrame([c.to_dict() for c in self._candidates], columns=columns)
        df.set_index('ticker', inplace=True)
        return df
