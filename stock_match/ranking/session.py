"""Swipe session: presents candidates, applies feedback, produces the shortlist."""

import asyncio
import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Tuple, Union

import pandas as pd

from ..config import get_config
from ..data import Candidate, CandidateLoader, CandidateStore
from ..exceptions import SessionStateError, StockMatchError
from ..features import CandidateFeatureEngine, FeatureMatrix
from ..models import PreferenceModel
from .ranker import Ranker
from .traversal import TRAVERSALS, FinalPool, TraversalMode, TraversalStrategy, create_traversal

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    LOADING = 'loading'
    AWAITING_FEEDBACK = 'awaiting_feedback'
    COMPLETED = 'completed'


@dataclass(frozen=True)
class FeedbackEvent:
    """One applied swipe."""

    swipe_number: int
    ticker: str
    liked: bool
    score: float


class SessionController:
    """
    Owns one swipe session.
    
    The controller is the only holder of the preference model. Feedback and
    score queries are serialized; each feedback swaps in a new model, so a
    reader sees the weights either before or after an update.
    """
    
    def __init__(
        self,
        feature_engine: Optional[CandidateFeatureEngine] = None,
        mode: Union[TraversalMode, str, None] = None,
        swipe_budget: Optional[int] = None,
        recommendation_count: Optional[int] = None,
        final_pool: Union[FinalPool, str, None] = None
    ):
        """
        Initialize a session in the LOADING state.
        
        Args:
            feature_engine: Engine used to build the feature matrix
            mode: 'sequential' or 'greedy' traversal
            swipe_budget: Feedback events accepted before the session ends
            recommendation_count: Size of the final shortlist
            final_pool: 'full_corpus' or 'remaining'; defaults per mode
        """
        config = get_config()
        self.feature_engine = feature_engine
        self.mode = TraversalMode(mode or config.traversal_mode)
        self.swipe_budget = config.swipe_budget if swipe_budget is None else swipe_budget
        self.recommendation_count = (
            config.recommendation_count if recommendation_count is None else recommendation_count
        )
        if self.swipe_budget < 0:
            raise ValueError("swipe_budget must be non-negative")
        if self.recommendation_count < 0:
            raise ValueError("recommendation_count must be non-negative")
        
        pool = final_pool or config.final_pool
        self._final_pool_override = FinalPool(pool) if pool else None
        
        self._lock = threading.RLock()
        self._state = SessionState.LOADING
        self._ranker: Optional[Ranker] = None
        self._model: Optional[PreferenceModel] = None
        self._traversal: Optional[TraversalStrategy] = None
        self._current_index: Optional[int] = None
        self._swipe_count = 0
        self._history: List[FeedbackEvent] = []
        self._recommendations: List[Candidate] = []
    
    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------
    
    def _engine(self) -> CandidateFeatureEngine:
        if self.feature_engine is None:
            self.feature_engine = CandidateFeatureEngine()
        return self.feature_engine
    
    def start(self, candidates: Union[CandidateStore, Iterable[Candidate]]) -> None:
        """Build features for ``candidates`` and begin the session."""
        store = candidates if isinstance(candidates, CandidateStore) else CandidateStore(candidates)
        matrix = self._engine().build_feature_matrix(store)
        self._begin(store, matrix)
    
    async def load(self, loader: CandidateLoader) -> None:
        """
        Load candidates and build features off the event loop, then begin.
        
        A failed load leaves the session COMPLETED with no candidates.
        """
        with self._lock:
            self._state = SessionState.LOADING
        
        try:
            store = await loader.load_async()
        except (StockMatchError, OSError) as e:
            logger.warning("Candidate load failed: %s", e)
            store = CandidateStore()
        
        matrix = await asyncio.to_thread(self._engine().build_feature_matrix, store)
        self._begin(store, matrix)
    
    def _begin(self, store: CandidateStore, matrix: FeatureMatrix) -> None:
        with self._lock:
            self._ranker = Ranker(store, matrix)
            self._model = PreferenceModel.zeros(matrix.dimension)
            self._traversal = create_traversal(self.mode, len(store))
            self._swipe_count = 0
            self._history = []
            self._recommendations = []
            self._current_index = None
            
            if len(store) == 0 or self.swipe_budget == 0:
                self._complete()
                return
            
            self._state = SessionState.AWAITING_FEEDBACK
            self._current_index = self._traversal.next_index(self._ranker, self._model)
            logger.info(
                "Session started: %d candidates, %s traversal, budget %d",
                len(store), self.mode.value, self.swipe_budget
            )
    
    # ------------------------------------------------------------------
    # Feedback loop
    # ------------------------------------------------------------------
    
    def submit_feedback(self, liked: bool) -> Optional[Candidate]:
        """
        Apply like/dislike to the presented candidate and move on.
        
        Returns:
            The next candidate to present, or None once the session completed
        """
        with self._lock:
            if self._state != SessionState.AWAITING_FEEDBACK:
                raise SessionStateError(f"Cannot accept feedback while {self._state.value}")
            
            index = self._current_index
            feature_vector = self._ranker.feature_matrix.row(index)
            score = self._model.score(feature_vector)
            self._model = self._model.update(feature_vector, liked)
            self._traversal.mark_presented(index)
            self._swipe_count += 1
            self._history.append(FeedbackEvent(
                swipe_number=self._swipe_count,
                ticker=self._ranker.candidates[index].ticker,
                liked=bool(liked),
                score=score,
            ))
            logger.debug(
                "Swipe %d/%d: %s %s",
                self._swipe_count, self.swipe_budget,
                'liked' if liked else 'disliked',
                self._ranker.candidates[index].ticker
            )
            
            if self._swipe_count >= self.swipe_budget or self._traversal.exhausted:
                self._complete()
                return None
            
            self._current_index = self._traversal.next_index(self._ranker, self._model)
            return self.current_candidate
    
    def like(self) -> Optional[Candidate]:
        return self.submit_feedback(True)
    
    def dislike(self) -> Optional[Candidate]:
        return self.submit_feedback(False)
    
    def _complete(self) -> None:
        indices = None
        if self.final_pool == FinalPool.REMAINING:
            indices = self._traversal.remaining()
        self._recommendations = self._ranker.get_top_recommendations(
            self._model, self.recommendation_count, indices
        )
        self._current_index = None
        self._state = SessionState.COMPLETED
        logger.info(
            "Session completed after %d swipes with %d recommendations",
            self._swipe_count, len(self._recommendations)
        )
    
    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------
    
    @property
    def state(self) -> SessionState:
        return self._state
    
    @property
    def final_pool(self) -> FinalPool:
        if self._final_pool_override is not None:
            return self._final_pool_override
        return TRAVERSALS[self.mode].default_final_pool
    
    @property
    def swipe_count(self) -> int:
        return self._swipe_count
    
    @property
    def candidates(self) -> CandidateStore:
        if self._ranker is None:
            return CandidateStore()
        return self._ranker.candidates
    
    @property
    def feature_names(self) -> Tuple[str, ...]:
        if self._ranker is None:
            return ()
        return self._ranker.feature_matrix.feature_names

    @property
    def current_candidate(self) -> Optional[Candidate]:
        with self._lock:
            if self._current_index is None:
                return None
            return self._ranker.candidates[self._current_index]
    
    @property
    def model(self) -> Optional[PreferenceModel]:
        return self._model
    
    @property
    def feedback_history(self) -> List[FeedbackEvent]:
        return list(self._history)
    
    @property
    def recommendations(self) -> List[Candidate]:
        """Final shortlist; only available once the session completed."""
        if self._state != SessionState.COMPLETED:
            raise SessionStateError("Recommendations are available once the session completes")
        return list(self._recommendations)
    
    def score_table(self) -> pd.DataFrame:
        """Current score and rank of every candidate."""
        with self._lock:
            if self._ranker is None:
                raise SessionStateError("Session has not loaded any candidates")
            return self._ranker.score_table(self._model)
