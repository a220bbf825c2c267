"""
FastAPI server exposing swipe sessions.

Sessions live in process memory. A session is discarded on DELETE or as soon
as its recommendations have been read, so completed sessions do not pile up.
"""

import uuid
from typing import Dict, List, Optional

from fastapi import Depends, FastAPI, HTTPException
from pydantic import BaseModel

from .. import __version__
from ..data import Candidate, CandidateLoader, CsvCandidateLoader, VolatilityPredictor
from ..exceptions import SessionStateError
from ..features import CandidateFeatureEngine
from ..ranking import FinalPool, SessionController, TraversalMode


app = FastAPI(title="StockMatch API", version=__version__)


# Request/Response models
class SessionRequest(BaseModel):
    mode: Optional[TraversalMode] = None
    swipe_budget: Optional[int] = None
    recommendation_count: Optional[int] = None
    final_pool: Optional[FinalPool] = None


class FeedbackRequest(BaseModel):
    liked: bool


class CandidateResponse(BaseModel):
    ticker: str
    price: float
    market_cap: float
    pe_ratio: float
    sector: str
    volatility: float
    volatility_category: str
    summary: str
    predicted_volatility: Optional[float] = None


class SessionResponse(BaseModel):
    session_id: str
    state: str
    mode: TraversalMode
    final_pool: FinalPool
    swipe_count: int
    swipe_budget: int
    candidate_count: int
    current: Optional[CandidateResponse] = None


# In-memory sessions; nothing outlives the process
_sessions: Dict[str, SessionController] = {}
_feature_engine: Optional[CandidateFeatureEngine] = None


def get_loader() -> CandidateLoader:
    """Dependency to get the candidate loader."""
    return CsvCandidateLoader()


def get_feature_engine() -> CandidateFeatureEngine:
    """Dependency to get the shared feature engine (word vectors load once)."""
    global _feature_engine
    if _feature_engine is None:
        _feature_engine = CandidateFeatureEngine()
    return _feature_engine


def get_volatility_predictor() -> Optional[VolatilityPredictor]:
    """Dependency for the optional volatility predictor; none by default."""
    return None


def get_session(session_id: str) -> SessionController:
    """Dependency to look up a session."""
    session = _sessions.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail=f"Session {session_id} not found")
    return session


def _candidate_response(
    candidate: Candidate,
    predictor: Optional[VolatilityPredictor]
) -> CandidateResponse:
    predicted = predictor.predict(candidate) if predictor is not None else None
    return CandidateResponse(**candidate.to_dict(), predicted_volatility=predicted)


def _session_response(
    session_id: str,
    session: SessionController,
    predictor: Optional[VolatilityPredictor]
) -> SessionResponse:
    current = session.current_candidate
    return SessionResponse(
        session_id=session_id,
        state=session.state.value,
        mode=session.mode,
        final_pool=session.final_pool,
        swipe_count=session.swipe_count,
        swipe_budget=session.swipe_budget,
        candidate_count=len(session.candidates),
        current=_candidate_response(current, predictor) if current else None,
    )


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "StockMatch API",
        "version": __version__,
        "status": "running"
    }


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "active_sessions": len(_sessions)
    }


@app.post("/sessions", response_model=SessionResponse, status_code=201)
async def create_session(
    request: SessionRequest,
    loader: CandidateLoader = Depends(get_loader),
    feature_engine: CandidateFeatureEngine = Depends(get_feature_engine),
    predictor: Optional[VolatilityPredictor] = Depends(get_volatility_predictor)
):
    """
    Start a swipe session over freshly loaded candidates.
    
    A failed load yields a completed session with no candidates.
    """
    try:
        session = SessionController(
            feature_engine=feature_engine,
            mode=request.mode,
            swipe_budget=request.swipe_budget,
            recommendation_count=request.recommendation_count,
            final_pool=request.final_pool
        )
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    
    await session.load(loader)
    
    session_id = uuid.uuid4().hex
    _sessions[session_id] = session
    return _session_response(session_id, session, predictor)


@app.get("/sessions/{session_id}", response_model=SessionResponse)
async def get_session_status(
    session_id: str,
    session: SessionController = Depends(get_session),
    predictor: Optional[VolatilityPredictor] = Depends(get_volatility_predictor)
):
    """Get session state and the candidate awaiting feedback."""
    return _session_response(session_id, session, predictor)


@app.post("/sessions/{session_id}/feedback", response_model=SessionResponse)
async def submit_feedback(
    session_id: str,
    feedback: FeedbackRequest,
    session: SessionController = Depends(get_session),
    predictor: Optional[VolatilityPredictor] = Depends(get_volatility_predictor)
):
    """Like or dislike the presented candidate."""
    try:
        session.submit_feedback(feedback.liked)
    except SessionStateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    
    return _session_response(session_id, session, predictor)


@app.get("/sessions/{session_id}/recommendations", response_model=List[CandidateResponse])
async def get_recommendations(
    session_id: str,
    session: SessionController = Depends(get_session),
    predictor: Optional[VolatilityPredictor] = Depends(get_volatility_predictor)
):
    """Get the final shortlist of a completed session and discard the session."""
    try:
        recommendations = session.recommendations
    except SessionStateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    
    _sessions.pop(session_id, None)
    return [_candidate_response(c, predictor) for c in recommendations]


@app.delete("/sessions/{session_id}", status_code=204)
async def delete_session(session_id: str, session: SessionController = Depends(get_session)):
    """Abandon a session and discard its state."""
    _sessions.pop(session_id, None)


def create_app() -> FastAPI:
    """Create and return FastAPI app."""
    return app
