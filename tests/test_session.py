"""Tests for the swipe session state machine and traversal strategies."""

import asyncio
from concurrent.futures import ThreadPoolExecutor

import numpy as np
import pytest

from stock_match.data import CandidateLoader, CandidateStore, CsvCandidateLoader
from stock_match.exceptions import CandidateParseError, SessionStateError
from stock_match.ranking import FinalPool, SessionController, SessionState, TraversalMode


class _StaticLoader(CandidateLoader):
    def __init__(self, candidates):
        self.candidates = candidates

    def load(self):
        return CandidateStore(self.candidates)


class _FailingLoader(CandidateLoader):
    def load(self):
        raise CandidateParseError("price", "n/a", 2)


def _session(engine, **kwargs):
    return SessionController(feature_engine=engine, **kwargs)


@pytest.fixture
def three(make_candidate):
    return [
        make_candidate("C1", volatility=0.0, sector="S1"),
        make_candidate("C2", volatility=5.0, sector="S2"),
        make_candidate("C3", volatility=10.0, sector="S3"),
    ]


@pytest.fixture
def clustered(make_candidate):
    # C1 and C3 share a sector; liking C1 pulls C3 ahead of C2
    return [
        make_candidate("C1", volatility=0.0, sector="A"),
        make_candidate("C2", volatility=10.0, sector="B"),
        make_candidate("C3", volatility=1.0, sector="A"),
    ]


class TestSessionLifecycle:
    def test_starts_loading(self, engine):
        session = _session(engine, mode="sequential", swipe_budget=2)
        assert session.state == SessionState.LOADING
        assert session.current_candidate is None
        with pytest.raises(SessionStateError):
            session.like()

    def test_start_awaits_feedback(self, engine, three):
        session = _session(engine, mode="sequential", swipe_budget=2)
        session.start(three)
        assert session.state == SessionState.AWAITING_FEEDBACK
        assert session.current_candidate.ticker == "C1"
        np.testing.assert_array_equal(session.model.weights, np.zeros(len(session.feature_names)))

    def test_empty_candidates_complete_immediately(self, engine):
        session = _session(engine, mode="greedy")
        session.start([])
        assert session.state == SessionState.COMPLETED
        assert session.recommendations == []

    def test_zero_budget_completes_immediately(self, engine, three):
        session = _session(engine, mode="sequential", swipe_budget=0, recommendation_count=2)
        session.start(three)
        assert session.state == SessionState.COMPLETED
        assert [c.ticker for c in session.recommendations] == ["C1", "C2"]

    def test_feedback_after_completion_rejected(self, engine, three):
        session = _session(engine, mode="sequential", swipe_budget=1)
        session.start(three)
        session.like()
        with pytest.raises(SessionStateError):
            session.dislike()

    def test_recommendations_before_completion_rejected(self, engine, three):
        session = _session(engine, mode="sequential", swipe_budget=2)
        session.start(three)
        with pytest.raises(SessionStateError):
            session.recommendations

    def test_invalid_budget(self, engine):
        with pytest.raises(ValueError):
            _session(engine, swipe_budget=-1)
        with pytest.raises(ValueError):
            _session(engine, recommendation_count=-1)

    def test_restart_replaces_state(self, engine, three, make_candidate):
        session = _session(engine, mode="sequential", swipe_budget=2)
        session.start(three)
        session.like()
        session.start([make_candidate("NEW")])
        assert session.swipe_count == 0
        assert session.feedback_history == []
        assert session.candidates.tickers == ["NEW"]
        assert session.current_candidate.ticker == "NEW"

    def test_history_records_swipes(self, engine, three):
        session = _session(engine, mode="sequential", swipe_budget=3)
        session.start(three)
        session.like()
        session.dislike()
        history = session.feedback_history
        assert [(e.swipe_number, e.ticker, e.liked) for e in history] == [
            (1, "C1", True), (2, "C2", False)
        ]
        assert history[0].score == 0.0


class TestSequentialTraversal:
    def test_budget_two_over_three(self, engine, three):
        session = _session(engine, mode="sequential", swipe_budget=2)
        session.start(three)
        presented = []
        while session.state == SessionState.AWAITING_FEEDBACK:
            presented.append(session.current_candidate.ticker)
            session.like()
        assert presented == ["C1", "C2"]
        assert session.swipe_count == 2
        assert session.state == SessionState.COMPLETED
        assert len(session.recommendations) == 3

    def test_ignores_scores(self, engine, clustered):
        session = _session(engine, mode="sequential", swipe_budget=3)
        session.start(clustered)
        assert session.like().ticker == "C2"

    def test_exhausts_before_budget(self, engine, three):
        session = _session(engine, mode="sequential", swipe_budget=10)
        session.start(three)
        for _ in range(3):
            session.dislike()
        assert session.state == SessionState.COMPLETED
        assert session.swipe_count == 3

    def test_final_pool_includes_swiped(self, engine, three):
        session = _session(engine, mode="sequential", swipe_budget=1, recommendation_count=1)
        assert session.final_pool == FinalPool.FULL_CORPUS
        session.start(three)
        session.like()
        assert [c.ticker for c in session.recommendations] == ["C1"]

    def test_remaining_pool_option(self, engine, three):
        session = _session(
            engine, mode="sequential", swipe_budget=1, recommendation_count=5,
            final_pool="remaining"
        )
        session.start(three)
        session.like()
        assert [c.ticker for c in session.recommendations] == ["C2", "C3"]

    def test_like_promotes_candidate(self, engine, three):
        session = _session(engine, mode="sequential", swipe_budget=2, recommendation_count=1)
        session.start(three)
        session.dislike()
        session.like()
        assert [c.ticker for c in session.recommendations] == ["C2"]


class TestGreedyTraversal:
    def test_presents_current_best(self, engine, clustered):
        session = _session(engine, mode=TraversalMode.GREEDY, swipe_budget=2)
        session.start(clustered)
        presented = []
        while session.state == SessionState.AWAITING_FEEDBACK:
            current = session.current_candidate
            table = session.score_table()
            unseen = table.drop(index=presented)
            assert current.ticker not in presented
            assert table.loc[current.ticker, "score"] == unseen["score"].max()
            presented.append(current.ticker)
            session.like()
        assert presented == ["C1", "C3"]

    def test_final_pool_is_remaining(self, engine, clustered):
        session = _session(engine, mode="greedy", swipe_budget=2)
        assert session.final_pool == FinalPool.REMAINING
        session.start(clustered)
        session.like()
        session.like()
        assert [c.ticker for c in session.recommendations] == ["C2"]

    def test_never_presents_twice(self, engine, three):
        session = _session(engine, mode="greedy", swipe_budget=10)
        session.start(three)
        presented = []
        while session.state == SessionState.AWAITING_FEEDBACK:
            presented.append(session.current_candidate.ticker)
            session.dislike()
        assert sorted(presented) == ["C1", "C2", "C3"]
        assert session.recommendations == []

    def test_full_corpus_option(self, engine, clustered):
        session = _session(
            engine, mode="greedy", swipe_budget=2, recommendation_count=1,
            final_pool=FinalPool.FULL_CORPUS
        )
        session.start(clustered)
        session.like()
        session.like()
        assert [c.ticker for c in session.recommendations] == ["C3"]


class TestAsyncLoad:
    def test_load(self, engine, three):
        session = _session(engine, mode="sequential", swipe_budget=2)
        asyncio.run(session.load(_StaticLoader(three)))
        assert session.state == SessionState.AWAITING_FEEDBACK
        assert session.candidates.tickers == ["C1", "C2", "C3"]

    def test_failed_load_means_no_candidates(self, engine):
        session = _session(engine, mode="sequential", swipe_budget=2)
        asyncio.run(session.load(_FailingLoader()))
        assert session.state == SessionState.COMPLETED
        assert len(session.candidates) == 0
        assert session.recommendations == []

    @pytest.mark.parametrize("summary", [b"caf\xe9", b'"' + b"x" * 200000 + b'"'])
    def test_unreadable_file_means_no_candidates(self, engine, tmp_path, summary):
        path = tmp_path / "stocks.csv"
        path.write_bytes(
            b"ticker,price,market_cap,pe_ratio,sector,volatility,volatility_category,Summary\n"
            b"CAFE,10,1e9,12,Food,0.1,Low," + summary + b"\n"
        )
        session = _session(engine, mode="sequential", swipe_budget=2)
        asyncio.run(session.load(CsvCandidateLoader(str(path))))
        assert session.state == SessionState.COMPLETED
        assert len(session.candidates) == 0


class TestConcurrentFeedback:
    def test_budget_never_exceeded(self, engine, make_candidate):
        candidates = [make_candidate(f"T{i}", volatility=float(i)) for i in range(30)]
        session = _session(engine, mode="greedy", swipe_budget=10)
        session.start(candidates)

        def swipe(i):
            try:
                session.submit_feedback(i % 2 == 0)
                return True
            except SessionStateError:
                return False

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(swipe, range(20)))

        assert sum(results) == 10
        assert session.swipe_count == 10
        tickers = [e.ticker for e in session.feedback_history]
        assert len(set(tickers)) == 10
