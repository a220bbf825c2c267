"""Script to run a swipe session in the terminal."""

import asyncio
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from stock_match.config import configure_logging, get_config
from stock_match.data import Candidate, CsvCandidateLoader
from stock_match.features import CandidateFeatureEngine
from stock_match.ranking import SessionController, SessionState


def display_candidate(candidate: Candidate, header: str):
    """Print a candidate card."""
    print(f"\n=== {header} ===")
    print(f"Ticker: {candidate.ticker}")
    print(f"Price: ${candidate.price:.2f}")
    print(f"Sector: {candidate.sector}")
    print(f"Market Cap: ${candidate.market_cap / 1e9:.2f}B")
    print(f"P/E Ratio: {candidate.pe_ratio:.2f}")
    print(f"Volatility: {candidate.volatility_category}")


def ask_feedback() -> bool:
    """Prompt until the user answers y or n."""
    while True:
        answer = input("Do you like this stock? (y/n): ").strip().lower()
        if answer in ('y', 'n'):
            return answer == 'y'
        print("Invalid input. Please answer y or n.")


async def main(data_path: str, mode: str, budget: int, count: int):
    """
    Run one session against a CSV file.
    
    Args:
        data_path: Candidate CSV path
        mode: 'sequential' or 'greedy'
        budget: Number of swipes
        count: Number of final recommendations
    """
    configure_logging()
    
    loader = CsvCandidateLoader(data_path)
    session = SessionController(
        feature_engine=CandidateFeatureEngine(),
        mode=mode,
        swipe_budget=budget,
        recommendation_count=count
    )
    
    print(f"Loading stocks from {loader.path}...")
    await session.load(loader)
    
    if not session.candidates:
        print("\nNo stocks available.")
        return
    
    if loader.last_report.skipped:
        print(f"Skipped {len(loader.last_report.skipped)} malformed rows")
    
    while session.state == SessionState.AWAITING_FEEDBACK:
        candidate = session.current_candidate
        display_candidate(
            candidate,
            f"Stock Recommendation {session.swipe_count + 1}/{session.swipe_budget}"
        )
        session.submit_feedback(ask_feedback())
    
    recommendations = session.recommendations
    if not recommendations:
        print("\nNo more stocks to recommend.")
        return
    
    print("\n" + "=" * 60)
    print("Top Stock Recommendations Based on Your Preferences")
    print("=" * 60)
    for i, candidate in enumerate(recommendations, start=1):
        display_candidate(candidate, f"#{i}")
    
    print("\nStrongest learned preferences:")
    contributions = session.model.feature_contributions(session.feature_names, top_n=5)
    for name, weight in contributions.items():
        print(f"  {name:<20} {weight:+.3f}")


if __name__ == '__main__':
    import argparse
    
    config = get_config()
    parser = argparse.ArgumentParser(description='Swipe through stocks and get a shortlist')
    parser.add_argument('--data', default=config.candidates_path, help='Candidate CSV file')
    parser.add_argument('--mode', choices=['sequential', 'greedy'], default=config.traversal_mode,
                        help='Presentation order')
    parser.add_argument('--budget', type=int, default=config.swipe_budget, help='Number of swipes')
    parser.add_argument('--count', type=int, default=config.recommendation_count,
                        help='Number of recommendations')
    
    args = parser.parse_args()
    asyncio.run(main(args.data, args.mode, args.budget, args.count))
