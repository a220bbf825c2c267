"""
StockMatch Preference Engine

Learns a user's taste for stocks from like/dislike swipes and turns it
into a ranked shortlist.
"""

__version__ = "0.1.0"
