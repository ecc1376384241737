"""
Social Auction

Fixed-supply token sales run as auctions:
- Multi-unit batch auctions settled at a single clearing price
- Ascending single-winner auctions with escrow and automatic refunds
- Factory for creating auctions with immutable parameters
- Unit and payment ledgers for settlement
"""

__version__ = "0.1.0"
