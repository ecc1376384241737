"""
Auction Registry Module.

Owner-gated creation and indexing of auctions.
"""

from socialauction.core.registry.factory import Auction, AuctionFactory

__all__ = [
    "Auction",
    "AuctionFactory",
]
