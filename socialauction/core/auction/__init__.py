"""
Social Auction Module.

This module provides the auction variants:
- Bid ledger with submission-time validation
- Clearing engine (uniform price, all-or-nothing fills)
- Batch clearing settlement state machine
- Ascending single-winner variant
"""

from socialauction.core.auction.base import (
    AuctionKind,
    AuctionPhase,
    ClaimReceipt,
    Entitlement,
    SettlementAuction,
    is_auction_active,
    phase_at,
)

from socialauction.core.auction.bids import Bid, BidLedger

from socialauction.core.auction.clearing import (
    ClearingResult,
    rank_bids,
    compute_clearing,
    compute_entitlement,
    get_entitlement,
    compute_all_entitlements,
)

from socialauction.core.auction.settlement import BatchClearingAuction
from socialauction.core.auction.ascending import AscendingSingleWinnerAuction

__all__ = [
    # Shared surface
    "AuctionKind",
    "AuctionPhase",
    "ClaimReceipt",
    "Entitlement",
    "SettlementAuction",
    "is_auction_active",
    "phase_at",
    # Bids
    "Bid",
    "BidLedger",
    # Clearing
    "ClearingResult",
    "rank_bids",
    "compute_clearing",
    "compute_entitlement",
    "get_entitlement",
    "compute_all_entitlements",
    # Variants
    "BatchClearingAuction",
    "AscendingSingleWinnerAuction",
]
