"""
Clearing - Uniform clearing price and per-bid allocation for a batch auction.

The engine is a pure function of (bids, supply):

1. Rank bids by price, highest first. Equal prices rank the most recent
   bid (higher sequence index) first.
2. Walk the ranking with `remaining = supply`. A bid that fits is filled
   in full. A bid that does not fit gets nothing and the walk moves on, so a
   smaller bid ranked below it can still be filled. No bid is ever
   partially filled.
3. The clearing price is the lowest price among filled bids.

Nothing is cached. Every query recomputes from the ledger, so a result can
never disagree with the bids it was derived from.

Note on step 1: under scarcity a later bid at the clearing price displaces
an earlier bid at the same price. Tests pin this ordering; a time-priority
rule would favour the earlier bid instead.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, List, Mapping, Sequence

from socialauction.core.auction.base import Entitlement
from socialauction.core.auction.bids import Bid
from socialauction.utils.logger import get_logger

logger = get_logger("clearing")


@dataclass(frozen=True)
class ClearingResult:
    """
    Derived outcome of a clearing run.

    Attributes:
        clearing_price: Lowest price among filled bids (0 if none filled)
        allocation: sequence_index -> allocated quantity, for every bid
    """
    clearing_price: int
    allocation: Mapping[int, int] = field(default_factory=dict)

    @property
    def total_allocated(self) -> int:
        return sum(self.allocation.values())

    def allocated(self, sequence_index: int) -> int:
        """Quantity allocated to one bid (0 for unknown indices)."""
        return self.allocation.get(sequence_index, 0)

    def winning_indices(self) -> List[int]:
        """Sequence indices of filled bids, ascending."""
        return sorted(i for i, qty in self.allocation.items() if qty > 0)


# =============================================================================
# Ranking
# =============================================================================


def rank_bids(bids: Sequence[Bid]) -> List[Bid]:
    """
    Order bids for filling.

    Sort key is (price desc, sequence_index desc).
    """
    return sorted(bids, key=lambda b: (-b.price, -b.sequence_index))


# =============================================================================
# Clearing
# =============================================================================


def compute_clearing(bids: Sequence[Bid], supply: int) -> ClearingResult:
    """
    Compute the clearing price and allocation.

    Args:
        bids: Every bid in the auction
        supply: Units available

    Returns:
        ClearingResult covering every bid in `bids`
    """
    if supply < 0:
        raise ValueError(f"supply cannot be negative, got {supply}")

    allocation: Dict[int, int] = {bid.sequence_index: 0 for bid in bids}
    remaining = supply
    clearing_price = 0

    for bid in rank_bids(bids):
        if bid.quantity > remaining:
            continue
        allocation[bid.sequence_index] = bid.quantity
        remaining -= bid.quantity
        # Ranking is price-descending, so the last fill sets the price
        clearing_price = bid.price

    result = ClearingResult(
        clearing_price=clearing_price,
        allocation=MappingProxyType(allocation),
    )
    logger.debug(
        f"Cleared {len(bids)} bids: price={clearing_price}, "
        f"allocated={supply - remaining}/{supply}"
    )
    return result


def compute_entitlement(
    bids: Sequence[Bid],
    result: ClearingResult,
    bidder: bytes,
) -> Entitlement:
    """
    Sum a bidder's allocation and owed payment across all of their bids.

    Each filled bid is paid at its own price. Returns Entitlement(0, 0)
    when nothing was allocated to the bidder.
    """
    quantity = 0
    owed_price = 0
    for bid in bids:
        if bid.bidder != bidder:
            continue
        allocated = result.allocated(bid.sequence_index)
        quantity += allocated
        owed_price += bid.price * allocated

    if quantity == 0:
        return Entitlement()
    return Entitlement(quantity=quantity, owed_price=owed_price)


def get_entitlement(bids: Sequence[Bid], supply: int, bidder: bytes) -> Entitlement:
    """Clear from scratch, then compute one bidder's entitlement."""
    return compute_entitlement(bids, compute_clearing(bids, supply), bidder)


def compute_all_entitlements(bids: Sequence[Bid], supply: int) -> Dict[bytes, Entitlement]:
    """Entitlement of every bidder with a nonzero allocation."""
    result = compute_clearing(bids, supply)
    bidders = dict.fromkeys(bid.bidder for bid in bids)
    entitlements = {}
    for bidder in bidders:
        entitlement = compute_entitlement(bids, result, bidder)
        if entitlement.is_winner:
            entitlements[bidder] = entitlement
    return entitlements


__all__ = [
    "ClearingResult",
    "rank_bids",
    "compute_clearing",
    "compute_entitlement",
    "get_entitlement",
    "compute_all_entitlements",
]
