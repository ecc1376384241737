"""
Bid Ledger - Append-only record of bids for a batch auction.

Bids are public as soon as they are recorded. Each bid gets the next
sequence index; indices are never reused and bids are never edited or
withdrawn. The sequence index is the only tie-break the clearing engine
has, so the ledger is the single place that assigns it.
"""

from dataclasses import dataclass
from typing import Iterator, List, Tuple

from socialauction.core.auction.base import is_auction_active
from socialauction.core.errors import (
    AuctionFinished,
    InvalidBid,
    OwnerCannotBid,
    QuantityExceedsSupply,
)
from socialauction.crypto import bytes_to_hex
from socialauction.utils.logger import get_logger
from socialauction.utils.validation import validate_address, validate_positive_amount

logger = get_logger("bids")


@dataclass(frozen=True)
class Bid:
    """
    A recorded bid.

    Attributes:
        bidder: 20-byte address of the bidder
        price: Price per unit
        quantity: Units requested (all-or-nothing)
        sequence_index: Submission order, starting at 0
    """
    bidder: bytes
    price: int
    quantity: int
    sequence_index: int

    @property
    def total_price(self) -> int:
        """Price owed if the bid is filled."""
        return self.price * self.quantity


class BidLedger:
    """
    Append-only bid storage for one auction.

    The ledger knows the auction's immutable parameters so it can reject
    bids at submission time; it does no clearing or settlement work.
    """

    def __init__(self, beneficiary: bytes, supply: int, deadline: int):
        self.beneficiary = beneficiary
        self.supply = supply
        self.deadline = deadline
        self._bids: List[Bid] = []

    # =========================================================================
    # Submission
    # =========================================================================

    def submit_bid(self, bidder: bytes, price: int, quantity: int, now: int) -> Bid:
        """
        Record a bid.

        Args:
            bidder: Address placing the bid
            price: Price per unit
            quantity: Units requested
            now: Current Unix time

        Returns:
            The recorded Bid

        Raises:
            AuctionFinished: now >= deadline
            OwnerCannotBid: bidder is the beneficiary
            QuantityExceedsSupply: quantity > supply
            InvalidBid: malformed bidder, or price/quantity not a positive uint
        """
        if not is_auction_active(now, self.deadline):
            raise AuctionFinished()

        if bidder == self.beneficiary:
            raise OwnerCannotBid()

        if isinstance(quantity, int) and quantity > self.supply:
            raise QuantityExceedsSupply(
                f"Amount must be lower than supply ({quantity} > {self.supply})"
            )

        for valid, err in (
            validate_address(bidder, "bidder"),
            validate_positive_amount(price, "price"),
            validate_positive_amount(quantity, "quantity"),
        ):
            if not valid:
                raise InvalidBid(err)

        bid = Bid(
            bidder=bytes(bidder),
            price=price,
            quantity=quantity,
            sequence_index=len(self._bids),
        )
        self._bids.append(bid)

        logger.debug(
            f"Bid #{bid.sequence_index} from {bytes_to_hex(bidder)[:10]}: "
            f"price={price}, quantity={quantity}"
        )
        return bid

    # =========================================================================
    # Queries
    # =========================================================================

    @property
    def bids(self) -> Tuple[Bid, ...]:
        """All bids in sequence order."""
        return tuple(self._bids)

    def bidders(self) -> List[bytes]:
        """Distinct bidders in order of their first bid."""
        return list(dict.fromkeys(bid.bidder for bid in self._bids))

    def total_demand(self) -> int:
        """Sum of quantities over every bid."""
        return sum(bid.quantity for bid in self._bids)

    def __len__(self) -> int:
        return len(self._bids)

    def __iter__(self) -> Iterator[Bid]:
        return iter(tuple(self._bids))

    def __repr__(self) -> str:
        return f"BidLedger(bids={len(self._bids)}, supply={self.supply}, deadline={self.deadline})"
