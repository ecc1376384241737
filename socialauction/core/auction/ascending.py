"""
Ascending Auction - Single-winner, open ascending-price variant.

Rules:
- Each bid must clear the reserve and beat the current leader by at least
  the minimum increment (and always strictly).
- The bid amount is escrowed in the auction's payment account. When a new
  leader takes over, the previous leader is refunded from escrow.
- After the deadline the leader claims the entire supply and the escrowed
  amount goes to the beneficiary.

This variant shares the phase/claim surface of BatchClearingAuction but
none of its allocation logic.
"""

from typing import Optional, Set

from socialauction.core.auction.base import (
    AuctionKind,
    AuctionPhase,
    ClaimReceipt,
    Entitlement,
    is_auction_active,
    phase_at,
)
from socialauction.core.clock import Clock, SystemClock
from socialauction.core.errors import (
    AlreadyClaimed,
    AuctionFinished,
    AuctionRunning,
    BidTooLow,
    InvalidBid,
    NoWinningBid,
    OwnerCannotBid,
    TransferFailed,
)
from socialauction.core.state.balances import PaymentLedger, UnitLedger
from socialauction.crypto import bytes_to_hex
from socialauction.utils.logger import get_logger
from socialauction.utils.validation import validate_address, validate_positive_amount

logger = get_logger("ascending")


class AscendingSingleWinnerAuction:
    """
    The highest bidder at the deadline takes the whole supply.

    Attributes:
        address: The auction's own account (unit supply and bid escrow)
        highest_bidder: Current leader, None before the first bid
        highest_bid: Leader's escrowed amount, 0 before the first bid
        bid_count: Number of accepted bids
    """

    kind = AuctionKind.ASCENDING_SINGLE_WINNER

    def __init__(
        self,
        beneficiary: bytes,
        supply: int,
        deadline: int,
        unit_ledger: UnitLedger,
        payment_ledger: PaymentLedger,
        address: bytes,
        clock: Optional[Clock] = None,
        min_price: int = 1,
        min_bid_increment: int = 1,
    ):
        if unit_ledger.balance_of(address) < supply:
            raise ValueError(
                f"Auction {bytes_to_hex(address)[:10]} holds "
                f"{unit_ledger.balance_of(address)} units, needs {supply}"
            )
        if min_price < 0 or min_bid_increment < 0:
            raise ValueError("min_price and min_bid_increment cannot be negative")

        self.address = address
        self.min_price = min_price
        self.min_bid_increment = min_bid_increment
        self.highest_bidder: Optional[bytes] = None
        self.highest_bid = 0
        self.bid_count = 0
        self.claimed: Set[bytes] = set()

        self._beneficiary = beneficiary
        self._supply = supply
        self._deadline = deadline
        self._unit_ledger = unit_ledger
        self._payment_ledger = payment_ledger
        self._clock = clock or SystemClock()

    @property
    def beneficiary(self) -> bytes:
        return self._beneficiary

    @property
    def supply(self) -> int:
        return self._supply

    @property
    def deadline(self) -> int:
        return self._deadline

    @property
    def unit_ledger(self) -> UnitLedger:
        return self._unit_ledger

    @property
    def payment_ledger(self) -> PaymentLedger:
        return self._payment_ledger

    def is_active(self) -> bool:
        return is_auction_active(self._clock.now(), self._deadline)

    def phase(self) -> AuctionPhase:
        return phase_at(self._clock.now(), self._deadline)

    # =========================================================================
    # Bidding
    # =========================================================================

    def minimum_next_bid(self) -> int:
        """Smallest amount the next bid may offer."""
        if self.highest_bidder is None:
            return max(self.min_price, 1)
        return self.highest_bid + max(self.min_bid_increment, 1)

    def bid(self, bidder: bytes, amount: int) -> None:
        """
        Outbid the current leader.

        The amount is escrowed and the displaced leader refunded in the same
        call; if the bidder cannot pay, nothing changes.
        """
        if not self.is_active():
            raise AuctionFinished()

        if bidder == self._beneficiary:
            raise OwnerCannotBid()

        for valid, err in (
            validate_address(bidder, "bidder"),
            validate_positive_amount(amount, "amount"),
        ):
            if not valid:
                raise InvalidBid(err)

        minimum = self.minimum_next_bid()
        if amount < minimum:
            raise BidTooLow(f"Low stake: {amount} < {minimum}")

        valid, err = self._payment_ledger.validate_transfer(bidder, self.address, amount)
        if not valid:
            raise TransferFailed(err)

        previous_bidder, previous_bid = self.highest_bidder, self.highest_bid

        self._payment_ledger.transfer(bidder, self.address, amount)
        if previous_bidder is not None:
            self._payment_ledger.transfer(self.address, previous_bidder, previous_bid)
            logger.debug(f"Refunded {previous_bid} to {bytes_to_hex(previous_bidder)[:10]}")

        self.highest_bidder = bytes(bidder)
        self.highest_bid = amount
        self.bid_count += 1

        logger.debug(f"New leader {bytes_to_hex(bidder)[:10]} at {amount}")

    def auction_bid(self, caller: bytes, amount: int) -> None:
        """Alias of bid() named after the public entry point."""
        self.bid(caller, amount)

    # =========================================================================
    # Queries
    # =========================================================================

    def current_clearing_price(self) -> int:
        """The price the leader would pay if the auction closed now."""
        return self.highest_bid

    def get_claimable(self, bidder: bytes) -> Entitlement:
        """Whole supply for the leader, nothing for anyone else."""
        if self.highest_bidder is None or bidder != self.highest_bidder:
            return Entitlement()
        return Entitlement(quantity=self._supply, owed_price=self.highest_bid)

    def has_claimed(self, bidder: bytes) -> bool:
        return bidder in self.claimed

    # =========================================================================
    # Settlement
    # =========================================================================

    def claim(self, bidder: bytes, payment_sent: int = 0) -> ClaimReceipt:
        """
        Deliver the supply to the winner and release escrow to the beneficiary.

        The winning amount is already escrowed, so nothing further is owed;
        any payment_sent is forwarded to the beneficiary as well.
        """
        if self.is_active():
            raise AuctionRunning()

        entitlement = self.get_claimable(bidder)
        if not entitlement.is_winner:
            raise NoWinningBid()

        if bidder in self.claimed:
            raise AlreadyClaimed()

        checks = (
            self._payment_ledger.validate_transfer(bidder, self._beneficiary, payment_sent),
            self._payment_ledger.validate_transfer(self.address, self._beneficiary, self.highest_bid),
            self._unit_ledger.validate_transfer(self.address, bidder, entitlement.quantity),
        )
        for valid, err in checks:
            if not valid:
                logger.warning(f"Claim by {bytes_to_hex(bidder)[:10]} rejected: {err}")
                raise TransferFailed(err)

        self._payment_ledger.transfer(bidder, self._beneficiary, payment_sent)
        self._payment_ledger.transfer(self.address, self._beneficiary, self.highest_bid)
        self._unit_ledger.transfer(self.address, bidder, entitlement.quantity)
        self.claimed.add(bidder)

        logger.info(
            f"Ascending auction settled: winner={bytes_to_hex(bidder)[:10]}, "
            f"units={entitlement.quantity}, price={self.highest_bid}"
        )
        return ClaimReceipt(
            bidder=bidder,
            quantity=entitlement.quantity,
            owed_price=entitlement.owed_price,
            payment=entitlement.owed_price + payment_sent,
        )

    def claim_bid(self, caller: bytes, payment_sent: int = 0) -> ClaimReceipt:
        """Alias of claim() named after the public entry point."""
        return self.claim(caller, payment_sent)

    def stats(self) -> dict:
        """Get auction statistics."""
        return {
            "kind": self.kind.value,
            "phase": self.phase().name,
            "bid_count": self.bid_count,
            "supply": self._supply,
            "highest_bid": self.highest_bid,
            "leader": bytes_to_hex(self.highest_bidder) if self.highest_bidder else None,
            "claimed": len(self.claimed),
        }

    def __repr__(self) -> str:
        return (
            f"AscendingSingleWinnerAuction(address={bytes_to_hex(self.address)[:10]}, "
            f"supply={self._supply}, highest_bid={self.highest_bid})"
        )
