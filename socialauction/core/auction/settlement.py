"""
Settlement - Batch clearing auction and its claim state machine.

Phases are derived from the clock on every call:

    ACTIVE  -> auction_bid() appends to the bid ledger, claims rejected
    CLOSED  -> bids rejected, each winner may claim exactly once

A claim recomputes the clearing from the ledger, checks the payment, then
moves payment to the beneficiary and units to the bidder. Both transfers
are validated before either is applied, and the bidder is only marked
claimed once both have gone through.
"""

from typing import Dict, List, Optional, Set, Tuple

from socialauction.core.auction.base import (
    AuctionKind,
    AuctionPhase,
    ClaimReceipt,
    Entitlement,
    is_auction_active,
    phase_at,
)
from socialauction.core.auction.bids import Bid, BidLedger
from socialauction.core.auction.clearing import (
    ClearingResult,
    compute_all_entitlements,
    compute_clearing,
    compute_entitlement,
)
from socialauction.core.clock import Clock, SystemClock
from socialauction.core.errors import (
    AlreadyClaimed,
    AuctionRunning,
    InsufficientPayment,
    NoWinningBid,
    TransferFailed,
)
from socialauction.core.state.balances import PaymentLedger, UnitLedger
from socialauction.crypto import bytes_to_hex
from socialauction.utils.logger import get_logger

logger = get_logger("settlement")


class BatchClearingAuction:
    """
    Multi-unit auction settled at a single clearing price.

    Attributes:
        address: The auction's own account (holds the unit supply)
        ledger: Append-only bid ledger
        claimed: Bidders that have settled
    """

    kind = AuctionKind.BATCH_CLEARING

    def __init__(
        self,
        beneficiary: bytes,
        supply: int,
        deadline: int,
        unit_ledger: UnitLedger,
        payment_ledger: PaymentLedger,
        address: bytes,
        clock: Optional[Clock] = None,
    ):
        if unit_ledger.balance_of(address) < supply:
            raise ValueError(
                f"Auction {bytes_to_hex(address)[:10]} holds "
                f"{unit_ledger.balance_of(address)} units, needs {supply}"
            )

        self.address = address
        self.ledger = BidLedger(beneficiary=beneficiary, supply=supply, deadline=deadline)
        self.claimed: Set[bytes] = set()
        self._unit_ledger = unit_ledger
        self._payment_ledger = payment_ledger
        self._clock = clock or SystemClock()

    # =========================================================================
    # Immutable Parameters
    # =========================================================================

    @property
    def beneficiary(self) -> bytes:
        return self.ledger.beneficiary

    @property
    def supply(self) -> int:
        return self.ledger.supply

    @property
    def deadline(self) -> int:
        return self.ledger.deadline

    @property
    def unit_ledger(self) -> UnitLedger:
        return self._unit_ledger

    @property
    def payment_ledger(self) -> PaymentLedger:
        return self._payment_ledger

    # =========================================================================
    # Phase
    # =========================================================================

    def is_active(self) -> bool:
        """Whether the auction is still accepting bids."""
        return is_auction_active(self._clock.now(), self.deadline)

    def phase(self) -> AuctionPhase:
        return phase_at(self._clock.now(), self.deadline)

    # =========================================================================
    # Bidding
    # =========================================================================

    def auction_bid(self, caller: bytes, price: int, quantity: int) -> Bid:
        """
        Place a bid of `quantity` units at `price` per unit.

        See BidLedger.submit_bid for the rejection rules.
        """
        return self.ledger.submit_bid(caller, price, quantity, now=self._clock.now())

    # =========================================================================
    # Queries
    # =========================================================================

    @property
    def bids(self) -> Tuple[Bid, ...]:
        return self.ledger.bids

    def clearing(self) -> ClearingResult:
        """Recompute the clearing from the current ledger."""
        return compute_clearing(self.ledger.bids, self.supply)

    def current_clearing_price(self) -> int:
        """Clearing price if the auction closed now."""
        return self.clearing().clearing_price

    def get_claimable(self, bidder: bytes) -> Entitlement:
        """Units and owed payment the bidder could claim if the auction closed now."""
        bids = self.ledger.bids
        return compute_entitlement(bids, compute_clearing(bids, self.supply), bidder)

    def winners(self) -> Dict[bytes, Entitlement]:
        """Every bidder with a nonzero allocation."""
        return compute_all_entitlements(self.ledger.bids, self.supply)

    def has_claimed(self, bidder: bytes) -> bool:
        return bidder in self.claimed

    def unclaimed_winners(self) -> List[bytes]:
        return [bidder for bidder in self.winners() if bidder not in self.claimed]

    # =========================================================================
    # Settlement
    # =========================================================================

    def claim(self, bidder: bytes, payment_sent: int = 0) -> ClaimReceipt:
        """
        Settle a winning bidder.

        Args:
            bidder: Address claiming its units
            payment_sent: Amount the bidder pays with the claim

        Returns:
            ClaimReceipt for the settled claim

        Raises:
            AuctionRunning: called before the deadline
            NoWinningBid: the bidder has no allocated units
            AlreadyClaimed: the bidder already settled
            InsufficientPayment: payment_sent is below the owed total
            TransferFailed: a ledger rejected the payment or the units
        """
        if self.is_active():
            raise AuctionRunning()

        entitlement = self.get_claimable(bidder)
        if not entitlement.is_winner:
            raise NoWinningBid()

        if bidder in self.claimed:
            raise AlreadyClaimed()

        if payment_sent < entitlement.owed_price:
            raise InsufficientPayment(
                f"ETH not enough: sent {payment_sent}, owed {entitlement.owed_price}"
            )

        self._settle(bidder, entitlement.quantity, payment_sent)

        receipt = ClaimReceipt(
            bidder=bidder,
            quantity=entitlement.quantity,
            owed_price=entitlement.owed_price,
            payment=payment_sent,
        )
        if receipt.overpayment > 0:
            logger.warning(
                f"Claim by {bytes_to_hex(bidder)[:10]} overpaid by {receipt.overpayment}; "
                f"excess forwarded to beneficiary"
            )
        logger.info(
            f"Claim settled: bidder={bytes_to_hex(bidder)[:10]}, "
            f"units={entitlement.quantity}, paid={payment_sent}"
        )
        return receipt

    def claim_bid(self, caller: bytes, payment_sent: int = 0) -> ClaimReceipt:
        """Alias of claim() named after the public entry point."""
        return self.claim(caller, payment_sent)

    def _settle(self, bidder: bytes, quantity: int, payment: int) -> None:
        """Apply both transfers and mark claimed, or change nothing."""
        checks = (
            self._payment_ledger.validate_transfer(bidder, self.beneficiary, payment),
            self._unit_ledger.validate_transfer(self.address, bidder, quantity),
        )
        for valid, err in checks:
            if not valid:
                logger.warning(f"Claim by {bytes_to_hex(bidder)[:10]} rejected: {err}")
                raise TransferFailed(err)

        self._payment_ledger.transfer(bidder, self.beneficiary, payment)
        self._unit_ledger.transfer(self.address, bidder, quantity)
        self.claimed.add(bidder)

    # =========================================================================
    # Stats
    # =========================================================================

    def stats(self) -> dict:
        """Get auction statistics."""
        result = self.clearing()
        return {
            "kind": self.kind.value,
            "phase": self.phase().name,
            "bid_count": len(self.ledger),
            "bidders": len(self.ledger.bidders()),
            "total_demand": self.ledger.total_demand(),
            "supply": self.supply,
            "allocated": result.total_allocated,
            "clearing_price": result.clearing_price,
            "claimed": len(self.claimed),
            "unclaimed": len(self.unclaimed_winners()),
        }

    def __repr__(self) -> str:
        return (
            f"BatchClearingAuction(address={bytes_to_hex(self.address)[:10]}, "
            f"supply={self.supply}, deadline={self.deadline}, bids={len(self.ledger)})"
        )
