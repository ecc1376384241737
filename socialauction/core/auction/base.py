"""
Shared settlement interface for the auction variants.

Both variants move through the same two phases, derived from time alone:

    ACTIVE  (now <  deadline)  bids accepted, claims rejected
    CLOSED  (now >= deadline)  bids rejected, each winner claims once

They differ in how units are allocated, so each keeps its own allocation
code and only this surface is shared.
"""

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Protocol, runtime_checkable

from socialauction.core.state.balances import UnitLedger


class AuctionKind(Enum):
    """Tag for the auction variants."""
    BATCH_CLEARING = "batch_clearing"
    ASCENDING_SINGLE_WINNER = "ascending_single_winner"


class AuctionPhase(IntEnum):
    """Phase of an auction. Never stored, always computed."""
    ACTIVE = 0
    CLOSED = 1


def is_auction_active(now: int, deadline: int) -> bool:
    """An auction is active strictly before its deadline."""
    return now < deadline


def phase_at(now: int, deadline: int) -> AuctionPhase:
    """Phase of an auction with `deadline` at time `now`."""
    return AuctionPhase.ACTIVE if is_auction_active(now, deadline) else AuctionPhase.CLOSED


@dataclass(frozen=True)
class Entitlement:
    """
    What a bidder may claim.

    Attributes:
        quantity: Units allocated across all of the bidder's bids
        owed_price: Total payment due for those units
    """
    quantity: int = 0
    owed_price: int = 0

    @property
    def is_winner(self) -> bool:
        return self.quantity > 0

    def as_tuple(self):
        """(price, quantity), the order the reference query returns."""
        return self.owed_price, self.quantity


@dataclass(frozen=True)
class ClaimReceipt:
    """Outcome of a successful claim."""
    bidder: bytes
    quantity: int
    owed_price: int
    payment: int

    @property
    def overpayment(self) -> int:
        """Amount paid above the owed total. Forwarded, not refunded."""
        return self.payment - self.owed_price


@runtime_checkable
class SettlementAuction(Protocol):
    """Surface shared by every auction variant."""

    kind: AuctionKind
    address: bytes

    @property
    def beneficiary(self) -> bytes: ...

    @property
    def supply(self) -> int: ...

    @property
    def deadline(self) -> int: ...

    @property
    def unit_ledger(self) -> UnitLedger: ...

    def is_active(self) -> bool: ...

    def phase(self) -> AuctionPhase: ...

    def current_clearing_price(self) -> int: ...

    def get_claimable(self, bidder: bytes) -> Entitlement: ...

    def has_claimed(self, bidder: bytes) -> bool: ...

    def claim(self, bidder: bytes, payment_sent: int = 0) -> ClaimReceipt: ...
