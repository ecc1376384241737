"""
Errors raised by the auction core.

Every error is a rejected operation: the call that raised it changed no
state. Messages mirror the revert reasons of the reference deployment so
callers and logs can match on them.
"""


class AuctionError(Exception):
    """Base class for all auction rejections."""

    default_message = "auction operation rejected"

    def __init__(self, message: str = ""):
        super().__init__(message or self.default_message)


# =============================================================================
# Bid Submission
# =============================================================================


class AuctionFinished(AuctionError):
    """A bid arrived at or after the deadline."""
    default_message = "auction finished"


class OwnerCannotBid(AuctionError):
    """The beneficiary tried to bid on its own auction."""
    default_message = "Owner cannot deposit"


class QuantityExceedsSupply(AuctionError):
    """A bid asked for more units than the auction holds."""
    default_message = "Amount must be lower than supply"


class InvalidBid(AuctionError):
    """A bid carried a zero, negative or out-of-range value."""
    default_message = "invalid bid"


class BidTooLow(AuctionError):
    """An ascending bid did not beat the reserve or the current leader."""
    default_message = "Low stake"


# =============================================================================
# Settlement
# =============================================================================


class AuctionRunning(AuctionError):
    """A claim arrived before the deadline."""
    default_message = "auction is running"


class NoWinningBid(AuctionError):
    """The claimant has no allocated units."""
    default_message = "not owning any winner bid"


class AlreadyClaimed(AuctionError):
    """The claimant already settled."""
    default_message = "bidder already claimed"


class InsufficientPayment(AuctionError):
    """The payment sent with a claim is below the owed total."""
    default_message = "ETH not enough"


class TransferFailed(AuctionError):
    """A balance ledger refused a transfer."""
    default_message = "transfer failed"


# =============================================================================
# Registry
# =============================================================================


class NotOwner(AuctionError):
    """Only the factory owner may create auctions."""
    default_message = "only owner"


__all__ = [
    "AuctionError",
    "AuctionFinished",
    "OwnerCannotBid",
    "QuantityExceedsSupply",
    "InvalidBid",
    "BidTooLow",
    "AuctionRunning",
    "NoWinningBid",
    "AlreadyClaimed",
    "InsufficientPayment",
    "TransferFailed",
    "NotOwner",
]
