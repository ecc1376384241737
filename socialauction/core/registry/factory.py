"""
Auction Factory - Creates and indexes auctions.

Only the factory owner may create auctions. Each auction gets:
- an address derived from the factory address and a creation nonce
- its own UnitLedger, with the whole supply minted to the auction and the
  beneficiary barred from receiving units
- immutable beneficiary, supply and deadline
"""

from typing import List, Optional, Tuple, Union

from socialauction.core.auction.ascending import AscendingSingleWinnerAuction
from socialauction.core.auction.base import AuctionKind
from socialauction.core.auction.settlement import BatchClearingAuction
from socialauction.core.clock import Clock, SystemClock
from socialauction.core.config import AuctionHouseConfig
from socialauction.core.errors import NotOwner
from socialauction.core.state.balances import PaymentLedger, UnitLedger
from socialauction.crypto import bytes_to_hex, derive_contract_address
from socialauction.utils.logger import get_logger
from socialauction.utils.validation import (
    validate_address,
    validate_positive_amount,
    validate_timestamp,
)

logger = get_logger("factory")

Auction = Union[BatchClearingAuction, AscendingSingleWinnerAuction]


class AuctionFactory:
    """
    Registry of auctions created by one owner.

    Attributes:
        owner: Address allowed to create auctions
        address: The factory's own address
        payment_ledger: Shared payment ledger handed to every auction
    """

    def __init__(
        self,
        owner: bytes,
        payment_ledger: Optional[PaymentLedger] = None,
        clock: Optional[Clock] = None,
        config: Optional[AuctionHouseConfig] = None,
    ):
        valid, err = validate_address(owner, "owner")
        if not valid:
            raise ValueError(err)

        self.owner = owner
        self.address = derive_contract_address(owner, 0)
        self.payment_ledger = payment_ledger or PaymentLedger()
        self.clock = clock or SystemClock()
        self.config = config or AuctionHouseConfig()
        self._auctions: List[Auction] = []

    def create_auction(
        self,
        caller: bytes,
        supply: Optional[int] = None,
        deadline: Optional[int] = None,
        beneficiary: Optional[bytes] = None,
        unit_name: Optional[str] = None,
        unit_symbol: Optional[str] = None,
        kind: AuctionKind = AuctionKind.BATCH_CLEARING,
        min_price: Optional[int] = None,
        min_bid_increment: Optional[int] = None,
    ) -> Auction:
        """
        Create a new auction.

        Args:
            caller: Must be the factory owner
            supply: Units to auction (config default if None)
            deadline: Unix time the auction closes (now + default duration if None)
            beneficiary: Receiver of settlement payments (caller if None)
            unit_name: Name of the unit ledger (config default if None)
            unit_symbol: Symbol of the unit ledger (config default if None)
            kind: Which auction variant to create
            min_price: Reserve price, ascending variant only
            min_bid_increment: Minimum raise, ascending variant only

        Returns:
            The new auction

        Raises:
            NotOwner: caller is not the factory owner
            ValueError: invalid parameters
        """
        if caller != self.owner:
            raise NotOwner()

        supply = self.config.default_supply if supply is None else supply
        deadline = self.clock.now() + self.config.default_duration if deadline is None else deadline
        beneficiary = caller if beneficiary is None else beneficiary

        for valid, err in (
            validate_positive_amount(supply, "supply"),
            validate_timestamp(deadline, "deadline"),
            validate_address(beneficiary, "beneficiary"),
        ):
            if not valid:
                raise ValueError(err)

        address = derive_contract_address(self.address, len(self._auctions) + 1)
        unit_ledger = UnitLedger(
            name=unit_name or self.config.unit_name,
            symbol=unit_symbol or self.config.unit_symbol,
            supply=supply,
            holder=address,
            excluded=(beneficiary,),
        )

        auction: Auction
        if kind == AuctionKind.BATCH_CLEARING:
            auction = BatchClearingAuction(
                beneficiary=beneficiary,
                supply=supply,
                deadline=deadline,
                unit_ledger=unit_ledger,
                payment_ledger=self.payment_ledger,
                address=address,
                clock=self.clock,
            )
        elif kind == AuctionKind.ASCENDING_SINGLE_WINNER:
            auction = AscendingSingleWinnerAuction(
                beneficiary=beneficiary,
                supply=supply,
                deadline=deadline,
                unit_ledger=unit_ledger,
                payment_ledger=self.payment_ledger,
                address=address,
                clock=self.clock,
                min_price=self.config.min_price if min_price is None else min_price,
                min_bid_increment=(
                    self.config.min_bid_increment if min_bid_increment is None else min_bid_increment
                ),
            )
        else:
            raise ValueError(f"Unknown auction kind: {kind}")

        self._auctions.append(auction)
        logger.info(
            f"Auction #{len(self._auctions)} created: kind={kind.value}, "
            f"address={bytes_to_hex(address)[:10]}, supply={supply}, deadline={deadline}"
        )
        return auction

    # =========================================================================
    # Queries
    # =========================================================================

    @property
    def auctions(self) -> Tuple[Auction, ...]:
        return tuple(self._auctions)

    def auction_count(self) -> int:
        """Number of auctions created so far."""
        return len(self._auctions)

    def get_auction(self, index: int) -> Auction:
        """Auction by creation order, starting at 0."""
        if not 0 <= index < len(self._auctions):
            raise IndexError(f"Auction index {index} out of range [0, {len(self._auctions)})")
        return self._auctions[index]

    def active_auctions(self) -> List[Auction]:
        return [auction for auction in self._auctions if auction.is_active()]

    def stats(self) -> dict:
        """Get factory statistics."""
        return {
            "auctions": len(self._auctions),
            "active": len(self.active_auctions()),
            "owner": bytes_to_hex(self.owner),
        }
