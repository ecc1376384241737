"""
Balances - Account ledgers used by the auction for settlement.

Two ledgers share one bookkeeping core:

1. **UnitLedger**: the fixed supply of fungible units being auctioned.
   The whole supply is minted once, to the auction, and only moves by
   transfer afterwards.
2. **PaymentLedger**: native currency. Bidders pay owed amounts through it
   and the ascending variant keeps its escrow in it.

Transfers are validated before they are applied. A rejected transfer
raises TransferFailed and leaves every balance untouched.
"""

from collections import defaultdict
from typing import Dict, Iterable, Optional, Set, Tuple

from socialauction.core.errors import TransferFailed
from socialauction.crypto import bytes_to_hex
from socialauction.utils.logger import get_logger
from socialauction.utils.validation import validate_address, validate_amount, validate_positive_amount

logger = get_logger("ledger")


# =============================================================================
# Balance Book
# =============================================================================


class BalanceBook:
    """
    Address -> balance mapping with validated transfers.

    Attributes:
        balances: Mapping of address to balance (absent = 0)
        excluded: Addresses that may not receive transfers
    """

    def __init__(self, excluded: Iterable[bytes] = ()):
        self.balances: Dict[bytes, int] = defaultdict(int)
        self.excluded: Set[bytes] = set(excluded)

    def balance_of(self, address: bytes) -> int:
        """Get balance for an address."""
        return self.balances.get(address, 0)

    def validate_transfer(
        self,
        sender: bytes,
        recipient: bytes,
        amount: int,
    ) -> Tuple[bool, str]:
        """
        Check whether a transfer could be applied right now.

        Returns:
            (is_valid, error_message)
        """
        for name, address in (("sender", sender), ("recipient", recipient)):
            valid, err = validate_address(address, name)
            if not valid:
                return False, err

        valid, err = validate_amount(amount)
        if not valid:
            return False, err

        if recipient in self.excluded:
            return False, f"Recipient {bytes_to_hex(recipient)[:10]} cannot receive transfers"

        available = self.balance_of(sender)
        if available < amount:
            return False, f"Insufficient balance: have {available}, need {amount}"

        return True, ""

    def transfer(self, sender: bytes, recipient: bytes, amount: int) -> None:
        """
        Move `amount` from sender to recipient.

        Raises:
            TransferFailed: if validation fails (no balance changes)
        """
        valid, err = self.validate_transfer(sender, recipient, amount)
        if not valid:
            logger.warning(f"Transfer rejected: {err}")
            raise TransferFailed(err)

        self.balances[sender] -= amount
        self.balances[recipient] += amount
        logger.debug(
            f"Transfer {amount}: {bytes_to_hex(sender)[:10]} -> {bytes_to_hex(recipient)[:10]}"
        )

    def total(self) -> int:
        """Sum of all balances."""
        return sum(self.balances.values())


# =============================================================================
# Unit Ledger
# =============================================================================


class UnitLedger(BalanceBook):
    """
    Fixed-supply fungible units.

    The whole supply is minted to `holder` at construction. There is no
    later minting or burning, so total() always equals total_supply.
    """

    def __init__(
        self,
        name: str,
        symbol: str,
        supply: int,
        holder: bytes,
        excluded: Iterable[bytes] = (),
    ):
        valid, err = validate_positive_amount(supply, "supply")
        if not valid:
            raise ValueError(err)
        valid, err = validate_address(holder, "holder")
        if not valid:
            raise ValueError(err)

        super().__init__(excluded=excluded)
        self.name = name
        self.symbol = symbol
        self._total_supply = supply
        self.balances[holder] = supply

        logger.info(f"Minted {supply} {symbol} to {bytes_to_hex(holder)[:10]}")

    @property
    def total_supply(self) -> int:
        return self._total_supply

    def __repr__(self) -> str:
        return f"UnitLedger({self.symbol}, supply={self._total_supply}, holders={len(self.balances)})"


# =============================================================================
# Payment Ledger
# =============================================================================


class PaymentLedger(BalanceBook):
    """Native currency accounts."""

    def __init__(self, initial_balances: Optional[Dict[bytes, int]] = None):
        super().__init__()
        for address, amount in (initial_balances or {}).items():
            self.deposit(address, amount)

    def deposit(self, address: bytes, amount: int) -> None:
        """Fund an account from outside the system."""
        valid, err = validate_address(address)
        if not valid:
            raise ValueError(err)
        valid, err = validate_amount(amount)
        if not valid:
            raise ValueError(err)

        self.balances[address] += amount
        logger.debug(f"Deposit {amount} to {bytes_to_hex(address)[:10]}")

    def __repr__(self) -> str:
        return f"PaymentLedger(accounts={len(self.balances)}, total={self.total()})"
