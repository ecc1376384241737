"""
Integration test: one batch auction from creation to settlement.

Walks the reference sequence against a factory-created auction:
bids from six signers, a late tie that displaces signer3, the deadline,
then the claims (rejected and accepted) and the final balances.
"""

import pytest

from socialauction.core.auction import AuctionPhase
from socialauction.core.clock import ManualClock
from socialauction.core.errors import (
    AlreadyClaimed,
    AuctionFinished,
    AuctionRunning,
    InsufficientPayment,
    NoWinningBid,
    OwnerCannotBid,
    QuantityExceedsSupply,
)
from socialauction.core.registry import AuctionFactory
from socialauction.core.state import PaymentLedger
from socialauction.crypto import generate_keypair


SUPPLY = 10
DURATION = 60 * 60
START = 1_700_000_000


@pytest.fixture(scope="module")
def world():
    owner = generate_keypair().address
    signers = [generate_keypair().address for _ in range(6)]
    payments = PaymentLedger({signer: 10_000_000 for signer in signers})
    clock = ManualClock(start=START)

    factory = AuctionFactory(owner, payment_ledger=payments, clock=clock)
    auction = factory.create_auction(owner, supply=SUPPLY, deadline=START + DURATION)
    return {
        "owner": owner,
        "signers": signers,
        "payments": payments,
        "clock": clock,
        "auction": auction,
    }


class TestReferenceAuction:
    """Ordered steps sharing one module-scoped auction."""

    def test_parameters(self, world):
        auction = world["auction"]
        assert auction.beneficiary == world["owner"]
        assert auction.deadline > START
        assert auction.unit_ledger.balance_of(auction.address) == SUPPLY

    def test_owner_cannot_bid(self, world):
        with pytest.raises(OwnerCannotBid):
            world["auction"].auction_bid(world["owner"], 1, 1)

    def test_first_bid_claimable(self, world):
        auction, s = world["auction"], world["signers"]
        auction.auction_bid(s[0], 100, 2)
        assert auction.get_claimable(s[0]).as_tuple() == (200, 2)

    def test_clearing_price_after_seven_bids(self, world):
        auction, s = world["auction"], world["signers"]
        for signer, price, quantity in ((2, 400, 4), (4, 600, 1), (5, 800, 3),
                                        (3, 500, 1), (1, 200, 3), (5, 800, 5)):
            auction.auction_bid(s[signer], price, quantity)

        assert auction.current_clearing_price() == 500
        assert auction.get_claimable(s[3]).as_tuple() == (500, 1)

    def test_late_tie_displaces_signer3(self, world):
        auction, s = world["auction"], world["signers"]
        auction.auction_bid(s[5], 500, 1)

        assert auction.current_clearing_price() == 500
        assert auction.get_claimable(s[3]).as_tuple() == (0, 0)

    def test_bid_above_supply(self, world):
        with pytest.raises(QuantityExceedsSupply):
            world["auction"].auction_bid(world["signers"][2], 400, SUPPLY + 1)

    def test_no_claim_while_running(self, world):
        with pytest.raises(AuctionRunning):
            world["auction"].claim(world["signers"][1], 0)

    def test_signer3_has_no_winning_bid(self, world):
        auction = world["auction"]
        assert auction.phase() == AuctionPhase.ACTIVE

        world["clock"].advance(1000 * 60)
        assert auction.phase() == AuctionPhase.CLOSED

        with pytest.raises(NoWinningBid):
            auction.claim(world["signers"][3], 0)

    def test_signer5_underpays(self, world):
        with pytest.raises(InsufficientPayment):
            world["auction"].claim(world["signers"][5], 0)

    def test_signer5_claims(self, world):
        auction, s5 = world["auction"], world["signers"][5]
        receipt = auction.claim(s5, 10_000_000)

        # 5 + 3 at 800 and the late 1 at 500, summed across all three bids
        assert receipt.quantity == 9
        assert receipt.owed_price == 6_900
        assert auction.unit_ledger.balance_of(s5) == 9
        assert world["payments"].balance_of(world["owner"]) == 10_000_000

    def test_signer5_cannot_claim_again(self, world):
        with pytest.raises(AlreadyClaimed):
            world["auction"].claim(world["signers"][5], 10_000_000)

    def test_no_bids_after_close(self, world):
        with pytest.raises(AuctionFinished):
            world["auction"].auction_bid(world["signers"][5], 500, 1)

    def test_remaining_winner_settles(self, world):
        auction, s4 = world["auction"], world["signers"][4]
        auction.claim(s4, 600)

        assert auction.unit_ledger.balance_of(auction.address) == 0
        assert auction.unit_ledger.total() == SUPPLY
        assert auction.unclaimed_winners() == []
