"""
Social Auction CLI - Command Line Interface

Main entry point for all CLI commands.
"""

import logging
from pathlib import Path

import click
from pydantic import ValidationError

from socialauction import __version__
from socialauction.core.config import load_config
from socialauction.utils.logger import setup_logging, get_logger


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--config", "config_path", default=None, type=click.Path(exists=True, dir_okay=False),
              help="JSON config file")
@click.version_option(version=__version__)
@click.pass_context
def cli(ctx, debug, config_path):
    """Social Auction - fixed-supply token sales by auction"""
    cfg = load_config(config_path)

    level = logging.DEBUG if debug else getattr(logging, cfg.log_level)
    setup_logging(level=level, log_dir=str(cfg.log_dir), log_to_file=cfg.log_to_file)

    ctx.ensure_object(dict)
    ctx.obj["config"] = cfg


# =============================================================================
# Demo Command
# =============================================================================


# Reference scenario: (signer, price, quantity) in submission order
DEMO_BIDS = [
    (0, 100, 2),
    (2, 400, 4),
    (4, 600, 1),
    (5, 800, 3),
    (3, 500, 1),
    (1, 200, 3),
    (5, 800, 5),
]
DEMO_LATE_BID = (5, 500, 1)


@cli.command("demo")
@click.option("--scenario", default="batch", type=click.Choice(["batch", "ascending"]),
              help="Demo scenario to run")
@click.pass_context
def demo(ctx, scenario):
    """Run a full auction from creation to settlement"""
    if scenario == "batch":
        _demo_batch(ctx.obj["config"])
    else:
        _demo_ascending(ctx.obj["config"])


def _demo_setup(cfg, kind):
    from socialauction.core.clock import ManualClock, SystemClock
    from socialauction.core.registry import AuctionFactory
    from socialauction.core.state import PaymentLedger
    from socialauction.crypto import generate_keypair

    owner = generate_keypair().address
    signers = [generate_keypair().address for _ in range(6)]
    payments = PaymentLedger({signer: 100_000 for signer in signers})
    clock = ManualClock(start=SystemClock().now())

    factory = AuctionFactory(owner, payment_ledger=payments, clock=clock, config=cfg)
    auction = factory.create_auction(owner, kind=kind)
    return auction, owner, signers, payments, clock


def _demo_batch(cfg):
    from socialauction.core.auction import AuctionKind
    from socialauction.core.errors import AuctionError
    from socialauction.crypto import bytes_to_hex

    click.echo("=" * 60)
    click.echo("  SOCIAL AUCTION - BATCH CLEARING DEMO")
    click.echo("=" * 60)
    click.echo()

    auction, owner, signers, payments, clock = _demo_setup(cfg, AuctionKind.BATCH_CLEARING)
    units = auction.unit_ledger
    click.echo(f"Auction {bytes_to_hex(auction.address)[:12]}... "
               f"selling {auction.supply} {units.symbol}")
    click.echo()

    click.echo("Bids:")
    for signer, price, quantity in DEMO_BIDS:
        auction.auction_bid(signers[signer], price, quantity)
        click.echo(f"  signer{signer}: {quantity} @ {price}")
    click.echo(f"Clearing price: {auction.current_clearing_price()}")
    owed, qty = auction.get_claimable(signers[3]).as_tuple()
    click.echo(f"  signer3 claimable: price={owed}, quantity={qty}")
    click.echo()

    signer, price, quantity = DEMO_LATE_BID
    auction.auction_bid(signers[signer], price, quantity)
    click.echo(f"Late bid signer{signer}: {quantity} @ {price}")
    click.echo(f"Clearing price: {auction.current_clearing_price()}")
    owed, qty = auction.get_claimable(signers[3]).as_tuple()
    click.echo(f"  signer3 claimable: price={owed}, quantity={qty}")
    click.echo()

    clock.set(auction.deadline)
    click.echo("Auction closed. Settling:")
    for index, signer_address in enumerate(signers):
        entitlement = auction.get_claimable(signer_address)
        try:
            receipt = auction.claim(signer_address, entitlement.owed_price)
        except AuctionError as exc:
            click.echo(f"  signer{index}: rejected ({exc})")
            continue
        click.echo(f"  signer{index}: {receipt.quantity} {units.symbol} for {receipt.payment}")

    click.echo()
    click.echo(f"Beneficiary received: {payments.balance_of(owner)}")
    click.echo(f"Unsold units held by auction: {units.balance_of(auction.address)}")
    click.echo(f"Unclaimed winners: {len(auction.unclaimed_winners())}")


def _demo_ascending(cfg):
    from socialauction.core.auction import AuctionKind
    from socialauction.core.errors import AuctionError
    from socialauction.crypto import bytes_to_hex

    click.echo("=" * 60)
    click.echo("  SOCIAL AUCTION - ASCENDING DEMO")
    click.echo("=" * 60)
    click.echo()

    auction, owner, signers, payments, clock = _demo_setup(cfg, AuctionKind.ASCENDING_SINGLE_WINNER)
    click.echo(f"Auction {bytes_to_hex(auction.address)[:12]}... "
               f"selling {auction.supply} {auction.unit_ledger.symbol} to one winner")

    for index, amount in ((0, 100), (1, 150), (0, 150), (2, 400)):
        try:
            auction.bid(signers[index], amount)
            click.echo(f"  signer{index} leads at {amount}")
        except AuctionError as exc:
            click.echo(f"  signer{index} bid {amount} rejected ({exc})")

    clock.set(auction.deadline)
    receipt = auction.claim(auction.highest_bidder)
    click.echo(f"Winner took {receipt.quantity} units for {receipt.owed_price}")
    click.echo(f"Beneficiary received: {payments.balance_of(owner)}")


# =============================================================================
# Clear Command
# =============================================================================


@cli.command("clear")
@click.argument("bids_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--supply", type=click.IntRange(min=1), default=None,
              help="Units available (overrides the file, then the config)")
@click.pass_context
def clear(ctx, bids_file, supply):
    """Compute the clearing price and allocation for a JSON bid file"""
    from socialauction.cli.schemas import parse_bid_file
    from socialauction.core.auction import Bid, compute_clearing, rank_bids

    logger = get_logger("cli")

    try:
        request = parse_bid_file(bids_file.read_text())
    except ValidationError as exc:
        raise click.ClickException(f"Invalid bid file {bids_file}:\n{exc}")

    supply = supply or request.supply or ctx.obj["config"].default_supply
    bids = [
        Bid(bidder=row.bidder_address(), price=row.price, quantity=row.quantity, sequence_index=i)
        for i, row in enumerate(request.bids)
    ]
    oversized = [b.sequence_index for b in bids if b.quantity > supply]
    if oversized:
        raise click.ClickException(
            f"Bids {oversized} ask for more than the supply of {supply}"
        )

    result = compute_clearing(bids, supply)
    logger.debug(f"Cleared {len(bids)} bids from {bids_file}")

    click.echo(f"Supply: {supply}")
    click.echo(f"Clearing price: {result.clearing_price}")
    click.echo(f"Allocated: {result.total_allocated}")
    click.echo()
    click.echo(f"  {'#':>3}  {'bidder':<20} {'price':>10} {'qty':>6} {'alloc':>6}")
    for bid in rank_bids(bids):
        label = request.bids[bid.sequence_index].bidder
        click.echo(
            f"  {bid.sequence_index:>3}  {label[:20]:<20} {bid.price:>10} "
            f"{bid.quantity:>6} {result.allocated(bid.sequence_index):>6}"
        )


if __name__ == "__main__":
    cli()
