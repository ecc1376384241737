"""
Unit tests for the command line interface.

Tests cover:
1. demo scenarios
2. clear command output and input validation
"""

import json

import pytest
from click.testing import CliRunner

from socialauction.cli.main import cli
from socialauction.cli.schemas import label_to_address, parse_bid_file
from socialauction.utils.logger import AuctionLogger


REFERENCE_BIDS = [
    {"bidder": "signer0", "price": 100, "quantity": 2},
    {"bidder": "signer2", "price": 400, "quantity": 4},
    {"bidder": "signer4", "price": 600, "quantity": 1},
    {"bidder": "signer5", "price": 800, "quantity": 3},
    {"bidder": "signer3", "price": 500, "quantity": 1},
    {"bidder": "signer1", "price": 200, "quantity": 3},
    {"bidder": "signer5", "price": 800, "quantity": 5},
]


@pytest.fixture
def runner(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    yield CliRunner()
    # cli() binds its log handlers to the runner's stream, closed after invoke
    AuctionLogger.reset()


class TestDemo:
    """Tests for the demo command."""

    def test_batch_demo(self, runner):
        result = runner.invoke(cli, ["demo"])

        assert result.exit_code == 0, result.output
        assert "Clearing price: 500" in result.output
        assert "signer3 claimable: price=500, quantity=1" in result.output
        assert "signer3 claimable: price=0, quantity=0" in result.output
        assert "signer5: 9 AC for 6900" in result.output
        assert "signer3: rejected (not owning any winner bid)" in result.output
        assert "Unclaimed winners: 0" in result.output

    def test_ascending_demo(self, runner):
        result = runner.invoke(cli, ["demo", "--scenario", "ascending"])

        assert result.exit_code == 0, result.output
        assert "signer0 bid 150 rejected" in result.output
        assert "Winner took 10 units for 400" in result.output


class TestClear:
    """Tests for the clear command."""

    def test_reference_file(self, runner, tmp_path):
        path = tmp_path / "bids.json"
        path.write_text(json.dumps({"supply": 10, "bids": REFERENCE_BIDS}))

        result = runner.invoke(cli, ["clear", str(path)])

        assert result.exit_code == 0, result.output
        assert "Clearing price: 500" in result.output
        assert "Allocated: 10" in result.output

    def test_bare_list_uses_option_supply(self, runner, tmp_path):
        path = tmp_path / "bids.json"
        path.write_text(json.dumps(REFERENCE_BIDS))

        result = runner.invoke(cli, ["clear", str(path), "--supply", "100"])

        assert result.exit_code == 0, result.output
        assert "Clearing price: 100" in result.output
        assert "Allocated: 19" in result.output

    def test_invalid_bid_rejected(self, runner, tmp_path):
        path = tmp_path / "bids.json"
        path.write_text(json.dumps([{"bidder": "a", "price": 0, "quantity": 1}]))

        result = runner.invoke(cli, ["clear", str(path)])

        assert result.exit_code != 0
        assert "Invalid bid file" in result.output

    def test_oversized_bid_rejected(self, runner, tmp_path):
        path = tmp_path / "bids.json"
        path.write_text(json.dumps([{"bidder": "a", "price": 5, "quantity": 11}]))

        result = runner.invoke(cli, ["clear", str(path), "--supply", "10"])

        assert result.exit_code != 0
        assert "more than the supply" in result.output


class TestSchemas:
    """Tests for bid file parsing."""

    def test_labels_map_to_stable_addresses(self):
        assert label_to_address("alice") == label_to_address("alice")
        assert label_to_address("alice") != label_to_address("bob")
        assert len(label_to_address("alice")) == 20

    def test_hex_address_passes_through(self):
        assert label_to_address("0x" + "01" * 20) == b"\x01" * 20

    def test_extra_fields_rejected(self):
        from pydantic import ValidationError
        with pytest.raises(ValidationError):
            parse_bid_file(json.dumps([{"bidder": "a", "price": 1, "quantity": 1, "note": "x"}]))
