"""
Unit tests for input validation and logging setup.
"""

import logging

import pytest

from socialauction.utils.logger import AuctionLogger, get_logger, setup_logging
from socialauction.utils.validation import (
    MAX_AMOUNT,
    validate_address,
    validate_amount,
    validate_positive_amount,
    validate_timestamp,
)


class TestValidation:
    """Tests for validators returning (is_valid, error_message)."""

    def test_address(self):
        assert validate_address(b"\x01" * 20) == (True, "")
        ok, err = validate_address("0x01", "bidder")
        assert not ok and "bidder must be bytes" in err

    @pytest.mark.parametrize("value,ok", [
        (0, True),
        (MAX_AMOUNT, True),
        (MAX_AMOUNT + 1, False),
        (-1, False),
        (False, False),
        ("10", False),
    ])
    def test_amount(self, value, ok):
        assert validate_amount(value)[0] is ok

    def test_positive_amount(self):
        assert not validate_positive_amount(0)[0]
        assert validate_positive_amount(1)[0]

    def test_timestamp(self):
        assert validate_timestamp(1_700_000_000)[0]
        assert not validate_timestamp(-1)[0]


class TestLogger:
    """Tests for the logging setup."""

    def test_namespaced_logger(self):
        assert get_logger("clearing").name == "socialauction.clearing"

    def test_file_logging(self, tmp_path):
        try:
            setup_logging(level=logging.DEBUG, log_dir=str(tmp_path / "logs"))
            get_logger("test").info("hello")
            for handler in logging.getLogger("socialauction").handlers:
                handler.flush()
            assert "hello" in (tmp_path / "logs" / "socialauction.log").read_text()
        finally:
            AuctionLogger.reset()
