"""
Input schemas for CLI files.

Bid files are JSON, either a bare list of bids or an object with a
"supply" and a "bids" list:

    {"supply": 10, "bids": [{"bidder": "alice", "price": 100, "quantity": 2}]}

Bidders may be 0x-prefixed addresses or plain labels; labels are mapped
to stable addresses so the same label always names the same bidder.
"""

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

from socialauction.crypto import hex_to_bytes, is_valid_address, keccak256
from socialauction.utils.validation import MAX_AMOUNT


class BidInput(BaseModel):
    """One bid row."""
    model_config = ConfigDict(extra="forbid")

    bidder: str = Field(min_length=1)
    price: int = Field(gt=0, le=MAX_AMOUNT)
    quantity: int = Field(gt=0, le=MAX_AMOUNT)

    @field_validator("bidder")
    @classmethod
    def strip_bidder(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("bidder cannot be blank")
        return value

    def bidder_address(self) -> bytes:
        return label_to_address(self.bidder)


class BidFile(BaseModel):
    """A clearing request loaded from disk."""
    model_config = ConfigDict(extra="forbid")

    supply: Optional[int] = Field(default=None, gt=0, le=MAX_AMOUNT)
    bids: List[BidInput]


_BID_FILE_ADAPTER = TypeAdapter(Union[BidFile, List[BidInput]])


def parse_bid_file(raw: str) -> BidFile:
    """Validate JSON text as a BidFile (a bare list is wrapped)."""
    parsed = _BID_FILE_ADAPTER.validate_json(raw)
    if isinstance(parsed, list):
        return BidFile(bids=parsed)
    return parsed


def label_to_address(label: str) -> bytes:
    """0x addresses pass through; other labels hash to a fixed address."""
    if is_valid_address(label):
        return hex_to_bytes(label)
    return keccak256(label.encode("utf-8"))[-20:]
