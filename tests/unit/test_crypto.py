"""
Unit tests for identity helpers.

Tests cover:
1. Key generation and address derivation
2. Deployment address derivation
3. Hex helpers
"""

import pytest

from socialauction.crypto import (
    address_from_public_key,
    bytes_to_hex,
    derive_contract_address,
    generate_keypair,
    hex_to_bytes,
    is_valid_address,
    keccak256,
    private_key_to_public_key,
)


class TestKeys:
    """Tests for keypairs and addresses."""

    def test_keypair_sizes(self):
        kp = generate_keypair()
        assert len(kp.private_key) == 32
        assert len(kp.public_key) == 64
        assert len(kp.address) == 20

    def test_address_deterministic(self):
        kp = generate_keypair()
        assert address_from_public_key(kp.public_key) == kp.address
        assert private_key_to_public_key(kp.private_key) == kp.public_key

    def test_distinct_keypairs(self):
        assert generate_keypair().address != generate_keypair().address

    def test_bad_public_key(self):
        with pytest.raises(ValueError):
            address_from_public_key(b"\x00" * 33)

    def test_keccak_empty(self):
        """Known Keccak-256 of the empty string."""
        assert keccak256(b"").hex() == (
            "c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"
        )


class TestDeploymentAddress:
    """Tests for derive_contract_address()."""

    def test_nonce_changes_address(self):
        creator = b"\x01" * 20
        assert derive_contract_address(creator, 1) != derive_contract_address(creator, 2)

    def test_deterministic(self):
        creator = b"\x01" * 20
        assert derive_contract_address(creator, 7) == derive_contract_address(creator, 7)
        assert len(derive_contract_address(creator, 7)) == 20

    def test_rejects_bad_input(self):
        with pytest.raises(ValueError):
            derive_contract_address(b"\x01" * 19, 0)
        with pytest.raises(ValueError):
            derive_contract_address(b"\x01" * 20, -1)


class TestHex:
    def test_round_trip(self):
        address = b"\xab" * 20
        text = bytes_to_hex(address)
        assert text.startswith("0x")
        assert hex_to_bytes(text) == address
        assert is_valid_address(text)

    def test_invalid_address_strings(self):
        assert not is_valid_address("ab" * 20)
        assert not is_valid_address("0x" + "ab" * 19)
        assert not is_valid_address("0x" + "zz" * 20)
