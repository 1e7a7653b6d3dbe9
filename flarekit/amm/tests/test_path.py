"""Tests for packed multi-hop path encoding."""
import pytest

from flarekit.amm.path import (
    DEFAULT_DEPLOYER,
    decode_algebra_path,
    decode_v3_path,
    encode_algebra_path,
    encode_v3_path,
)
from flarekit.chain.errors import ValidationError


class TestV3Path:

    def test_three_token_path_length(self, token_addresses):
        path = encode_v3_path(token_addresses, [3000, 500])
        assert len(path) == 66

    def test_layout(self, token_addresses):
        path = encode_v3_path(token_addresses[:2], [3000])
        assert path[:20].hex() == token_addresses[0][2:].lower()
        assert path[20:23] == (3000).to_bytes(3, "big")
        assert path[23:].hex() == token_addresses[1][2:].lower()

    def test_decode(self, token_addresses):
        tokens, fees = decode_v3_path(encode_v3_path(token_addresses, [3000, 500]))
        assert tokens == token_addresses
        assert fees == [3000, 500]

    def test_fee_count_mismatch(self, token_addresses):
        with pytest.raises(ValidationError, match="needs 2 fees"):
            encode_v3_path(token_addresses, [3000])

    def test_single_token(self, token_addresses):
        with pytest.raises(ValidationError):
            encode_v3_path(token_addresses[:1], [])

    def test_fee_too_large(self, token_addresses):
        with pytest.raises(ValidationError, match="uint24"):
            encode_v3_path(token_addresses[:2], [2**24])

    def test_bad_address(self, token_addresses):
        with pytest.raises(ValidationError, match="Invalid address"):
            encode_v3_path([token_addresses[0], "0x1234"], [3000])

    def test_decode_bad_length(self):
        with pytest.raises(ValidationError):
            decode_v3_path(b"\x00" * 50)


class TestAlgebraPath:

    def test_three_token_path_length(self, token_addresses):
        assert len(encode_algebra_path(token_addresses)) == 100

    def test_default_deployers(self, token_addresses):
        tokens, deployers = decode_algebra_path(encode_algebra_path(token_addresses))
        assert tokens == token_addresses
        assert deployers == [DEFAULT_DEPLOYER, DEFAULT_DEPLOYER]

    def test_deployer_count_mismatch(self, token_addresses):
        with pytest.raises(ValidationError, match="needs 2 deployers"):
            encode_algebra_path(token_addresses, [DEFAULT_DEPLOYER])
