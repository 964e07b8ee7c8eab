"""Currency tickers, their BIP-44 coin types and address encoders.

ENS resolvers store non-ETH addresses as raw bytes keyed by coin type
(ENSIP-9). The encoders below turn those bytes back into the address text a
wallet would show.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Dict, Optional

import base58
import bech32
from eth_utils import to_checksum_address

from resolution.exceptions import ResolutionError, ResolutionErrorCode

ETH_COIN_TYPE = 60

# SLIP-0044 registered coin types
BIP44_COIN_TYPES = MappingProxyType(
    {
        "BTC": 0,
        "LTC": 2,
        "DOGE": 3,
        "DASH": 5,
        "NMC": 7,
        "DGB": 20,
        "MONA": 22,
        "DCR": 42,
        "XEM": 43,
        "ETH": 60,
        "ETC": 61,
        "ATOM": 118,
        "XMR": 128,
        "ZEC": 133,
        "LSK": 134,
        "RSK": 137,
        "XRP": 144,
        "BCH": 145,
        "XLM": 148,
        "BTG": 156,
        "NANO": 165,
        "EOS": 194,
        "TRX": 195,
        "BSV": 236,
        "ALGO": 283,
        "ZIL": 313,
        "DOT": 354,
        "NEAR": 397,
        "KSM": 434,
        "FIL": 461,
        "SOL": 501,
        "XDAI": 700,
        "BNB": 714,
        "VET": 818,
        "NEO": 888,
        "MATIC": 966,
        "ONT": 1024,
        "XTZ": 1729,
        "ADA": 1815,
        "HBAR": 3030,
        "HNS": 5353,
        "AVAX": 9000,
    }
)


@dataclass(frozen=True)
class BitcoinFormat:
    """Version bytes and segwit prefix of a bitcoin-like chain"""

    p2pkh: bytes
    p2sh: bytes
    hrp: Optional[str] = None


def _bitcoin_encoder(fmt: BitcoinFormat) -> Callable[[bytes], str]:
    def encode(script: bytes) -> str:
        # P2PKH: OP_DUP OP_HASH160 <20> OP_EQUALVERIFY OP_CHECKSIG
        if len(script) == 25 and script[:3] == b"\x76\xa9\x14" and script[23:] == b"\x88\xac":
            return base58.b58encode_check(fmt.p2pkh + script[3:23]).decode()
        # P2SH: OP_HASH160 <20> OP_EQUAL
        if len(script) == 23 and script[:2] == b"\xa9\x14" and script[22:] == b"\x87":
            return base58.b58encode_check(fmt.p2sh + script[2:22]).decode()
        if fmt.hrp and len(script) >= 4 and script[0] == 0 and script[1] == len(script) - 2:
            encoded = bech32.encode(fmt.hrp, 0, script[2:])
            if encoded:
                return encoded
        raise ValueError(f"Unrecognised output script: 0x{script.hex()}")

    return encode


def _checksum_encoder(data: bytes) -> str:
    if len(data) != 20:
        raise ValueError(f"Expected a 20 byte address, got {len(data)} bytes")
    return to_checksum_address("0x" + data.hex())


ENCODERS: Dict[int, Callable[[bytes], str]] = {
    0: _bitcoin_encoder(BitcoinFormat(b"\x00", b"\x05", "bc")),
    2: _bitcoin_encoder(BitcoinFormat(b"\x30", b"\x32", "ltc")),
    3: _bitcoin_encoder(BitcoinFormat(b"\x1e", b"\x16")),
    5: _bitcoin_encoder(BitcoinFormat(b"\x4c", b"\x10")),
    60: _checksum_encoder,
    61: _checksum_encoder,
    700: _checksum_encoder,
}


def coin_type_for(currency_ticker: str) -> int:
    """
    Look up the coin type of a ticker that has an address encoder.

    Raises:
        ResolutionError: UnsupportedCurrency if the ticker is unknown or its
            addresses cannot be encoded
    """
    coin_type = BIP44_COIN_TYPES.get(currency_ticker.upper())
    if coin_type is None or coin_type not in ENCODERS:
        raise ResolutionError(
            ResolutionErrorCode.UnsupportedCurrency, currency_ticker=currency_ticker
        )
    return coin_type


def encode_address(coin_type: int, data: bytes) -> str:
    return ENCODERS[coin_type](data)


def to_bech32_address(address: str, hrp: str = "zil") -> str:
    """Convert a 0x hex address into its bech32 form (zil1...)"""
    data = bytes.fromhex(address[2:] if address.startswith("0x") else address)
    return bech32.bech32_encode(hrp, bech32.convertbits(data, 8, 5))


def from_bech32_address(address: str) -> str:
    """Convert a bech32 address (zil1...) into lower-case 0x hex"""
    hrp, data = bech32.bech32_decode(address)
    if hrp is None:
        raise ValueError(f"Invalid bech32 address: {address}")
    return "0x" + bytes(bech32.convertbits(data, 5, 8, False)).hex()
