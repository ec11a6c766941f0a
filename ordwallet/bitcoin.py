"""Bitcoin primitives: outpoints, addresses, scripts, transactions and blocks."""

from __future__ import annotations

import hashlib
import math
import struct
from dataclasses import dataclass, field
from enum import Enum
from functools import total_ordering

COIN_VALUE = 100_000_000
SEQUENCE_MAX = 0xFFFFFFFF
SEQUENCE_ENABLE_RBF_NO_LOCKTIME = 0xFFFFFFFD
DUST_RELAY_TX_FEE = 3000

_U32_MAX = 0xFFFFFFFF
_U64_MAX = 0xFFFFFFFFFFFFFFFF


def sha256d(data: bytes) -> bytes:
    """Double SHA-256 of ``data``."""
    return hashlib.sha256(hashlib.sha256(data).digest()).digest()


def _display(digest: bytes) -> str:
    return digest[::-1].hex()


def _internal(text: str) -> bytes:
    return bytes.fromhex(text)[::-1]


def _parse_hash(text: str) -> str:
    if not isinstance(text, str) or len(text) != 64:
        raise ValueError(f"invalid hash: {text!r}")
    try:
        bytes.fromhex(text)
    except ValueError:
        raise ValueError(f"invalid hash: {text!r}") from None
    return text.lower()


def _parse_uint(text: str, maximum: int, what: str) -> int:
    if not text or not text.isascii() or not text.isdigit():
        raise ValueError(f"invalid {what}: {text!r}")
    value = int(text)
    if value > maximum:
        raise ValueError(f"{what} out of range: {text}")
    return value


class Network(Enum):
    """A Bitcoin network."""

    BITCOIN = "bitcoin"
    TESTNET = "testnet"
    SIGNET = "signet"
    REGTEST = "regtest"

    def __str__(self) -> str:
        return self.value

    @property
    def bech32_hrp(self) -> str:
        return {
            Network.BITCOIN: "bc",
            Network.TESTNET: "tb",
            Network.SIGNET: "tb",
            Network.REGTEST: "bcrt",
        }[self]

    @property
    def p2pkh_version(self) -> int:
        return 0x00 if self is Network.BITCOIN else 0x6F

    @property
    def p2sh_version(self) -> int:
        return 0x05 if self is Network.BITCOIN else 0xC4


@total_ordering
@dataclass(frozen=True)
class OutPoint:
    """A reference to a transaction output."""

    txid: str
    vout: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "txid", _parse_hash(self.txid))
        if not 0 <= self.vout <= _U32_MAX:
            raise ValueError(f"vout out of range: {self.vout}")

    @classmethod
    def null(cls) -> OutPoint:
        return cls("0" * 64, _U32_MAX)

    @classmethod
    def parse(cls, text: str) -> OutPoint:
        if text.count(":") != 1:
            raise ValueError(f"invalid outpoint: {text!r}")
        txid, _, vout = text.partition(":")
        if len(vout) > 1 and vout.startswith("0"):
            raise ValueError(f"invalid vout: {vout!r}")
        return cls(_parse_hash(txid), _parse_uint(vout, _U32_MAX, "vout"))

    def is_null(self) -> bool:
        return self == OutPoint.null()

    def _key(self) -> tuple[bytes, int]:
        return _internal(self.txid), self.vout

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, OutPoint):
            return NotImplemented
        return self._key() < other._key()

    def __str__(self) -> str:
        return f"{self.txid}:{self.vout}"


@dataclass(frozen=True, order=True)
class SatPoint:
    """A sat's location: an outpoint and an offset into it."""

    outpoint: OutPoint
    offset: int

    def __post_init__(self) -> None:
        if not 0 <= self.offset <= _U64_MAX:
            raise ValueError(f"offset out of range: {self.offset}")

    @classmethod
    def parse(cls, text: str) -> SatPoint:
        outpoint, sep, offset = text.rpartition(":")
        if not sep:
            raise ValueError(f"invalid satpoint: {text!r}")
        return cls(OutPoint.parse(outpoint), _parse_uint(offset, _U64_MAX, "offset"))

    def __str__(self) -> str:
        return f"{self.outpoint}:{self.offset}"


@total_ordering
@dataclass(frozen=True)
class InscriptionId:
    """The id of an inscription: the reveal txid and an index."""

    txid: str
    index: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "txid", _parse_hash(self.txid))
        if not 0 <= self.index <= _U32_MAX:
            raise ValueError(f"index out of range: {self.index}")

    @classmethod
    def parse(cls, text: str) -> InscriptionId:
        if not text.isascii():
            raise ValueError(f"invalid character in inscription id: {text!r}")
        if len(text) < 66:
            raise ValueError(f"invalid inscription id length: {len(text)}")
        if text[64] != "i":
            raise ValueError(f"invalid inscription id separator: {text[64]!r}")
        return cls(_parse_hash(text[:64]), _parse_uint(text[65:], _U32_MAX, "index"))

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, InscriptionId):
            return NotImplemented
        return (_internal(self.txid), self.index) < (_internal(other.txid), other.index)

    def __str__(self) -> str:
        return f"{self.txid}i{self.index}"


# --- bech32 / bech32m ---------------------------------------------------------

_BECH32_CHARSET = "qpzry9x8gf2tvdw0s3jn54khce6mua7l"
_BECH32_GEN = (0x3B6A57B2, 0x26508E6D, 0x1EA119FA, 0x3D4233DD, 0x2A1462B3)
_BECH32_CONST = 1
_BECH32M_CONST = 0x2BC830A3


def _polymod(values: list[int]) -> int:
    chk = 1
    for value in values:
        top = chk >> 25
        chk = ((chk & 0x1FFFFFF) << 5) ^ value
        for i, gen in enumerate(_BECH32_GEN):
            if (top >> i) & 1:
                chk ^= gen
    return chk


def _hrp_expand(hrp: str) -> list[int]:
    return [ord(c) >> 5 for c in hrp] + [0] + [ord(c) & 31 for c in hrp]


def _convert_bits(data, from_bits: int, to_bits: int, pad: bool) -> list[int]:
    acc = 0
    bits = 0
    out = []
    maxv = (1 << to_bits) - 1
    max_acc = (1 << (from_bits + to_bits - 1)) - 1
    for value in data:
        if value < 0 or value >> from_bits:
            raise ValueError("invalid data for bit conversion")
        acc = ((acc << from_bits) | value) & max_acc
        bits += from_bits
        while bits >= to_bits:
            bits -= to_bits
            out.append((acc >> bits) & maxv)
    if pad:
        if bits:
            out.append((acc << (to_bits - bits)) & maxv)
    elif bits >= from_bits or ((acc << (to_bits - bits)) & maxv):
        raise ValueError("invalid padding")
    return out


def _bech32_decode(text: str) -> tuple[str, list[int], int]:
    if any(ord(c) < 33 or ord(c) > 126 for c in text):
        raise ValueError("invalid character in address")
    if text.lower() != text and text.upper() != text:
        raise ValueError("mixed case address")
    text = text.lower()
    pos = text.rfind("1")
    if pos < 1 or pos + 7 > len(text) or len(text) > 90:
        raise ValueError("invalid bech32 length")
    if any(c not in _BECH32_CHARSET for c in text[pos + 1:]):
        raise ValueError("invalid bech32 character")
    hrp = text[:pos]
    data = [_BECH32_CHARSET.find(c) for c in text[pos + 1:]]
    const = _polymod(_hrp_expand(hrp) + data)
    if const not in (_BECH32_CONST, _BECH32M_CONST):
        raise ValueError("invalid bech32 checksum")
    return hrp, data[:-6], const


def _bech32_encode(hrp: str, data: list[int], const: int) -> str:
    values = _hrp_expand(hrp) + data
    polymod = _polymod(values + [0] * 6) ^ const
    checksum = [(polymod >> 5 * (5 - i)) & 31 for i in range(6)]
    return hrp + "1" + "".join(_BECH32_CHARSET[d] for d in data + checksum)


def _segwit_script(version: int, program: bytes) -> bytes:
    opcode = 0 if version == 0 else 0x50 + version
    return bytes([opcode, len(program)]) + program


def _decode_segwit(hrp: str, text: str) -> bytes:
    decoded_hrp, data, const = _bech32_decode(text)
    if decoded_hrp != hrp or not data:
        raise ValueError(f"invalid segwit address: {text!r}")
    version = data[0]
    program = bytes(_convert_bits(data[1:], 5, 8, False))
    if version > 16 or not 2 <= len(program) <= 40:
        raise ValueError(f"invalid witness program: {text!r}")
    if version == 0 and len(program) not in (20, 32):
        raise ValueError(f"invalid v0 witness program length: {len(program)}")
    expected = _BECH32_CONST if version == 0 else _BECH32M_CONST
    if const != expected:
        raise ValueError(f"invalid checksum variant for witness version {version}")
    return _segwit_script(version, program)


def _encode_segwit(hrp: str, script: bytes) -> str:
    version = 0 if script[0] == 0 else script[0] - 0x50
    const = _BECH32_CONST if version == 0 else _BECH32M_CONST
    return _bech32_encode(hrp, [version] + _convert_bits(script[2:], 8, 5, True), const)


# --- base58check --------------------------------------------------------------

_B58_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"


def _b58check_encode(payload: bytes) -> str:
    data = payload + sha256d(payload)[:4]
    number = int.from_bytes(data, "big")
    digits = []
    while number:
        number, rem = divmod(number, 58)
        digits.append(_B58_ALPHABET[rem])
    zeros = len(data) - len(data.lstrip(b"\x00"))
    return "1" * zeros + "".join(reversed(digits))


def _b58check_decode(text: str) -> bytes:
    number = 0
    for char in text:
        digit = _B58_ALPHABET.find(char)
        if digit < 0:
            raise ValueError(f"invalid base58 character: {char!r}")
        number = number * 58 + digit
    zeros = len(text) - len(text.lstrip("1"))
    body = number.to_bytes((number.bit_length() + 7) // 8, "big")
    data = b"\x00" * zeros + body
    if len(data) < 4 or sha256d(data[:-4])[:4] != data[-4:]:
        raise ValueError("invalid base58 checksum")
    return data[:-4]


# --- scripts ------------------------------------------------------------------


def _is_witness_program(script: bytes) -> bool:
    return (
        4 <= len(script) <= 42
        and (script[0] == 0 or 0x51 <= script[0] <= 0x60)
        and 0x02 <= script[1] <= 0x28
        and len(script) - 2 == script[1]
    )


def _is_p2pkh(script: bytes) -> bool:
    return len(script) == 25 and script[:3] == b"\x76\xa9\x14" and script[23:] == b"\x88\xac"


def _is_p2sh(script: bytes) -> bool:
    return len(script) == 23 and script[:2] == b"\xa9\x14" and script[22] == 0x87


def _varint(n: int) -> bytes:
    if n < 0xFD:
        return bytes([n])
    if n <= 0xFFFF:
        return b"\xfd" + struct.pack("<H", n)
    if n <= _U32_MAX:
        return b"\xfe" + struct.pack("<I", n)
    return b"\xff" + struct.pack("<Q", n)


def _var_bytes(data: bytes) -> bytes:
    return _varint(len(data)) + data


def dust_value(script_pubkey: bytes) -> int:
    """Minimum value in sats an output with ``script_pubkey`` must hold."""
    if script_pubkey[:1] == b"\x6a":
        size = 0
    elif _is_witness_program(script_pubkey):
        size = 32 + 4 + 1 + 107 // 4 + 4 + 8 + len(_var_bytes(script_pubkey))
    else:
        size = 32 + 4 + 1 + 107 + 4 + 8 + len(_var_bytes(script_pubkey))
    return DUST_RELAY_TX_FEE // 1000 * size


def _push_slice(data: bytes) -> bytes:
    n = len(data)
    if n < 0x4C:
        prefix = bytes([n])
    elif n <= 0xFF:
        prefix = b"\x4c" + bytes([n])
    elif n <= 0xFFFF:
        prefix = b"\x4d" + struct.pack("<H", n)
    else:
        prefix = b"\x4e" + struct.pack("<I", n)
    return prefix + data


def _script_num(n: int) -> bytes:
    if n == 0:
        return b""
    negative = n < 0
    magnitude = -n if negative else n
    out = bytearray()
    while magnitude > 0xFF:
        out.append(magnitude & 0xFF)
        magnitude >>= 8
    if magnitude & 0x80:
        out.append(magnitude)
        out.append(0x80 if negative else 0)
    else:
        out.append(magnitude | (0x80 if negative else 0))
    return bytes(out)


def script_push_int(n: int) -> bytes:
    """A script that pushes the integer ``n`` using the shortest encoding."""
    if n == -1 or 1 <= n <= 16:
        return bytes([0x50 + n])
    if n == 0:
        return b"\x00"
    return _push_slice(_script_num(n))


@dataclass(frozen=True)
class Address:
    """A standard address: a script pubkey on a network."""

    network: Network
    script: bytes

    def __post_init__(self) -> None:
        if not (_is_witness_program(self.script) or _is_p2pkh(self.script) or _is_p2sh(self.script)):
            raise ValueError("script has no address form")

    @classmethod
    def parse(cls, text: str) -> Address:
        lower = text.lower()
        for hrp, network in (("bcrt", Network.REGTEST), ("bc", Network.BITCOIN), ("tb", Network.TESTNET)):
            if lower.startswith(hrp + "1"):
                return cls(network, _decode_segwit(hrp, text))
        payload = _b58check_decode(text)
        if len(payload) != 21:
            raise ValueError(f"invalid base58 address length: {text!r}")
        version, body = payload[0], payload[1:]
        if version in (0x00, 0x6F):
            network = Network.BITCOIN if version == 0x00 else Network.TESTNET
            return cls(network, b"\x76\xa9\x14" + body + b"\x88\xac")
        if version in (0x05, 0xC4):
            network = Network.BITCOIN if version == 0x05 else Network.TESTNET
            return cls(network, b"\xa9\x14" + body + b"\x87")
        raise ValueError(f"unknown address version: {version}")

    @classmethod
    def p2tr(cls, output_key: bytes, network: Network) -> Address:
        if len(output_key) != 32:
            raise ValueError("taproot output key must be 32 bytes")
        return cls(network, _segwit_script(1, bytes(output_key)))

    def script_pubkey(self) -> bytes:
        return self.script

    def __str__(self) -> str:
        if _is_witness_program(self.script):
            return _encode_segwit(self.network.bech32_hrp, self.script)
        if _is_p2pkh(self.script):
            return _b58check_encode(bytes([self.network.p2pkh_version]) + self.script[3:23])
        return _b58check_encode(bytes([self.network.p2sh_version]) + self.script[2:22])


# --- transactions -------------------------------------------------------------


class _Reader:
    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)
        self._pos = 0

    def take(self, n: int) -> bytes:
        if self._pos + n > len(self._data):
            raise ValueError("unexpected end of data")
        chunk = self._data[self._pos:self._pos + n]
        self._pos += n
        return chunk

    def unpack(self, fmt: str) -> int:
        return struct.unpack(fmt, self.take(struct.calcsize(fmt)))[0]

    def varint(self) -> int:
        first = self.take(1)[0]
        if first < 0xFD:
            return first
        fmt, minimum = {0xFD: ("<H", 0xFD), 0xFE: ("<I", 0x10000), 0xFF: ("<Q", 0x100000000)}[first]
        value = self.unpack(fmt)
        if value < minimum:
            raise ValueError("non-minimal varint")
        return value

    def var_bytes(self) -> bytes:
        return self.take(self.varint())

    def finish(self) -> None:
        if self._pos != len(self._data):
            raise ValueError("data not consumed entirely")


@dataclass
class TxIn:
    """A transaction input."""

    previous_output: OutPoint = field(default_factory=OutPoint.null)
    script_sig: bytes = b""
    sequence: int = SEQUENCE_MAX
    witness: list[bytes] = field(default_factory=list)

    def _encode(self) -> bytes:
        return (
            _internal(self.previous_output.txid)
            + struct.pack("<I", self.previous_output.vout)
            + _var_bytes(self.script_sig)
            + struct.pack("<I", self.sequence)
        )

    def _encode_witness(self) -> bytes:
        return _varint(len(self.witness)) + b"".join(_var_bytes(item) for item in self.witness)

    @classmethod
    def _read(cls, reader: _Reader) -> TxIn:
        txid = _display(reader.take(32))
        vout = reader.unpack("<I")
        script_sig = reader.var_bytes()
        sequence = reader.unpack("<I")
        return cls(OutPoint(txid, vout), script_sig, sequence)


@dataclass
class TxOut:
    """A transaction output."""

    value: int
    script_pubkey: bytes = b""

    def _encode(self) -> bytes:
        return struct.pack("<Q", self.value) + _var_bytes(self.script_pubkey)

    @classmethod
    def _read(cls, reader: _Reader) -> TxOut:
        value = reader.unpack("<Q")
        return cls(value, reader.var_bytes())


@dataclass
class Transaction:
    """A Bitcoin transaction."""

    version: int = 1
    lock_time: int = 0
    inputs: list[TxIn] = field(default_factory=list)
    outputs: list[TxOut] = field(default_factory=list)

    def _has_witness(self) -> bool:
        return not self.inputs or any(txin.witness for txin in self.inputs)

    def _encode(self, include_witness: bool) -> bytes:
        segwit = include_witness and self._has_witness()
        parts = [struct.pack("<i", self.version)]
        if segwit:
            parts.append(b"\x00\x01")
        parts.append(_varint(len(self.inputs)))
        parts.extend(txin._encode() for txin in self.inputs)
        parts.append(_varint(len(self.outputs)))
        parts.extend(txout._encode() for txout in self.outputs)
        if segwit:
            parts.extend(txin._encode_witness() for txin in self.inputs)
        parts.append(struct.pack("<I", self.lock_time))
        return b"".join(parts)

    def serialize(self) -> bytes:
        return self._encode(include_witness=True)

    @classmethod
    def _read(cls, reader: _Reader) -> Transaction:
        version = reader.unpack("<i")
        inputs = [TxIn._read(reader) for _ in range(reader.varint())]
        if inputs:
            outputs = [TxOut._read(reader) for _ in range(reader.varint())]
        else:
            flag = reader.take(1)[0]
            if flag != 1:
                raise ValueError(f"unsupported segwit flag: {flag}")
            inputs = [TxIn._read(reader) for _ in range(reader.varint())]
            outputs = [TxOut._read(reader) for _ in range(reader.varint())]
            for txin in inputs:
                txin.witness = [reader.var_bytes() for _ in range(reader.varint())]
            if all(not txin.witness for txin in inputs):
                raise ValueError("witness flag set but no witnesses present")
        lock_time = reader.unpack("<I")
        return cls(version, lock_time, inputs, outputs)

    @classmethod
    def deserialize(cls, data: bytes) -> Transaction:
        reader = _Reader(data)
        tx = cls._read(reader)
        reader.finish()
        return tx

    def txid(self) -> str:
        return _display(sha256d(self._encode(include_witness=False)))

    def size(self) -> int:
        return len(self.serialize())

    def weight(self) -> int:
        input_weight = 0
        with_witness = 0
        for txin in self.inputs:
            input_weight += 4 * (32 + 4 + 4 + len(_var_bytes(txin.script_sig)))
            if txin.witness:
                with_witness += 1
                input_weight += len(txin._encode_witness())
        output_size = sum(len(txout._encode()) for txout in self.outputs)
        non_input = 4 + len(_varint(len(self.inputs))) + len(_varint(len(self.outputs))) + output_size + 4
        weight = non_input * 4 + input_weight
        if with_witness:
            weight += len(self.inputs) - with_witness + 2
        return weight

    def vsize(self) -> int:
        return (self.weight() + 3) // 4

    def is_explicitly_rbf(self) -> bool:
        return any(txin.sequence < 0xFFFFFFFE for txin in self.inputs)


@dataclass
class BlockHeader:
    """An 80-byte block header."""

    version: int
    prev_blockhash: str
    merkle_root: str
    time: int
    bits: int
    nonce: int

    def serialize(self) -> bytes:
        return (
            struct.pack("<i", self.version)
            + _internal(self.prev_blockhash)
            + _internal(self.merkle_root)
            + struct.pack("<III", self.time, self.bits, self.nonce)
        )

    def block_hash(self) -> str:
        return _display(sha256d(self.serialize()))


@dataclass
class Block:
    """A block: a header and its transactions."""

    header: BlockHeader
    txdata: list[Transaction] = field(default_factory=list)

    def serialize(self) -> bytes:
        return (
            self.header.serialize()
            + _varint(len(self.txdata))
            + b"".join(tx.serialize() for tx in self.txdata)
        )

    def block_hash(self) -> str:
        return self.header.block_hash()


@dataclass(frozen=True)
class FeeRate:
    """A fee rate in sats per virtual byte."""

    sat_per_vbyte: float

    def __post_init__(self) -> None:
        rate = float(self.sat_per_vbyte)
        if math.isnan(rate) or math.isinf(rate) or math.copysign(1.0, rate) < 0:
            raise ValueError(f"invalid fee rate: {self.sat_per_vbyte}")
        object.__setattr__(self, "sat_per_vbyte", rate)

    def fee(self, vbytes: int) -> int:
        """Fee in sats for ``vbytes`` virtual bytes, rounded up."""
        return math.ceil(self.sat_per_vbyte * vbytes)