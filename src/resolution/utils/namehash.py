"""Namehash algorithms used by the naming services.

ENS and CNS hash labels with keccak-256, ZNS with sha-256. Both walk the
labels from the root down, starting from 32 zero bytes.
"""

import hashlib
from typing import Callable

from eth_utils import keccak

ROOT_NODE = b"\x00" * 32

Digest = Callable[[bytes], bytes]


def _sha256(data: bytes) -> bytes:
    return hashlib.sha256(data).digest()


def _keccak(data: bytes) -> bytes:
    return keccak(primitive=data)


def node_bytes(node: str) -> bytes:
    value = node[2:] if node.startswith("0x") else node
    return bytes.fromhex(value.rjust(64, "0"))


def _childhash(parent: bytes, label: str, digest: Digest) -> bytes:
    return digest(parent + digest(label.encode("utf-8")))


def _namehash(domain: str, digest: Digest) -> str:
    node = ROOT_NODE
    if domain:
        for label in reversed(domain.split(".")):
            node = _childhash(node, label, digest)
    return "0x" + node.hex()


def keccak_namehash(domain: str) -> str:
    return _namehash(domain, _keccak)


def sha256_namehash(domain: str) -> str:
    return _namehash(domain, _sha256)


def keccak_childhash(parent: str, label: str) -> str:
    """Hash of ``label`` under the node ``parent`` (hex, 0x optional)"""
    return "0x" + _childhash(node_bytes(parent), label, _keccak).hex()


def sha256_childhash(parent: str, label: str) -> str:
    return "0x" + _childhash(node_bytes(parent), label, _sha256).hex()
