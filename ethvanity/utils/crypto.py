# -*- coding: utf-8 -*-
import secrets
from concurrent.futures import Executor
from dataclasses import dataclass
from typing import List, Optional

from eth_keys import keys
from eth_keys.exceptions import ValidationError

from ethvanity.config import ADDRESS_LENGTH, SEED_BYTES
from ethvanity.errors import DerivationFailure, EntropyFailure

# secp256k1 group order
SECP256K1_N = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141


@dataclass(frozen=True)
class Candidate:
    seed_hex: str
    address: str


def next_seed() -> bytes:
    """Return a fresh 32-byte seed from the OS entropy source.

    Raises EntropyFailure instead of retrying: a search must never continue
    on a degraded random source.
    """
    try:
        seed = secrets.token_bytes(SEED_BYTES)
    except (OSError, NotImplementedError) as e:
        raise EntropyFailure("Entropy source failed: {}".format(e)) from e
    if len(seed) != SEED_BYTES:
        raise EntropyFailure("Entropy source returned {} bytes, expected {}".format(len(seed), SEED_BYTES))
    return seed


def derive_address(seed: bytes) -> str:
    """Derive the EIP-55 checksummed address for a 32-byte private key."""
    if not isinstance(seed, (bytes, bytearray)) or len(seed) != SEED_BYTES:
        raise DerivationFailure("Private key must be {} bytes".format(SEED_BYTES))
    scalar = int.from_bytes(seed, "big")
    if not 0 < scalar < SECP256K1_N:
        raise DerivationFailure("Private key out of secp256k1 range: {}".format(bytes(seed).hex()))
    try:
        address = keys.PrivateKey(bytes(seed)).public_key.to_checksum_address()
    except ValidationError as e:
        raise DerivationFailure("Invalid private key {}: {}".format(bytes(seed).hex(), e)) from e
    if len(address) != ADDRESS_LENGTH:
        raise DerivationFailure("Unexpected address length {} for {}".format(len(address), address))
    return address


def derive_hex(seed_hex: str) -> Candidate:
    try:
        seed = bytes.fromhex(seed_hex)
    except ValueError as e:
        raise DerivationFailure("Private key is not hex: {}".format(seed_hex)) from e
    return Candidate(seed_hex, derive_address(seed))


def derive_candidates(spec, seed: bytes, pool: Optional[Executor] = None) -> List[Candidate]:
    """Derive every candidate one generation round produces from ``seed``.

    Specs with sibling keys (``spec.siblings``) fan the derivations out on
    ``pool`` and wait for all of them before returning.
    """
    seed_hex = seed.hex()
    siblings = getattr(spec, "siblings", None)
    if siblings is None:
        return [Candidate(seed_hex, derive_address(seed))]
    keys_hex = siblings(seed_hex)
    if pool is None:
        return [derive_hex(k) for k in keys_hex]
    return list(pool.map(derive_hex, keys_hex))
