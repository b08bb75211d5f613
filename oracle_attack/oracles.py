"""
Encryption oracles.

An oracle takes attacker plaintext, wraps it between text the attacker never
sees (prefix || plaintext || suffix) and returns the ciphertext. The attacks
only ever call encrypt(); key, prefix, suffix and mode stay inside.
"""

import random
from typing import Callable, Optional, Protocol

from Crypto.Cipher import AES
from Crypto.Random import get_random_bytes

from .config import RANDOM_AFFIX_RANGE
from .modes import block_cipher, default_key_size, encrypt_cbc, encrypt_ecb


class Oracle(Protocol):
    def encrypt(self, plaintext: bytes) -> bytes:
        ...


def _new_key(key: Optional[bytes], cipher) -> bytes:
    if key is None:
        key = get_random_bytes(default_key_size(cipher))
    # raises CipherConstructionError now rather than on the first query
    block_cipher(key, cipher)
    return key


class ECBOracle:
    """encrypt(x) = ECB_k(prefix || x || suffix)"""

    def __init__(self, key: Optional[bytes] = None, prefix: bytes = b"", suffix: bytes = b"", cipher=AES):
        self._cipher = cipher
        self._key = _new_key(key, cipher)
        self._prefix = bytes(prefix)
        self._suffix = bytes(suffix)

    def encrypt(self, plaintext: bytes) -> bytes:
        return encrypt_ecb(self._prefix + plaintext + self._suffix, self._key, self._cipher)

    def __repr__(self):
        return f"ECBOracle(block_size={self._cipher.block_size})"


class CBCOracle:
    """
    encrypt(x) = CBC_k,iv(prefix || x || suffix)

    Without a fixed IV every call draws a fresh random one. Only the
    ciphertext is returned, the IV is not prepended.
    """

    def __init__(self, key: Optional[bytes] = None, prefix: bytes = b"", suffix: bytes = b"",
                 iv: Optional[bytes] = None, cipher=AES):
        self._cipher = cipher
        self._key = _new_key(key, cipher)
        self._prefix = bytes(prefix)
        self._suffix = bytes(suffix)
        self._iv = iv

    def encrypt(self, plaintext: bytes) -> bytes:
        iv = self._iv if self._iv is not None else get_random_bytes(self._cipher.block_size)
        return encrypt_cbc(self._prefix + plaintext + self._suffix, self._key, iv, self._cipher)

    def __repr__(self):
        return f"CBCOracle(block_size={self._cipher.block_size})"


class RandomModeOracle:
    """
    ECB/CBC detection target.

    At construction the oracle flips a coin for ECB or CBC and draws 5-10
    random bytes to put before and 5-10 random bytes to put after the
    attacker's plaintext. The choices hold for the oracle's lifetime, so two
    instances may behave differently but one instance is consistent.
    The caller's suffix (if any) follows the random tail.
    """

    def __init__(self, key: Optional[bytes] = None, suffix: bytes = b"",
                 rng: Optional[random.Random] = None, cipher=AES):
        rng = rng or random.Random()
        low, high = RANDOM_AFFIX_RANGE

        self._cipher = cipher
        self._key = _new_key(key, cipher)
        self._ecb = rng.random() < 0.5
        self._prefix = get_random_bytes(rng.randint(low, high))
        self._suffix = get_random_bytes(rng.randint(low, high)) + bytes(suffix)
        self._iv = get_random_bytes(cipher.block_size)

    def encrypt(self, plaintext: bytes) -> bytes:
        data = self._prefix + plaintext + self._suffix
        if self._ecb:
            return encrypt_ecb(data, self._key, self._cipher)
        return encrypt_cbc(data, self._key, self._iv, self._cipher)

    def __repr__(self):
        return f"RandomModeOracle(block_size={self._cipher.block_size})"


class CallableOracle:
    """Adapts a plain bytes -> bytes function (remote service client, lambda...)."""

    def __init__(self, func: Callable[[bytes], bytes]):
        self._func = func

    def encrypt(self, plaintext: bytes) -> bytes:
        return self._func(plaintext)

    def __repr__(self):
        return f"CallableOracle({getattr(self._func, '__name__', self._func)!r})"
