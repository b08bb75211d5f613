"""
ECB and CBC chaining modes on top of a single-block cipher primitive.

Principle:
  - The primitive is the cipher in raw ECB mode fed one block at a time.
  - ECB: C_i = E(P_i), every block on its own.
  - CBC: C_i = E(P_i ⊕ C_{i-1}) with C_{-1} = IV,
         P_i = D(C_i) ⊕ C_{i-1}.
  - Plaintext is PKCS#7 padded before encryption, so ciphertext is never empty
    and always a multiple of the block size.

Any pycryptodome block cipher module works (AES by default, DES for 8-byte
blocks).
"""

from typing import List, Optional

from Crypto.Cipher import AES
from Crypto.Util.Padding import pad as _pkcs7_pad, unpad as _pkcs7_unpad

from .config import DEFAULT_KEY_SIZE
from .errors import CipherConstructionError, PaddingError, PreconditionError


def pad(data: bytes, block_size: int) -> bytes:
    """Append n bytes of value n, n in [1, block_size]."""
    return _pkcs7_pad(data, block_size, style="pkcs7")


def unpad(data: bytes, block_size: int) -> bytes:
    """
    Strip PKCS#7 padding.
    The input must be a non-empty multiple of block_size, its last byte n must
    be in [1, block_size] and the last n bytes must all equal n.
    """
    try:
        return _pkcs7_unpad(data, block_size, style="pkcs7")
    except ValueError as e:
        raise PaddingError(f"Invalid PKCS#7 padding: {e}") from e


def split_blocks(data: bytes, block_size: int) -> List[bytes]:
    if block_size <= 0:
        raise PreconditionError("block_size must be > 0")
    if len(data) % block_size != 0:
        raise PreconditionError(f"{len(data)} bytes is not a multiple of the block size {block_size}")
    return [data[i:i + block_size] for i in range(0, len(data), block_size)]


def xor_blocks(a: bytes, b: bytes) -> bytes:
    if len(a) != len(b):
        raise PreconditionError(f"Cannot xor buffers of differing lengths ({len(a)} and {len(b)})")
    return bytes(x ^ y for x, y in zip(a, b))


def default_key_size(cipher=AES) -> int:
    """Smallest valid key size of the cipher module (16 for AES)."""
    sizes = cipher.key_size
    if isinstance(sizes, int):
        return sizes
    return DEFAULT_KEY_SIZE if DEFAULT_KEY_SIZE in sizes else sizes[0]


def block_cipher(key: bytes, cipher=AES):
    """Build the single-block primitive, failing loudly on a bad key."""
    try:
        return cipher.new(key, cipher.MODE_ECB)
    except (ValueError, TypeError) as e:
        raise CipherConstructionError(f"Cannot build {cipher.__name__.split('.')[-1]} primitive: {e}") from e


def encrypt_ecb(plaintext: bytes, key: bytes, cipher=AES) -> bytes:
    primitive = block_cipher(key, cipher)
    bs = cipher.block_size
    return b"".join(primitive.encrypt(block) for block in split_blocks(pad(plaintext, bs), bs))


def decrypt_ecb(ciphertext: bytes, key: bytes, cipher=AES, strip: bool = True) -> bytes:
    primitive = block_cipher(key, cipher)
    bs = cipher.block_size
    plaintext = b"".join(primitive.decrypt(block) for block in split_blocks(ciphertext, bs))
    return unpad(plaintext, bs) if strip else plaintext


def _check_iv(iv: Optional[bytes], bs: int) -> bytes:
    if iv is None:
        return bytes(bs)
    if len(iv) != bs:
        raise PreconditionError(f"IV must be {bs} bytes, got {len(iv)}")
    return iv


def encrypt_cbc(plaintext: bytes, key: bytes, iv: Optional[bytes] = None, cipher=AES) -> bytes:
    """CBC encryption; a missing IV means an all-zero one."""
    primitive = block_cipher(key, cipher)
    bs = cipher.block_size
    chain = _check_iv(iv, bs)

    out = []
    for block in split_blocks(pad(plaintext, bs), bs):
        chain = primitive.encrypt(xor_blocks(block, chain))
        out.append(chain)
    return b"".join(out)


def decrypt_cbc(ciphertext: bytes, key: bytes, iv: Optional[bytes] = None, cipher=AES,
                strip: bool = True) -> bytes:
    primitive = block_cipher(key, cipher)
    bs = cipher.block_size
    chain = _check_iv(iv, bs)

    out = []
    for block in split_blocks(ciphertext, bs):
        # xor with the previous ciphertext block, not the previous plaintext
        out.append(xor_blocks(primitive.decrypt(block), chain))
        chain = block
    plaintext = b"".join(out)
    return unpad(plaintext, bs) if strip else plaintext
