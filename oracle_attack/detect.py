"""
Oracle fingerprinting: block size, chaining mode, hidden text lengths.

Principle:
  - PKCS#7 always adds 1..bs bytes, so growing the plaintext one byte at a
    time makes the ciphertext grow by exactly one block once the padding
    wraps around. The jump is the block size, the growth point tells how many
    hidden bytes the oracle adds.
  - ECB maps equal plaintext blocks to equal ciphertext blocks. Three blocks
    of filler always contain two aligned equal blocks whatever the prefix
    length, CBC chaining makes them differ.
  - Under ECB, changing one attacker byte only changes the block holding it.
    That locates the end of the hidden prefix.
"""

import enum
import logging
from typing import Optional

from .config import FILLER_BYTE, MAX_BLOCK_SIZE_PROBE, MODE_PROBE_BLOCKS
from .errors import DetectionBoundExceeded, NonConformantOracleError, PreconditionError
from .modes import split_blocks
from .oracles import Oracle

log = logging.getLogger(__name__)


class Mode(enum.Enum):
    ECB = "ECB-like"
    CBC = "CBC-like"


def detect_block_size(oracle: Oracle, max_probe: int = MAX_BLOCK_SIZE_PROBE) -> int:
    """Smallest ciphertext length jump while feeding 1..max_probe filler bytes."""
    baseline = None
    for i in range(1, max_probe + 1):
        length = len(oracle.encrypt(FILLER_BYTE * i))
        if baseline is None:
            baseline = length
            continue
        if length > baseline:
            block_size = length - baseline
            if baseline % block_size != 0:
                raise NonConformantOracleError(
                    f"Ciphertext length {baseline} is not a multiple of block size {block_size}")
            log.info("[+] Block size: %d bytes", block_size)
            return block_size
    raise DetectionBoundExceeded("Unable to detect block size used by oracle", max_probe)


def detect_mode(oracle: Oracle, block_size: Optional[int] = None,
                filler_length: Optional[int] = None) -> Mode:
    """
    ECB-like if two adjacent ciphertext blocks are equal, CBC-like otherwise.

    Known limitation: the default probe is the minimum that guarantees two
    aligned filler blocks. Pass a larger filler_length for oracles with long
    unknown prefixes that may themselves contain filler bytes.
    """
    bs = block_size or detect_block_size(oracle)
    minimum = MODE_PROBE_BLOCKS * bs
    if filler_length is None:
        filler_length = minimum
    if filler_length < minimum:
        raise PreconditionError(f"Mode probe needs at least {minimum} filler bytes, got {filler_length}")

    blocks = split_blocks(oracle.encrypt(FILLER_BYTE * filler_length), bs)
    for previous, current in zip(blocks, blocks[1:]):
        if previous == current:
            log.info("[+] Repeated ciphertext block found: %s", Mode.ECB.value)
            return Mode.ECB
    log.info("[-] No repeated ciphertext block: %s", Mode.CBC.value)
    return Mode.CBC


def detect_prefix_length(oracle: Oracle, block_size: int) -> int:
    """
    Length of the text an ECB oracle puts before the attacker's bytes.

    Block j is the first block that changes when the first attacker byte
    changes. Pushing that byte forward with k filler bytes, block j stops
    changing once k fills what is left of it, i.e. prefix = (j + 1) * bs - k.
    """
    bs = block_size
    a = split_blocks(oracle.encrypt(b"\x00"), bs)
    b = split_blocks(oracle.encrypt(b"\x01"), bs)
    first = next((j for j, (x, y) in enumerate(zip(a, b)) if x != y), None)
    if first is None:
        raise NonConformantOracleError("Oracle output does not depend on the plaintext")

    window = slice(first * bs, (first + 1) * bs)
    for k in range(1, bs + 1):
        x = oracle.encrypt(FILLER_BYTE * k + b"\x00")[window]
        y = oracle.encrypt(FILLER_BYTE * k + b"\x01")[window]
        if x == y:
            prefix_length = (first + 1) * bs - k
            log.info("[+] Hidden prefix length: %d bytes", prefix_length)
            return prefix_length
    raise DetectionBoundExceeded("Unable to align with the end of the hidden prefix", bs)


def detect_hidden_length(oracle: Oracle, block_size: int) -> int:
    """
    Number of bytes the oracle adds around the attacker's plaintext.

    The first filler count p that makes a new block appear completes the
    hidden text to a block multiple, whose padding is then a full block:
        hidden = new_length - p - bs
    """
    bs = block_size
    baseline = len(oracle.encrypt(b""))
    for p in range(1, bs + 1):
        length = len(oracle.encrypt(FILLER_BYTE * p))
        if length > baseline:
            hidden = length - p - bs
            log.info("[+] Hidden text length: %d bytes", hidden)
            return hidden
    raise DetectionBoundExceeded("Ciphertext never grew while detecting the hidden length", bs)
