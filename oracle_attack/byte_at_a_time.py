"""
Byte-at-a-time ECB decryption.

Recovers the secret an ECB oracle appends to attacker input, without the key.

Principle:
  1. Send one byte less filler than the attack window, so the window ends
     with the first unknown secret byte:
        [AAAAAAAAAAAAAAA?] = AAAAAAAAAAAAAAA || secret[0]
  2. Encrypt AAAAAAAAAAAAAAA || b for every byte b and map the window
     ciphertext to b.
  3. The oracle's own answer for the short filler is in that dictionary, its
     value is secret[0]. Shrink the filler by one byte, put the recovered
     bytes after it and repeat.
  The window spans every block the secret can reach, so one alignment works
  for the whole secret. A hidden prefix is skipped by completing its last
  block with extra filler and starting the window after it.

Cost: 257 oracle queries per recovered byte.
"""

import logging
from typing import Dict, Optional

from tqdm import tqdm

from .config import FILLER_BYTE, SHOW_PROGRESS
from .detect import Mode, detect_block_size, detect_hidden_length, detect_mode, detect_prefix_length
from .errors import InversionError, PreconditionError
from .oracles import Oracle

log = logging.getLogger(__name__)


def build_dictionary(oracle: Oracle, probe: bytes, window: slice) -> Dict[bytes, int]:
    """Ciphertext window of probe || b -> b, for every byte value b."""
    dictionary = {}
    for b in range(256):
        dictionary[oracle.encrypt(probe + bytes([b]))[window]] = b
    return dictionary


def recover_byte(oracle: Oracle, chosen: bytes, known: bytes, window: slice, position: int = 0) -> int:
    """
    Byte the oracle puts right after chosen || known, i.e. at the end of the
    window. Raises InversionError if no candidate matches.
    """
    dictionary = build_dictionary(oracle, chosen + known, window)
    target = oracle.encrypt(chosen)[window]
    try:
        return dictionary[target]
    except KeyError:
        raise InversionError(position) from None


def recover_suffix(oracle: Oracle, block_size: Optional[int] = None, progress: Optional[bool] = None) -> bytes:
    """Recover the hidden suffix of an ECB oracle, ignoring any hidden prefix."""
    if progress is None:
        progress = SHOW_PROGRESS

    bs = block_size or detect_block_size(oracle)
    mode = detect_mode(oracle, bs)
    if mode is not Mode.ECB:
        raise PreconditionError(f"Byte-at-a-time recovery needs an ECB-like oracle, got {mode.value}")

    prefix_length = detect_prefix_length(oracle, bs)
    suffix_length = detect_hidden_length(oracle, bs) - prefix_length
    log.info("[+] Hidden suffix length: %d bytes", suffix_length)

    # filler completing the prefix's last block, the window starts right after
    align = -prefix_length % bs
    start = prefix_length + align
    attack_size = (suffix_length // bs + 1) * bs
    window = slice(start, start + attack_size)

    log.info("[*] Recovering %d bytes...", suffix_length)
    recovered = bytearray()
    for i in tqdm(range(suffix_length), desc="byte-at-a-time", unit="B", disable=not progress):
        chosen = FILLER_BYTE * (align + attack_size - i - 1)
        recovered.append(recover_byte(oracle, chosen, bytes(recovered), window, position=i))
        log.debug("[+] Secret progress: %r", bytes(recovered))

    log.info("[+] Recovered %d bytes", len(recovered))
    return bytes(recovered)
