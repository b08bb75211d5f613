"""
Chosen-plaintext attacks against block cipher encryption oracles.

  detect_block_size(oracle) -> int
  detect_mode(oracle)       -> Mode.ECB / Mode.CBC
  recover_suffix(oracle)    -> bytes
"""

import logging

from .byte_at_a_time import build_dictionary, recover_byte, recover_suffix
from .detect import Mode, detect_block_size, detect_hidden_length, detect_mode, detect_prefix_length
from .errors import (CipherConstructionError, DetectionBoundExceeded, InversionError,
                     NonConformantOracleError, OracleAttackError, PaddingError, PreconditionError)
from .modes import decrypt_cbc, decrypt_ecb, encrypt_cbc, encrypt_ecb, pad, split_blocks, unpad, xor_blocks
from .oracles import CallableOracle, CBCOracle, ECBOracle, Oracle, RandomModeOracle

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())
