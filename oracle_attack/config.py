"""
Tunables shared by the oracle attacks.
"""

import os

# Byte used to fill chosen plaintexts
FILLER_BYTE = b"A"

# Largest plaintext length tried while looking for the block size
MAX_BLOCK_SIZE_PROBE = 1024

# Mode probe length, in blocks (at least two aligned identical blocks)
MODE_PROBE_BLOCKS = 3

# AES-128 unless told otherwise
DEFAULT_KEY_SIZE = 16

# Random prefix/tail length range of RandomModeOracle (inclusive)
RANDOM_AFFIX_RANGE = (5, 10)

# tqdm progress bar during byte recovery
SHOW_PROGRESS = os.environ.get("ORACLE_ATTACK_PROGRESS", "0").lower() in ("1", "true", "yes")
