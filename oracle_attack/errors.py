"""
Exceptions raised by the oracle attacks.

Every failure is fatal: an error means a broken assumption about the oracle
or an exhausted search bound, so nothing here is ever retried.
"""


class OracleAttackError(Exception):
    """Base class for every error raised by oracle_attack."""


class CipherConstructionError(OracleAttackError, ValueError):
    """The block cipher primitive could not be built (bad key length...)."""


class PaddingError(OracleAttackError, ValueError):
    """PKCS#7 padding could not be stripped."""


class PreconditionError(OracleAttackError, ValueError):
    """An operation was called with arguments it cannot work with."""


class NonConformantOracleError(OracleAttackError):
    """The oracle answered in a way a block cipher oracle never would."""


class DetectionBoundExceeded(OracleAttackError):
    """A probing loop ran out of attempts."""

    def __init__(self, message: str, bound: int):
        super().__init__(f"{message} (tested up to {bound})")
        self.bound = bound


class InversionError(OracleAttackError):
    """No dictionary entry matched the oracle's answer."""

    def __init__(self, position: int):
        super().__init__(f"No dictionary entry matches hidden byte at position {position}")
        self.position = position
