import pytest

from oracle_attack import ECBOracle

KEY = b"YELLOW SUBMARINE"

# 138 bytes
LYRICS = (
    b"Rollin' in my 5.0\n"
    b"With my rag-top down so my hair can blow\n"
    b"The girlies on standby waving just to say hi\n"
    b"Did you stop? No, I just drove by\n"
)


@pytest.fixture
def key():
    return KEY


@pytest.fixture
def lyrics():
    return LYRICS


@pytest.fixture
def lyrics_oracle():
    return ECBOracle(key=KEY, suffix=LYRICS)
