import os

import pytest
from Crypto.Cipher import AES, DES
from Crypto.Util.Padding import pad as native_pad

from oracle_attack import (CipherConstructionError, PaddingError, PreconditionError, decrypt_cbc, decrypt_ecb,
                           encrypt_cbc, encrypt_ecb, pad, split_blocks, unpad, xor_blocks)


@pytest.mark.parametrize("length", [0, 1, 15, 16, 17, 31, 32, 100])
@pytest.mark.parametrize("bs", [8, 16, 20])
def test_padding_always_adds_bytes(length, bs):
    data = os.urandom(length)
    padded = pad(data, bs)
    assert len(padded) % bs == 0
    assert len(padded) > len(data)
    n = len(padded) - len(data)
    assert 1 <= n <= bs
    assert padded[len(data):] == bytes([n]) * n


def test_pad_yellow_submarine():
    assert pad(b"YELLOW SUBMARINE", 20) == b"YELLOW SUBMARINE\x04\x04\x04\x04"
    assert pad(b"foo bar baz", 8) == b"foo bar baz\x05\x05\x05\x05\x05"


def test_aligned_input_gets_a_full_padding_block():
    assert pad(b"A" * 16, 16) == b"A" * 16 + b"\x10" * 16


def test_unpad_strips_padding():
    assert unpad(b"ICE ICE BABY\x04\x04\x04\x04", 16) == b"ICE ICE BABY"
    assert unpad(b"A" * 16 + b"\x10" * 16, 16) == b"A" * 16


@pytest.mark.parametrize("data", [
    b"ICE ICE BABY\x05\x05\x05\x05",
    b"ICE ICE BABY\x01\x02\x03\x04",
    b"ICE ICE BABY\x00\x00\x00\x00",
    b"ICE ICE BABY",
    b"",
])
def test_unpad_rejects_bad_padding(data):
    with pytest.raises(PaddingError):
        unpad(data, 16)


def test_padding_error_is_a_value_error():
    with pytest.raises(ValueError):
        unpad(b"\x11" * 16, 16)


def test_split_blocks():
    assert split_blocks(b"abcdefgh", 4) == [b"abcd", b"efgh"]
    assert split_blocks(b"", 4) == []
    with pytest.raises(PreconditionError):
        split_blocks(b"abcdefg", 4)


def test_xor_blocks():
    a = bytes.fromhex("1c0111001f010100061a024b53535009181c")
    b = bytes.fromhex("686974207468652062756c6c277320657965")
    assert xor_blocks(a, b).hex() == "746865206b696420646f6e277420706c6179"


def test_xor_blocks_rejects_mismatched_lengths():
    with pytest.raises(PreconditionError):
        xor_blocks(b"\x00" * 16, b"\x00" * 15)


@pytest.mark.parametrize("key", [b"", b"short", b"YELLOW SUBMARIN", b"K" * 17])
def test_invalid_key_is_a_construction_error(key):
    with pytest.raises(CipherConstructionError):
        encrypt_ecb(b"data", key)
    with pytest.raises(CipherConstructionError):
        encrypt_cbc(b"data", key)


def test_ecb_matches_pycryptodome(key):
    plaintext = b"A" * 32 + b"Not so secret"
    expected = AES.new(key, AES.MODE_ECB).encrypt(native_pad(plaintext, 16))
    assert encrypt_ecb(plaintext, key) == expected


def test_ecb_repeats_identical_blocks(key):
    ciphertext = encrypt_ecb(b"B" * 48, key)
    blocks = split_blocks(ciphertext, 16)
    assert len(blocks) == 4
    assert blocks[0] == blocks[1] == blocks[2]


def test_cbc_matches_pycryptodome(key):
    iv = os.urandom(16)
    plaintext = b"I'm back and I'm ringin' the bell"
    expected = AES.new(key, AES.MODE_CBC, iv).encrypt(native_pad(plaintext, 16))
    assert encrypt_cbc(plaintext, key, iv) == expected


def test_cbc_default_iv_is_zero(key):
    plaintext = b"YELLOW SUBMARINE" * 3
    assert encrypt_cbc(plaintext, key) == encrypt_cbc(plaintext, key, bytes(16))


def test_cbc_hides_identical_blocks(key):
    blocks = split_blocks(encrypt_cbc(b"B" * 48, key, os.urandom(16)), 16)
    assert len(set(blocks)) == len(blocks)


def test_cbc_decrypt_uses_previous_ciphertext_block(key):
    iv = os.urandom(16)
    plaintext = os.urandom(48)
    ciphertext = encrypt_cbc(plaintext, key, iv)
    assert AES.new(key, AES.MODE_CBC, iv).decrypt(ciphertext)[:48] == plaintext
    assert decrypt_cbc(ciphertext, key, iv, strip=False)[:48] == plaintext


@pytest.mark.parametrize("length", [0, 1, 15, 16, 17, 33, 138])
def test_cbc_round_trip(key, length):
    plaintext = os.urandom(length)
    iv = os.urandom(16)
    assert decrypt_cbc(encrypt_cbc(plaintext, key, iv), key, iv) == plaintext
    assert decrypt_cbc(encrypt_cbc(plaintext, key), key) == plaintext


@pytest.mark.parametrize("length", [0, 7, 8, 9, 24])
def test_round_trip_with_8_byte_blocks(length):
    key = b"8bytekey"
    plaintext = os.urandom(length)
    assert len(encrypt_ecb(plaintext, key, DES)) % 8 == 0
    assert decrypt_ecb(encrypt_ecb(plaintext, key, DES), key, DES) == plaintext
    assert decrypt_cbc(encrypt_cbc(plaintext, key, cipher=DES), key, cipher=DES) == plaintext


def test_ecb_round_trip(key):
    plaintext = b"Play that funky music white boy"
    assert decrypt_ecb(encrypt_ecb(plaintext, key), key) == plaintext


def test_cbc_rejects_bad_iv(key):
    with pytest.raises(PreconditionError):
        encrypt_cbc(b"data", key, b"\x00" * 8)


def test_decrypt_rejects_misaligned_ciphertext(key):
    with pytest.raises(PreconditionError):
        decrypt_cbc(b"\x00" * 17, key)
