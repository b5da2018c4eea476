"""Tests for id-number encryption at rest."""

import pytest

from obytkem.infra.pii_vault import decrypt_id_number, encrypt_id_number

KEY = "ab" * 32


def test_encrypts_with_prefix_and_random_nonce():
    a = encrypt_id_number("123456789", KEY)
    b = encrypt_id_number("123456789", KEY)
    assert a.startswith("enc:")
    assert a != b
    assert "123456789" not in a
    assert decrypt_id_number(a, KEY) == "123456789"


def test_no_key_stores_plaintext():
    assert encrypt_id_number("123456789", None) == "123456789"


def test_empty_values_pass_through():
    assert encrypt_id_number(None, KEY) is None
    assert decrypt_id_number(None, KEY) is None
    assert decrypt_id_number("", KEY) == ""


def test_legacy_plaintext_passes_through():
    assert decrypt_id_number("123456789", KEY) == "123456789"


def test_encrypted_value_without_key():
    stored = encrypt_id_number("123456789", KEY)
    with pytest.raises(RuntimeError, match="ID_NUMBER_KEY"):
        decrypt_id_number(stored, None)


def test_bad_key_length():
    with pytest.raises(RuntimeError, match="32 bytes"):
        encrypt_id_number("123", "abcd")
