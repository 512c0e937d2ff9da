from __future__ import annotations

import re

from accounts.core.security import hash_password, new_reset_token, verify_password


def test_hash_and_verify():
    hashed = hash_password("p1")

    assert hashed.startswith("argon2$")
    assert verify_password("p1", hashed) is True
    assert verify_password("p2", hashed) is False


def test_verify_rejects_missing_or_foreign_hash():
    assert verify_password("p1", None) is False
    assert verify_password("p1", "") is False
    assert verify_password("p1", "p1") is False
    assert verify_password("p1", "argon2$garbage") is False


def test_reset_token_is_thirty_hex_chars():
    tokens = {new_reset_token() for _ in range(20)}

    assert len(tokens) == 20
    for token in tokens:
        assert re.fullmatch(r"[0-9a-f]{30}", token)
