"""Tests for credential helpers."""
from vulnshop.core.database import hash_password
from vulnshop.core.security import generate_insecure_token, hash_password_md5


def test_md5_password_hash():
    assert hash_password_md5("password123") == "482c811da5d5b4bc6d497ffa98491e38"


def test_tagged_hash_wraps_md5():
    assert hash_password("bobpass") == "md5:" + hash_password_md5("bobpass")


def test_token_is_deterministic():
    first = generate_insecure_token("alice", "my-secret-key")

    assert first == generate_insecure_token("alice", "my-secret-key")
    assert first != generate_insecure_token("bob", "my-secret-key")
    assert first == hash_password_md5("alicemy-secret-key")
