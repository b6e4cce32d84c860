"""
Tests for bcrypt password hashing.
"""

from auth.password import hash_password, verify_password


class TestHashPassword:
    def test_verify_accepts_original(self):
        hashed = hash_password("s3cret!", rounds=4)
        assert verify_password("s3cret!", hashed)

    def test_verify_rejects_other_password(self):
        hashed = hash_password("s3cret!", rounds=4)
        assert verify_password("s3cret?", hashed) is False

    def test_same_plaintext_hashes_differ(self):
        first = hash_password("repeat", rounds=4)
        second = hash_password("repeat", rounds=4)
        assert first != second
        assert verify_password("repeat", first)
        assert verify_password("repeat", second)

    def test_hash_is_not_plaintext(self):
        assert "plaintext" not in hash_password("plaintext", rounds=4)

    def test_garbage_hash_is_a_mismatch_not_an_error(self):
        assert verify_password("anything", "not-a-bcrypt-hash") is False
