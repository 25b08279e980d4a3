"""Password hashing tests."""

from eduquest.auth.password import check_needs_rehash, hash_password, verify_password


class TestPasswordHashing:
    """argon2id hashing and verification."""

    def test_hash_is_argon2id(self):
        assert hash_password("s3cret").startswith("$argon2id$")

    def test_verify_correct_password(self):
        hashed = hash_password("s3cret")
        assert verify_password("s3cret", hashed) is True

    def test_verify_wrong_password(self):
        hashed = hash_password("s3cret")
        assert verify_password("wrong", hashed) is False

    def test_malformed_hash_is_rejected(self):
        assert verify_password("s3cret", "not-a-hash") is False

    def test_hashes_are_salted(self):
        assert hash_password("s3cret") != hash_password("s3cret")

    def test_current_parameters_need_no_rehash(self):
        assert check_needs_rehash(hash_password("s3cret")) is False
