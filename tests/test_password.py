"""Credential verifier tests."""

from sealnote.auth.password import CredentialVerifier, hash_password, verify_password


def test_hash_is_not_plaintext_and_salted():
    h1 = hash_password("secret", rounds=4)
    h2 = hash_password("secret", rounds=4)
    assert h1 != "secret"
    assert h1.startswith("$2")
    # Random salt: same input, different bytes
    assert h1 != h2


def test_verify_correct_and_incorrect():
    h = hash_password("secret", rounds=4)
    assert verify_password("secret", h) is True
    assert verify_password("Secret", h) is False
    assert verify_password("", h) is False


def test_malformed_hash_never_matches():
    assert verify_password("secret", "not-a-bcrypt-hash") is False
    assert verify_password("secret", "") is False


def test_credential_verifier_round_trip():
    verifier = CredentialVerifier(rounds=4)
    h = verifier.hash("hunter2")
    assert verifier.compare("hunter2", h)
    assert not verifier.compare("hunter3", h)
