import pytest

from src.domain.services.auth.password_hasher import PasswordHasher


def test_hash_is_salted_and_verifies(hasher):
    first = hasher.hash("Passw0rd!")
    second = hasher.hash("Passw0rd!")

    assert first != second
    assert first.startswith("$2b$04$")
    assert hasher.verify("Passw0rd!", first)
    assert hasher.verify("Passw0rd!", second)


def test_verify_rejects_wrong_password(hasher):
    digest = hasher.hash("Passw0rd!")

    assert hasher.verify("passw0rd!", digest) is False


@pytest.mark.parametrize("digest", [None, "", "not-a-bcrypt-digest", "$2b$04$truncated"])
def test_verify_returns_false_for_missing_or_malformed_digest(hasher, digest):
    assert hasher.verify("Passw0rd!", digest) is False


def test_missing_digest_still_runs_a_comparison(hasher, mocker):
    spy = mocker.spy(hasher.pwd_context, "verify")

    assert hasher.verify("Passw0rd!", None) is False
    spy.assert_called_once()
    assert spy.call_args.args[1] == hasher._dummy_digest


def test_work_factor_is_configurable():
    digest = PasswordHasher(work_factor=5).hash("secret")

    assert digest.startswith("$2b$05$")
