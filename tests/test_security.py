import pytest

from agendatop.core.security import (
    create_access_token,
    create_refresh_token,
    decode_token,
    hash_password,
    validate_password_policy,
    verify_password,
)


def test_hash_and_verify():
    hashed = hash_password("Senha123")
    assert hashed != "Senha123"
    assert verify_password("Senha123", hashed)
    assert not verify_password("Senha124", hashed)


@pytest.mark.parametrize("password", ["abc12", "somenteletras", "123456", ""])
def test_password_policy_rejects_weak(password):
    with pytest.raises(ValueError):
        validate_password_policy(password)


@pytest.mark.parametrize("password", ["abc123", "Senha123", "x1y2z3w4"])
def test_password_policy_accepts(password):
    validate_password_policy(password)


def test_token_types_are_enforced():
    access = create_access_token("42")
    refresh = create_refresh_token("42")
    assert decode_token(access, expected_type="access")["sub"] == "42"
    assert decode_token(refresh, expected_type="refresh")["sub"] == "42"
    with pytest.raises(ValueError):
        decode_token(access, expected_type="refresh")
    with pytest.raises(ValueError):
        decode_token("nao-e-um-jwt", expected_type="access")
