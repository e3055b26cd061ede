from datetime import timedelta

import pytest

from company_api.core.errors import AuthFailedError, NotFoundError, TokenGenerationFailed
from company_api.core.security import verify_token
from company_api.services.auth import AuthService

SECRET = "k" * 64


def test_authenticate_returns_token_for_user(user_store, user):
    service = AuthService(user_store, SECRET, timedelta(minutes=30))

    token = service.authenticate(user.email, "dev-password")

    assert token
    claims = verify_token(token, SECRET)
    assert claims.sub == user.id
    assert claims.exp - claims.iat == 30 * 60


def test_default_ttl_is_one_hour(user_store, user):
    for ttl in (None, timedelta(0), timedelta(minutes=-5)):
        service = AuthService(user_store, SECRET, ttl)
        claims = verify_token(service.authenticate(user.email, "dev-password"), SECRET)
        assert claims.exp - claims.iat == 3600


def test_wrong_password(user_store, user):
    service = AuthService(user_store, SECRET)
    with pytest.raises(AuthFailedError):
        service.authenticate(user.email, "nope")


def test_unknown_email(user_store):
    service = AuthService(user_store, SECRET)
    with pytest.raises(NotFoundError):
        service.authenticate("ghost@example.com", "dev-password")


def test_missing_secret_is_token_generation_failure(user_store, user):
    service = AuthService(user_store, "")
    with pytest.raises(TokenGenerationFailed):
        service.authenticate(user.email, "dev-password")


def test_no_token_when_password_wrong_even_without_secret(user_store, user):
    service = AuthService(user_store, "")
    with pytest.raises(AuthFailedError):
        service.authenticate(user.email, "nope")
