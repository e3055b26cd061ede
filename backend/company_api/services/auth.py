from __future__ import annotations

from datetime import timedelta
from typing import Optional

from company_api.core.errors import AuthFailedError, TokenGenerationFailed
from company_api.core.security import DEFAULT_TOKEN_TTL, issue_token, verify_password
from company_api.stores.user import UserStore


class AuthService:
    """Login: busca por email, confere a senha e emite o token. Secret/TTL injetados."""

    def __init__(self, users: UserStore, token_secret: str, token_ttl: Optional[timedelta] = None):
        if token_ttl is None or token_ttl <= timedelta(0):
            token_ttl = DEFAULT_TOKEN_TTL
        self.users = users
        self.token_secret = token_secret
        self.token_ttl = token_ttl

    def authenticate(self, email: str, password: str) -> str:
        # NotFoundError do store sobe como está
        user = self.users.get_by_email(email)

        if not verify_password(password, user.password_hash):
            raise AuthFailedError(f"invalid password for email {email}")

        try:
            return issue_token(user.id, self.token_secret, self.token_ttl)
        except Exception as e:
            raise TokenGenerationFailed(str(e)) from e
