"""
Tipos de erro de domínio.

Stores e services só levantam estes erros; a camada HTTP mapeia cada tipo
para um status e uma mensagem fixos.
"""
from __future__ import annotations


class DomainError(Exception):
    message = "domain error"

    def __init__(self, detail: str | None = None):
        self.detail = detail
        super().__init__(f"{self.message}: {detail}" if detail else self.message)


class NotFoundError(DomainError):
    message = "not found"


class ValidationError(DomainError):
    message = "validation error"

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


class UniquenessViolation(DomainError):
    message = "uniqueness violation"


class InvalidInputError(DomainError):
    message = "invalid input"


class AuthFailedError(DomainError):
    message = "authentication failed"


class TokenGenerationFailed(DomainError):
    message = "token generation failed"


class InternalError(DomainError):
    message = "internal error"


# infra

class ConfigError(DomainError):
    message = "configuration error"


class InvalidTokenError(DomainError):
    message = "invalid token"


class PublishError(DomainError):
    message = "publish failed"
