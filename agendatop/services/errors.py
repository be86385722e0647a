"""Erros de domínio. A API converte cada um em {"detail": msg} com o status HTTP do tipo."""

from __future__ import annotations


class DomainError(Exception):
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(DomainError):
    status_code = 422


class NotFoundError(DomainError):
    status_code = 404


class SlotUnavailableError(DomainError):
    status_code = 409

    def __init__(self, message: str = "Horário não está mais disponível. Escolha outro."):
        super().__init__(message)


class InvalidTransitionError(DomainError):
    status_code = 409


class NotCancelledError(InvalidTransitionError):
    def __init__(self, message: str = "Este agendamento não está cancelado."):
        super().__init__(message)


class ConflictError(DomainError):
    """Operação recusada pelo estado atual (ex.: excluir algo ainda referenciado)."""

    status_code = 409
