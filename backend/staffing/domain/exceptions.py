from __future__ import annotations


class SwapError(Exception):
    """Erro base do ciclo de vida das trocas."""


class ValidationError(SwapError):
    """Campo obrigatório ausente ou malformado (ex.: data inválida)."""


class InvalidTransition(SwapError):
    """Mudança de status não permitida a partir do estado/ator atual."""


class NotAllowed(SwapError):
    """O ator não tem direito de agir sobre este pedido."""


class NotFound(SwapError):
    """SwapRequest, Service ou Member inexistente."""


class PersistenceError(SwapError):
    """Falha do banco durante uma escrita transacional."""


class EmailDispatchError(SwapError):
    """Falha de envio de email. Sempre registrada em log, nunca propagada."""
