from __future__ import annotations

import logging

from staffing.domain.models import Member, SwapRequest
from staffing.tasks import send_swap_email

log = logging.getLogger(__name__)

class Notifier:
    """Capacidade de avisar um membro sobre um evento de troca.

    Implementações não devem bloquear o chamador; o ciclo de vida das trocas
    trata qualquer exceção daqui como não fatal.
    """

    def notify(self, event: str, swap: SwapRequest, recipient: Member) -> None:
        raise NotImplementedError

class EmailNotifier(Notifier):
    """Enfileira o envio do email no Celery (fire-and-forget)."""

    def notify(self, event: str, swap: SwapRequest, recipient: Member) -> None:
        send_swap_email.delay(event, swap.pk, recipient.pk)
        log.debug("send_swap_email enfileirado: event=%s swap=%s recipient=%s", event, swap.pk, recipient.pk)

def default_notifier() -> Notifier:
    return EmailNotifier()
