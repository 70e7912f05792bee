from __future__ import annotations

import logging
from smtplib import SMTPException
from typing import Any, Dict, Tuple

from django.conf import settings
from django.core.mail import send_mail
from django.db import models
from django.template.loader import render_to_string
from django.utils.html import strip_tags

from staffing.domain.exceptions import EmailDispatchError
from staffing.domain.models import Member, ServiceAssignment, SwapRequest
from staffing.utils import _get_setting

log = logging.getLogger(__name__)

class SwapEvent(models.TextChoices):
    REQUESTED = "swap_request", "Demande d'échange reçue"
    ACCEPTED = "swap_accepted", "Échange accepté"
    REJECTED = "swap_rejected", "Échange refusé"
    APPROVED = "swap_approved", "Échange approuvé"
    ADMIN_REJECTED = "swap_admin_rejected", "Échange rejeté par l'administrateur"

SUBJECTS: Dict[str, str] = {
    SwapEvent.REQUESTED: "Demande d'échange de service: {title}",
    SwapEvent.ACCEPTED: "Échange accepté: {title}",
    SwapEvent.REJECTED: "Échange refusé: {title}",
    SwapEvent.APPROVED: "Échange approuvé: {title}",
    SwapEvent.ADMIN_REJECTED: "Échange rejeté: {title}",
}

# =========================
# Renderização
# =========================

def _base_context(recipient: Member) -> Dict[str, Any]:
    return {
        "recipient": recipient,
        "app_url": _get_setting("APP_URL", "").rstrip("/"),
    }

def build_swap_email(event: str, swap: SwapRequest, recipient: Member) -> Tuple[str, str]:
    """Monta assunto e HTML de um email de troca.

    Args:
        event (str): Um dos valores de SwapEvent.
        swap (SwapRequest): O pedido, com membros e serviço carregados.
        recipient (Member): Quem recebe o email.

    Returns:
        Tuple[str, str]: (assunto, corpo HTML).
    """
    if event not in SUBJECTS:
        raise ValueError(f"Evento de troca desconhecido: {event!r}")
    subject = SUBJECTS[event].format(title=swap.service.title)
    context = _base_context(recipient)
    context.update({
        "swap": swap,
        "service": swap.service,
        "from_member": swap.from_member,
        "to_member": swap.to_member,
        "message": swap.message,
    })
    html = render_to_string(f"emails/{event}.html", context)
    return subject, html

def build_reminder_email(assignment: ServiceAssignment) -> Tuple[str, str]:
    """Monta o lembrete enviado na véspera de um serviço confirmado."""
    service = assignment.service
    subject = f"Rappel: Service {service.title} demain"
    context = _base_context(assignment.member)
    context.update({"service": service, "role": assignment.role})
    return subject, render_to_string("emails/service_reminder.html", context)

# =========================
# Envio
# =========================

def dispatch(to_address: str, subject: str, html: str) -> None:
    """Envia um email HTML (com alternativa texto) pelo backend configurado.

    Raises:
        EmailDispatchError: Se o endereço estiver vazio ou o transporte falhar.
    """
    if not to_address:
        raise EmailDispatchError("Destinataire sans adresse email.")
    try:
        send_mail(
            subject,
            strip_tags(html),
            settings.DEFAULT_FROM_EMAIL,
            [to_address],
            html_message=html,
            fail_silently=False,
        )
    except (SMTPException, OSError) as e:
        raise EmailDispatchError(f"Falha ao enviar '{subject}' para {to_address}: {e}") from e
    log.info("Email enviado: to=%s subject=%r", to_address, subject)
