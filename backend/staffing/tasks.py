from __future__ import annotations

import logging
from datetime import timedelta

from celery import shared_task
from django.utils import timezone

from staffing.domain.exceptions import EmailDispatchError
from staffing.domain.models import Member, ServiceAssignment
from staffing.domain.repositories import AssignmentRepository, SwapRequestRepository
from staffing.services.emails import build_reminder_email, build_swap_email, dispatch
from staffing.services.notifications import create_reminder_notification

log = logging.getLogger(__name__)

# =========================
# Tasks
# =========================

@shared_task
def send_swap_email(event: str, swap_id: int, recipient_id: int) -> bool:
    """Envia um email de troca para um membro.

    Args:
        event (str): Evento de troca (SwapEvent).
        swap_id (int): ID do pedido.
        recipient_id (int): ID do membro destinatário do email.

    Returns:
        bool: True se o email foi entregue ao backend, False caso contrário.
    """
    swap = SwapRequestRepository.detailed(swap_id)
    if swap is None:
        log.warning("send_swap_email: SwapRequest %s não existe mais.", swap_id)
        return False
    recipient = Member.objects.filter(pk=recipient_id).first()
    if recipient is None:
        log.warning("send_swap_email: Member %s não existe mais.", recipient_id)
        return False

    try:
        subject, html = build_swap_email(event, swap, recipient)
        dispatch(recipient.email, subject, html)
    except EmailDispatchError:
        log.exception("Falha ao enviar %s para %s (swap=%s).", event, recipient.email, swap_id)
        return False
    return True

@shared_task
def notify_service_reminder(assignment_id: int) -> bool:
    """Envia o lembrete de véspera de uma atribuição confirmada."""
    assignment = (
        ServiceAssignment.objects
        .select_related("member", "service")
        .filter(pk=assignment_id)
        .first()
    )
    if assignment is None:
        log.warning("notify_service_reminder: ServiceAssignment %s não existe mais.", assignment_id)
        return False
    try:
        subject, html = build_reminder_email(assignment)
        dispatch(assignment.member.email, subject, html)
    except EmailDispatchError:
        log.exception("Falha ao enviar lembrete (assignment=%s).", assignment_id)
        return False
    return True

@shared_task
def daily_reminder() -> int:
    """Lembra os membros confirmados nos serviços de amanhã.

    Cria uma notificação in-app e enfileira um email por atribuição.

    Returns:
        int: Número de lembretes enfileirados.
    """
    tomorrow = timezone.localdate() + timedelta(days=1)

    count = 0
    for a in AssignmentRepository.confirmed_on(tomorrow):
        create_reminder_notification(a)
        try:
            notify_service_reminder.delay(a.pk)
        except Exception:
            log.exception("Falha ao enfileirar notify_service_reminder (assignment=%s).", a.pk)
            continue
        count += 1

    log.info("daily_reminder: %d lembrete(s) enfileirado(s) para %s.", count, tomorrow)
    return count
