from __future__ import annotations

from typing import Any, Dict, List, Optional

from django.db import transaction

from staffing.domain.exceptions import NotFound
from staffing.domain.models import (
    Member,
    Notification,
    NotificationType,
    ServiceAssignment,
    SwapRequest,
)
from staffing.domain.repositories import NotificationRepository

# Textos exibidos na caixa de entrada (mesma redação dos emails).
SWAP_COPY: Dict[str, Dict[str, str]] = {
    NotificationType.SWAP_APPROVED: {
        "title": "Échange approuvé",
        "from": "Votre demande d'échange avec {other} a été approuvée par l'administrateur.",
        "to": "L'échange avec {other} a été approuvé par l'administrateur.",
    },
    NotificationType.SWAP_REJECTED: {
        "title": "Échange rejeté",
        "from": "Votre demande d'échange avec {other} a été rejetée par l'administrateur.",
        "to": "L'échange avec {other} a été rejeté par l'administrateur.",
    },
}

def swap_payload(swap: SwapRequest) -> Dict[str, Any]:
    return {
        "swap_request_id": swap.pk,
        "service_id": swap.service_id,
        "service_title": swap.service.title,
        "date": swap.date.isoformat(),
    }

@transaction.atomic
def create_swap_notifications(swap: SwapRequest, notification_type: str) -> List[Notification]:
    """Cria exatamente duas notificações (solicitante e destinatário) sobre a decisão do admin.

    Args:
        swap (SwapRequest): O pedido decidido, com membros e serviço carregados.
        notification_type (str): NotificationType.SWAP_APPROVED ou SWAP_REJECTED.

    Returns:
        List[Notification]: As notificações criadas.
    """
    copy = SWAP_COPY.get(notification_type)
    if copy is None:
        raise ValueError(f"Tipo de notificação sem texto de troca: {notification_type!r}")
    payload = swap_payload(swap)
    rows = [
        Notification(
            member=swap.from_member,
            type=notification_type,
            title=copy["title"],
            message=copy["from"].format(other=swap.to_member.full_name),
            data=payload,
        ),
        Notification(
            member=swap.to_member,
            type=notification_type,
            title=copy["title"],
            message=copy["to"].format(other=swap.from_member.full_name),
            data=payload,
        ),
    ]
    return Notification.objects.bulk_create(rows)

def create_reminder_notification(assignment: ServiceAssignment) -> Notification:
    """Notificação in-app de véspera para uma atribuição confirmada."""
    service = assignment.service
    return Notification.objects.create(
        member=assignment.member,
        type=NotificationType.SERVICE_REMINDER,
        title=f"Rappel: {service.title} demain",
        message=(
            f"Vous servez demain en tant que {assignment.role} "
            f"à {service.time:%H:%M}" + (f" ({service.location})." if service.location else ".")
        ),
        data={
            "service_id": service.pk,
            "assignment_id": assignment.pk,
            "date": service.date.isoformat(),
        },
    )

def list_for_member(member: Member, limit: Optional[int] = None) -> List[Notification]:
    """Notificações mais recentes do membro (padrão: 50)."""
    return list(NotificationRepository.latest_for(member, limit=limit))

def mark_read(notification_id, member: Member) -> Notification:
    """Marca uma notificação do próprio membro como lida.

    Raises:
        NotFound: Se a notificação não existir ou pertencer a outro membro.
    """
    n = Notification.objects.filter(pk=notification_id, member=member).first()
    if n is None:
        raise NotFound(f"Notification {notification_id} introuvable.")
    if not n.read:
        n.read = True
        n.save(update_fields=["read"])
    return n

def mark_all_read(member: Member) -> int:
    """Marca todas as notificações não lidas do membro. Retorna quantas mudaram."""
    return NotificationRepository.unread_for(member).update(read=True)
