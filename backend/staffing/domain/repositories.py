from __future__ import annotations

from datetime import date
from typing import Optional

from django.db.models import Q, QuerySet

from staffing.domain.models import (
    Member,
    MemberRole,
    Availability,
    AvailabilityStatus,
    Service,
    ServiceStatus,
    ServiceAssignment,
    AssignmentStatus,
    SwapRequest,
    Notification,
)
from staffing.utils import _get_setting

# ==========================================================
# Member Repository
# ==========================================================
class MemberRepository:
    """Repositório para operações relacionadas a Member."""

    @classmethod
    def by_id(cls, member_id) -> Optional[Member]:
        return Member.objects.filter(pk=member_id).first()

    @classmethod
    def for_user(cls, user) -> Optional[Member]:
        """Retorna o membro ligado à conta Django, se houver."""
        if user is None or not getattr(user, "is_authenticated", False):
            return None
        return Member.objects.filter(user=user).first()

    @classmethod
    def available_on(cls, d: date, exclude_id=None) -> QuerySet[Member]:
        """Retorna os intervenants (nunca administradores) disponíveis na data.

        Args:
            d (date): A data a ser considerada.
            exclude_id (optional): ID do membro a ser excluído (normalmente o solicitante).

        Returns:
            QuerySet[Member]: Membros com ao menos uma disponibilidade `available` na data.
        """
        qs = Member.objects.filter(
            role=MemberRole.USER,
            availabilities__date=d,
            availabilities__status=AvailabilityStatus.AVAILABLE,
        )
        if exclude_id is not None:
            qs = qs.exclude(pk=exclude_id)
        return qs.distinct().order_by("last_name", "first_name", "id")

# ==========================================================
# Service Repository
# ==========================================================
class ServiceRepository:
    """Repositório para operações relacionadas a Service."""

    @classmethod
    def by_id(cls, service_id) -> Optional[Service]:
        return Service.objects.filter(pk=service_id).first()

# ==========================================================
# Assignment Repository
# ==========================================================
class AssignmentRepository:
    """Repositório para operações relacionadas a ServiceAssignment."""

    @classmethod
    def held_by(cls, service_id, member_id) -> QuerySet[ServiceAssignment]:
        """Todas as atribuições (qualquer papel) de um membro num serviço."""
        return ServiceAssignment.objects.filter(service_id=service_id, member_id=member_id)

    @classmethod
    def confirmed_on(cls, d: date) -> QuerySet[ServiceAssignment]:
        """Atribuições confirmadas para serviços (não cancelados) numa data."""
        return (
            ServiceAssignment.objects
            .filter(status=AssignmentStatus.CONFIRMED, service__date=d, service__status=ServiceStatus.SCHEDULED)
            .select_related("member", "service")
            .order_by("service__time", "member__last_name")
        )

# ==========================================================
# Availability Repository
# ==========================================================
class AvailabilityRepository:
    """Repositório para operações relacionadas a Availability."""

    @classmethod
    def for_member_on(cls, member_id, d: date) -> QuerySet[Availability]:
        return Availability.objects.filter(member_id=member_id, date=d)

# ==========================================================
# SwapRequest Repository
# ==========================================================
class SwapRequestRepository:
    """Repositório para operações relacionadas a SwapRequest."""

    @classmethod
    def _base(cls) -> QuerySet[SwapRequest]:
        return SwapRequest.objects.select_related("from_member", "to_member", "service", "decided_by")

    @classmethod
    def detailed(cls, swap_id) -> Optional[SwapRequest]:
        """Retorna o pedido com membros e serviço já carregados."""
        return cls._base().filter(pk=swap_id).first()

    @classmethod
    def locked(cls, swap_id) -> Optional[SwapRequest]:
        """Retorna o pedido com lock de linha. Deve ser chamado dentro de transaction.atomic."""
        return SwapRequest.objects.select_for_update().filter(pk=swap_id).first()

    @classmethod
    def involving(cls, member: Member) -> QuerySet[SwapRequest]:
        """Pedidos em que o membro é solicitante ou destinatário, mais recentes primeiro."""
        return (
            cls._base()
            .filter(Q(from_member=member) | Q(to_member=member))
            .order_by("-created_at", "-id")
        )

    @classmethod
    def all_detailed(cls) -> QuerySet[SwapRequest]:
        return cls._base().order_by("-created_at", "-id")

# ==========================================================
# Notification Repository
# ==========================================================
class NotificationRepository:
    """Repositório para operações relacionadas a Notification."""

    @classmethod
    def latest_for(cls, member: Member, limit: Optional[int] = None) -> QuerySet[Notification]:
        """Últimas notificações do membro (limite padrão: NOTIFICATION_LIST_LIMIT)."""
        limit = limit or _get_setting("NOTIFICATION_LIST_LIMIT", 50)
        return Notification.objects.filter(member=member).order_by("-created_at", "-id")[:limit]

    @classmethod
    def unread_for(cls, member: Member) -> QuerySet[Notification]:
        return Notification.objects.filter(member=member, read=False)
