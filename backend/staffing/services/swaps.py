from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Optional, Tuple, Union

from django.db import DatabaseError, models, transaction
from django.utils import timezone

from staffing.domain.exceptions import (
    InvalidTransition,
    NotAllowed,
    NotFound,
    PersistenceError,
    ValidationError,
)
from staffing.domain.models import AvailabilityStatus, Member, NotificationType, SwapRequest, SwapStatus
from staffing.domain.repositories import (
    AssignmentRepository,
    AvailabilityRepository,
    MemberRepository,
    ServiceRepository,
    SwapRequestRepository,
)
from staffing.services.audit import audit
from staffing.services.availability import SwapCandidate, find_swap_candidates
from staffing.services.emails import SwapEvent
from staffing.services.notifications import create_swap_notifications
from staffing.services.notifier import Notifier, default_notifier
from staffing.utils import _parse_date

log = logging.getLogger(__name__)

class Actor(models.TextChoices):
    COUNTERPART = "counterpart", "Destinataire"
    ADMINISTRATOR = "administrator", "Administrateur"

# (status atual, papel do ator) -> status de destino permitidos
TRANSITIONS: Dict[Tuple[str, str], FrozenSet[str]] = {
    (SwapStatus.PENDING, Actor.COUNTERPART): frozenset({SwapStatus.ACCEPTED, SwapStatus.REJECTED}),
    (SwapStatus.ACCEPTED, Actor.ADMINISTRATOR): frozenset({SwapStatus.ADMIN_APPROVED, SwapStatus.ADMIN_REJECTED}),
}

def allowed_targets(current: str, actor_role: str) -> FrozenSet[str]:
    return TRANSITIONS.get((current, actor_role), frozenset())

# ===== Data Classes =====

@dataclass(frozen=True)
class ReassignmentResult:
    """Quantas linhas cada passo da troca alterou."""
    assignments: int
    released: int
    booked: int

# =========================
# Helpers
# =========================

def _safe_notify(notifier: Notifier, event: str, swap: SwapRequest, recipient: Member) -> None:
    """Aviso best-effort: falhas são registradas e nunca chegam ao chamador."""
    try:
        notifier.notify(event, swap, recipient)
    except Exception:
        log.exception(
            "Falha ao notificar %s (swap=%s, recipient=%s)", event, swap.pk, getattr(recipient, "pk", None)
        )

def _safe_inbox(swap: SwapRequest, notification_type: str) -> None:
    # a transição já foi commitada; a caixa de entrada não a desfaz
    try:
        create_swap_notifications(swap, notification_type)
    except DatabaseError:
        log.exception("Falha ao criar notificações %s (swap=%s)", notification_type, swap.pk)

def _require(value, field: str):
    if value is None or value == "":
        raise ValidationError(f"Le champ '{field}' est obligatoire.")
    return value

# =========================
# Executor da troca
# =========================

def execute_reassignment(swap: SwapRequest) -> ReassignmentResult:
    """Aplica a troca aprovada: staffing e disponibilidades.

    Deve rodar dentro da transação que gravou `admin_approved`; ou tudo se
    aplica, ou nada. Todas as atribuições do solicitante nesse serviço passam ao
    destinatário (qualquer papel).

    Args:
        swap (SwapRequest): Pedido aprovado.

    Returns:
        ReassignmentResult: Linhas alteradas em cada passo.
    """
    assignments = (
        AssignmentRepository.held_by(swap.service_id, swap.from_member_id)
        .update(member_id=swap.to_member_id)
    )
    released = (
        AvailabilityRepository.for_member_on(swap.from_member_id, swap.date)
        .update(status=AvailabilityStatus.AVAILABLE)
    )
    booked = (
        AvailabilityRepository.for_member_on(swap.to_member_id, swap.date)
        .update(status=AvailabilityStatus.BUSY)
    )
    result = ReassignmentResult(assignments=assignments, released=released, booked=booked)
    audit(
        "swap_executed",
        swap,
        before={"member_id": swap.from_member_id},
        after={
            "member_id": swap.to_member_id,
            "service_id": swap.service_id,
            "date": swap.date.isoformat(),
            "assignments": assignments,
            "released": released,
            "booked": booked,
        },
    )
    return result

# =========================
# Operações principais
# =========================

def create_swap_request(
    from_member_id,
    service_id,
    date,
    to_member_id=None,
    message: Optional[str] = None,
    *,
    notifier: Optional[Notifier] = None,
) -> Union[SwapRequest, List[SwapCandidate]]:
    """Cria um pedido de troca, ou lista candidatos quando não há destinatário.

    Args:
        from_member_id: Solicitante (obrigatório).
        service_id: Serviço cuja ocorrência será trocada (obrigatório).
        date: Data da ocorrência (`date` ou string ISO).
        to_member_id (optional): Destinatário. Ausente -> apenas consulta.
        message (Optional[str], optional): Texto livre para o destinatário.
        notifier (Optional[Notifier], optional): Canal de aviso. Defaults to EmailNotifier.

    Returns:
        SwapRequest | List[SwapCandidate]: O pedido `pending` criado, ou os candidatos.

    Raises:
        ValidationError: Campo ausente, data inválida ou solicitante == destinatário.
        NotFound: Membro ou serviço inexistente.
        PersistenceError: Falha do banco ao gravar.
    """
    _require(from_member_id, "from_member_id")
    _require(service_id, "service_id")
    _require(date, "date")
    d = _parse_date(date)
    if d is None:
        raise ValidationError(f"Date invalide: {date!r} (format attendu AAAA-MM-JJ).")

    if to_member_id is None or to_member_id == "":
        return find_swap_candidates(from_member_id, d)

    if str(from_member_id) == str(to_member_id):
        raise ValidationError("Impossible de demander un échange avec soi-même.")

    from_member = MemberRepository.by_id(from_member_id)
    if from_member is None:
        raise NotFound(f"Intervenant {from_member_id} introuvable.")
    to_member = MemberRepository.by_id(to_member_id)
    if to_member is None:
        raise NotFound(f"Intervenant {to_member_id} introuvable.")
    service = ServiceRepository.by_id(service_id)
    if service is None:
        raise NotFound(f"Service {service_id} introuvable.")

    try:
        with transaction.atomic():
            swap = SwapRequest.objects.create(
                from_member=from_member,
                to_member=to_member,
                service=service,
                date=d,
                message=(message or "").strip() or None,
                status=SwapStatus.PENDING,
            )
    except DatabaseError as e:
        raise PersistenceError(f"Échec de l'enregistrement de la demande d'échange: {e}") from e

    log.info("Swap #%s criado: %s -> %s (service=%s, date=%s)", swap.pk, from_member.pk, to_member.pk, service.pk, d)
    _safe_notify(notifier or default_notifier(), SwapEvent.REQUESTED, swap, to_member)
    return swap

def transition_swap_request(
    swap_id,
    actor_role: str,
    target_status: str,
    *,
    actor: Optional[Member] = None,
    notifier: Optional[Notifier] = None,
) -> SwapRequest:
    """Aplica uma transição de status e seus efeitos colaterais.

    O status (via UPDATE condicional no status esperado) e, para
    `admin_approved`, a troca de atribuições/disponibilidades compartilham uma
    única transação. Notificações e emails só depois do commit.

    Args:
        swap_id: ID do pedido.
        actor_role (str): Actor.COUNTERPART ou Actor.ADMINISTRATOR.
        target_status (str): Status desejado.
        actor (Optional[Member], optional): Quem age; se for destinatário, deve ser o `to_member`.
        notifier (Optional[Notifier], optional): Canal de aviso. Defaults to EmailNotifier.

    Returns:
        SwapRequest: O pedido atualizado, com membros e serviço carregados.

    Raises:
        ValidationError: Status ou papel desconhecido.
        NotFound: Pedido inexistente.
        NotAllowed: Destinatário diferente do ator.
        InvalidTransition: Transição ilegal (inclusive repetição de status terminal).
        PersistenceError: Falha do banco; nada foi aplicado.
    """
    if target_status not in SwapStatus.values:
        raise ValidationError(f"Statut invalide: {target_status!r}.")
    if actor_role not in Actor.values:
        raise ValidationError(f"Rôle d'acteur invalide: {actor_role!r}.")

    try:
        with transaction.atomic():
            swap = SwapRequestRepository.locked(swap_id)
            if swap is None:
                raise NotFound(f"Demande d'échange {swap_id} introuvable.")

            current = swap.status
            if target_status not in allowed_targets(current, actor_role):
                raise InvalidTransition(
                    f"Transition {current} -> {target_status} interdite pour {actor_role}."
                )
            if actor is not None and actor_role == Actor.COUNTERPART and actor.pk != swap.to_member_id:
                raise NotAllowed("Seul le destinataire peut répondre à cette demande.")

            changes = {"status": target_status, "updated_at": timezone.now()}
            if actor_role == Actor.ADMINISTRATOR and actor is not None:
                changes["decided_by"] = actor
            updated = SwapRequest.objects.filter(pk=swap.pk, status=current).update(**changes)
            if updated != 1:
                raise InvalidTransition(f"La demande {swap.pk} a déjà changé de statut.")
            swap.status = target_status

            if target_status == SwapStatus.ADMIN_APPROVED:
                result = execute_reassignment(swap)
                log.info(
                    "Swap #%s executado: assignments=%d released=%d booked=%d",
                    swap.pk, result.assignments, result.released, result.booked,
                )
    except DatabaseError as e:
        log.exception("Falha transacional no swap #%s (-> %s)", swap_id, target_status)
        raise PersistenceError(f"Échec de la transition de la demande {swap_id}: {e}") from e

    log.info("Swap #%s: %s -> %s (%s)", swap_id, current, target_status, actor_role)
    swap = SwapRequestRepository.detailed(swap_id)
    _after_commit(swap, target_status, notifier or default_notifier())
    return swap

def _after_commit(swap: SwapRequest, target_status: str, notifier: Notifier) -> None:
    """Efeitos que não precisam ser atômicos com a transição."""
    if target_status == SwapStatus.ACCEPTED:
        _safe_notify(notifier, SwapEvent.ACCEPTED, swap, swap.from_member)
    elif target_status == SwapStatus.REJECTED:
        _safe_notify(notifier, SwapEvent.REJECTED, swap, swap.from_member)
    elif target_status == SwapStatus.ADMIN_APPROVED:
        _safe_inbox(swap, NotificationType.SWAP_APPROVED)
        for member in (swap.from_member, swap.to_member):
            _safe_notify(notifier, SwapEvent.APPROVED, swap, member)
    elif target_status == SwapStatus.ADMIN_REJECTED:
        _safe_inbox(swap, NotificationType.SWAP_REJECTED)
        for member in (swap.from_member, swap.to_member):
            _safe_notify(notifier, SwapEvent.ADMIN_REJECTED, swap, member)
