import pytest

from django.core import mail

from conftest import SERVICE_DATE
from staffing.domain.exceptions import InvalidTransition, NotAllowed, NotFound, PersistenceError, ValidationError
from staffing.models import (
    Availability,
    AvailabilityStatus,
    AuditLog,
    Notification,
    NotificationType,
    ServiceAssignment,
    SwapRequest,
    SwapStatus,
)
from staffing.domain.repositories import SwapRequestRepository
from staffing.services.availability import SwapCandidate
from staffing.services.swaps import Actor, create_swap_request, transition_swap_request

def _create(swap_setup, notifier, **kw):
    return create_swap_request(
        swap_setup["alice"].pk,
        swap_setup["service"].pk,
        SERVICE_DATE,
        to_member_id=swap_setup["bob"].pk,
        message="Je suis en déplacement",
        notifier=notifier,
        **kw,
    )

def _accepted(swap_setup, notifier):
    swap = _create(swap_setup, notifier)
    return transition_swap_request(
        swap.pk, Actor.COUNTERPART, SwapStatus.ACCEPTED, actor=swap_setup["bob"], notifier=notifier
    )

# =========================
# create_swap_request
# =========================

@pytest.mark.django_db
def test_create_with_counterpart_is_pending_and_notifies(swap_setup, notifier):
    swap = _create(swap_setup, notifier)

    assert isinstance(swap, SwapRequest)
    assert swap.status == SwapStatus.PENDING
    assert swap.from_member_id == swap_setup["alice"].pk
    assert swap.to_member_id == swap_setup["bob"].pk
    assert swap.date == SERVICE_DATE
    assert notifier.calls == [("swap_request", swap.pk, swap_setup["bob"].pk)]

@pytest.mark.django_db
def test_create_without_counterpart_returns_candidates(swap_setup, notifier, carol, admin_member):
    result = create_swap_request(
        swap_setup["alice"].pk, swap_setup["service"].pk, SERVICE_DATE.isoformat(), notifier=notifier
    )

    assert [c.id for c in result] == [swap_setup["bob"].pk]
    assert isinstance(result[0], SwapCandidate)
    assert SwapRequest.objects.count() == 0
    assert notifier.calls == []

@pytest.mark.django_db
def test_create_with_self_is_rejected(swap_setup, notifier):
    alice = swap_setup["alice"]
    with pytest.raises(ValidationError):
        create_swap_request(alice.pk, swap_setup["service"].pk, SERVICE_DATE, to_member_id=alice.pk, notifier=notifier)
    assert SwapRequest.objects.count() == 0

@pytest.mark.django_db
@pytest.mark.parametrize("bad_date", ["", "16/03/2025", "2025-13-40", "2025-03-16garbage", "2025-03-16T99:99"])
def test_create_with_bad_date_is_rejected(swap_setup, notifier, bad_date):
    with pytest.raises(ValidationError):
        create_swap_request(
            swap_setup["alice"].pk, swap_setup["service"].pk, bad_date,
            to_member_id=swap_setup["bob"].pk, notifier=notifier,
        )

@pytest.mark.django_db
def test_create_for_unknown_service_is_not_found(swap_setup, notifier):
    with pytest.raises(NotFound):
        create_swap_request(
            swap_setup["alice"].pk, 999999, SERVICE_DATE, to_member_id=swap_setup["bob"].pk, notifier=notifier
        )

@pytest.mark.django_db
def test_create_survives_notifier_failure(swap_setup, failing_notifier):
    swap = _create(swap_setup, failing_notifier)
    assert SwapRequest.objects.get(pk=swap.pk).status == SwapStatus.PENDING

@pytest.mark.django_db
def test_create_with_default_notifier_sends_email(swap_setup):
    swap = _create(swap_setup, None)

    assert len(mail.outbox) == 1
    sent = mail.outbox[0]
    assert sent.to == [swap_setup["bob"].email]
    assert "Culte du dimanche" in sent.subject
    assert "Alice Durand" in sent.body
    assert SwapRequest.objects.get(pk=swap.pk).status == SwapStatus.PENDING

# =========================
# Transições do destinatário
# =========================

@pytest.mark.django_db
def test_counterpart_accepts(swap_setup, notifier):
    swap = _accepted(swap_setup, notifier)

    assert swap.status == SwapStatus.ACCEPTED
    assert notifier.calls[-1] == ("swap_accepted", swap.pk, swap_setup["alice"].pk)
    # aceitar não mexe no staffing
    assert ServiceAssignment.objects.get(pk=swap_setup["assignment"].pk).member_id == swap_setup["alice"].pk

@pytest.mark.django_db
def test_counterpart_rejects_is_terminal(swap_setup, notifier):
    swap = _create(swap_setup, notifier)
    swap = transition_swap_request(
        swap.pk, Actor.COUNTERPART, SwapStatus.REJECTED, actor=swap_setup["bob"], notifier=notifier
    )
    assert swap.status == SwapStatus.REJECTED
    assert notifier.calls[-1] == ("swap_rejected", swap.pk, swap_setup["alice"].pk)

    with pytest.raises(InvalidTransition):
        transition_swap_request(swap.pk, Actor.COUNTERPART, SwapStatus.ACCEPTED, actor=swap_setup["bob"], notifier=notifier)
    with pytest.raises(InvalidTransition):
        transition_swap_request(swap.pk, Actor.ADMINISTRATOR, SwapStatus.ADMIN_APPROVED, notifier=notifier)
    assert SwapRequest.objects.get(pk=swap.pk).status == SwapStatus.REJECTED

@pytest.mark.django_db
def test_only_the_counterpart_may_answer(swap_setup, notifier, carol):
    swap = _create(swap_setup, notifier)
    with pytest.raises(NotAllowed):
        transition_swap_request(swap.pk, Actor.COUNTERPART, SwapStatus.ACCEPTED, actor=carol, notifier=notifier)
    with pytest.raises(NotAllowed):
        transition_swap_request(
            swap.pk, Actor.COUNTERPART, SwapStatus.ACCEPTED, actor=swap_setup["alice"], notifier=notifier
        )
    assert SwapRequest.objects.get(pk=swap.pk).status == SwapStatus.PENDING

@pytest.mark.django_db
def test_counterpart_cannot_use_admin_targets(swap_setup, notifier):
    swap = _create(swap_setup, notifier)
    with pytest.raises(InvalidTransition):
        transition_swap_request(
            swap.pk, Actor.COUNTERPART, SwapStatus.ADMIN_APPROVED, actor=swap_setup["bob"], notifier=notifier
        )

# =========================
# Transições do administrador
# =========================

@pytest.mark.django_db
def test_admin_approval_executes_the_swap(swap_setup, notifier, admin_member):
    swap = _accepted(swap_setup, notifier)
    alice, bob = swap_setup["alice"], swap_setup["bob"]

    swap = transition_swap_request(
        swap.pk, Actor.ADMINISTRATOR, SwapStatus.ADMIN_APPROVED, actor=admin_member, notifier=notifier
    )

    assert swap.status == SwapStatus.ADMIN_APPROVED
    assert swap.decided_by_id == admin_member.pk
    assert ServiceAssignment.objects.get(pk=swap_setup["assignment"].pk).member_id == bob.pk
    assert not ServiceAssignment.objects.filter(service=swap_setup["service"], member=alice).exists()
    assert Availability.objects.get(member=alice, date=SERVICE_DATE).status == AvailabilityStatus.AVAILABLE
    assert Availability.objects.get(member=bob, date=SERVICE_DATE).status == AvailabilityStatus.BUSY

    notes = Notification.objects.filter(type=NotificationType.SWAP_APPROVED)
    assert sorted(notes.values_list("member_id", flat=True)) == sorted([alice.pk, bob.pk])
    assert all(n.data["swap_request_id"] == swap.pk for n in notes)
    assert ("swap_approved", swap.pk, alice.pk) in notifier.calls
    assert ("swap_approved", swap.pk, bob.pk) in notifier.calls
    assert AuditLog.objects.filter(action="swap_executed", record_id=str(swap.pk)).count() == 1

@pytest.mark.django_db
def test_admin_approval_moves_every_role_held(swap_setup, notifier, admin_member):
    extra = ServiceAssignment.objects.create(service=swap_setup["service"], member=swap_setup["alice"], role="Vidéo")
    swap = _accepted(swap_setup, notifier)

    transition_swap_request(swap.pk, Actor.ADMINISTRATOR, SwapStatus.ADMIN_APPROVED, notifier=notifier)

    assert ServiceAssignment.objects.get(pk=extra.pk).member_id == swap_setup["bob"].pk

@pytest.mark.django_db
def test_admin_rejection_leaves_staffing_untouched(swap_setup, notifier, admin_member):
    swap = _accepted(swap_setup, notifier)
    alice, bob = swap_setup["alice"], swap_setup["bob"]

    swap = transition_swap_request(
        swap.pk, Actor.ADMINISTRATOR, SwapStatus.ADMIN_REJECTED, actor=admin_member, notifier=notifier
    )

    assert swap.status == SwapStatus.ADMIN_REJECTED
    assert ServiceAssignment.objects.get(pk=swap_setup["assignment"].pk).member_id == alice.pk
    assert Availability.objects.get(member=alice, date=SERVICE_DATE).status == AvailabilityStatus.BUSY
    assert Availability.objects.get(member=bob, date=SERVICE_DATE).status == AvailabilityStatus.AVAILABLE
    assert Notification.objects.filter(type=NotificationType.SWAP_REJECTED).count() == 2
    assert ("swap_admin_rejected", swap.pk, alice.pk) in notifier.calls
    assert ("swap_admin_rejected", swap.pk, bob.pk) in notifier.calls

@pytest.mark.django_db
def test_admin_cannot_skip_counterpart(swap_setup, notifier):
    swap = _create(swap_setup, notifier)

    with pytest.raises(InvalidTransition):
        transition_swap_request(swap.pk, Actor.ADMINISTRATOR, SwapStatus.ADMIN_APPROVED, notifier=notifier)

    assert SwapRequest.objects.get(pk=swap.pk).status == SwapStatus.PENDING
    assert ServiceAssignment.objects.get(pk=swap_setup["assignment"].pk).member_id == swap_setup["alice"].pk
    assert Notification.objects.count() == 0

@pytest.mark.django_db
def test_admin_cannot_set_counterpart_statuses(swap_setup, notifier):
    swap = _create(swap_setup, notifier)
    with pytest.raises(InvalidTransition):
        transition_swap_request(swap.pk, Actor.ADMINISTRATOR, SwapStatus.ACCEPTED, notifier=notifier)

@pytest.mark.django_db
def test_repeating_approval_fails_without_side_effects(swap_setup, notifier):
    swap = _accepted(swap_setup, notifier)
    transition_swap_request(swap.pk, Actor.ADMINISTRATOR, SwapStatus.ADMIN_APPROVED, notifier=notifier)
    calls_before = len(notifier.calls)

    with pytest.raises(InvalidTransition):
        transition_swap_request(swap.pk, Actor.ADMINISTRATOR, SwapStatus.ADMIN_APPROVED, notifier=notifier)

    assert Notification.objects.filter(type=NotificationType.SWAP_APPROVED).count() == 2
    assert len(notifier.calls) == calls_before
    assert AuditLog.objects.filter(action="swap_executed").count() == 1

@pytest.mark.django_db
def test_stale_read_loses_the_race(swap_setup, notifier, monkeypatch):
    swap = _accepted(swap_setup, notifier)
    stale = SwapRequest.objects.get(pk=swap.pk)
    # outra decisão foi gravada entre a leitura e o UPDATE condicional
    SwapRequest.objects.filter(pk=swap.pk).update(status=SwapStatus.ADMIN_REJECTED)
    monkeypatch.setattr(SwapRequestRepository, "locked", classmethod(lambda cls, swap_id: stale))
    calls_before = len(notifier.calls)

    with pytest.raises(InvalidTransition):
        transition_swap_request(swap.pk, Actor.ADMINISTRATOR, SwapStatus.ADMIN_APPROVED, notifier=notifier)

    assert SwapRequest.objects.get(pk=swap.pk).status == SwapStatus.ADMIN_REJECTED
    assert ServiceAssignment.objects.get(pk=swap_setup["assignment"].pk).member_id == swap_setup["alice"].pk
    assert Availability.objects.get(member=swap_setup["bob"], date=SERVICE_DATE).status == AvailabilityStatus.AVAILABLE
    assert AuditLog.objects.filter(action="swap_executed").count() == 0
    assert Notification.objects.count() == 0
    assert len(notifier.calls) == calls_before

@pytest.mark.django_db
def test_reassignment_failure_rolls_back_the_transition(swap_setup, notifier):
    # Bob já ocupa o mesmo papel: a troca violaria a unicidade (service, member, role)
    ServiceAssignment.objects.create(service=swap_setup["service"], member=swap_setup["bob"], role="Son")
    swap = _accepted(swap_setup, notifier)
    calls_before = len(notifier.calls)

    with pytest.raises(PersistenceError):
        transition_swap_request(swap.pk, Actor.ADMINISTRATOR, SwapStatus.ADMIN_APPROVED, notifier=notifier)

    assert SwapRequest.objects.get(pk=swap.pk).status == SwapStatus.ACCEPTED
    assert ServiceAssignment.objects.get(pk=swap_setup["assignment"].pk).member_id == swap_setup["alice"].pk
    assert Availability.objects.get(member=swap_setup["alice"], date=SERVICE_DATE).status == AvailabilityStatus.BUSY
    assert Notification.objects.count() == 0
    assert len(notifier.calls) == calls_before

@pytest.mark.django_db
def test_approval_survives_notifier_failure(swap_setup, notifier, failing_notifier):
    swap = _accepted(swap_setup, notifier)

    swap = transition_swap_request(swap.pk, Actor.ADMINISTRATOR, SwapStatus.ADMIN_APPROVED, notifier=failing_notifier)

    assert swap.status == SwapStatus.ADMIN_APPROVED
    assert ServiceAssignment.objects.get(pk=swap_setup["assignment"].pk).member_id == swap_setup["bob"].pk
    assert Notification.objects.count() == 2

# =========================
# Entradas inválidas
# =========================

@pytest.mark.django_db
def test_unknown_status_is_validation_error(swap_setup, notifier):
    swap = _create(swap_setup, notifier)
    with pytest.raises(ValidationError):
        transition_swap_request(swap.pk, Actor.COUNTERPART, "cancelled", notifier=notifier)

@pytest.mark.django_db
def test_unknown_swap_is_not_found(db, notifier):
    with pytest.raises(NotFound):
        transition_swap_request(424242, Actor.COUNTERPART, SwapStatus.ACCEPTED, notifier=notifier)
