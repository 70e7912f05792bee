import pytest

from staffing.models import ServiceAssignment, SwapRequest, SwapStatus

CHANGELIST = "/admin/staffing/swaprequest/"

@pytest.fixture
def admin_client_for(client, admin_member):
    user = admin_member.user
    user.is_staff = True
    user.is_superuser = True
    user.save()
    client.force_login(user)
    return client

def _run_action(client, action, *swaps):
    return client.post(CHANGELIST, {"action": action, "_selected_action": [s.pk for s in swaps]})

@pytest.mark.django_db
def test_approve_action_executes_the_swap(admin_client_for, admin_member, swap_setup):
    swap = SwapRequest.objects.create(
        from_member=swap_setup["alice"], to_member=swap_setup["bob"], service=swap_setup["service"],
        date=swap_setup["service"].date, status=SwapStatus.ACCEPTED,
    )

    resp = _run_action(admin_client_for, "approve_swaps", swap)

    assert resp.status_code == 302
    swap.refresh_from_db()
    assert swap.status == SwapStatus.ADMIN_APPROVED
    assert swap.decided_by_id == admin_member.pk
    assert ServiceAssignment.objects.get(pk=swap_setup["assignment"].pk).member_id == swap_setup["bob"].pk

@pytest.mark.django_db
def test_reject_action_skips_requests_not_awaiting_decision(admin_client_for, alice, bob, service):
    waiting = SwapRequest.objects.create(from_member=alice, to_member=bob, service=service, date=service.date, status=SwapStatus.ACCEPTED)
    pending = SwapRequest.objects.create(from_member=bob, to_member=alice, service=service, date=service.date)

    resp = _run_action(admin_client_for, "reject_swaps", waiting, pending)

    assert resp.status_code == 302
    waiting.refresh_from_db()
    pending.refresh_from_db()
    assert waiting.status == SwapStatus.ADMIN_REJECTED
    assert pending.status == SwapStatus.PENDING
