import pytest
from datetime import timedelta

from conftest import SERVICE_DATE
from staffing.models import Availability, AvailabilityStatus, Member
from staffing.services.availability import find_swap_candidates

@pytest.mark.django_db
def test_only_available_users_are_candidates(availabilities, alice, bob, carol, admin_member):
    result = find_swap_candidates(alice.pk, SERVICE_DATE)

    assert [c.id for c in result] == [bob.pk]
    assert result[0].to_dict() == {
        "id": bob.pk,
        "first_name": "Bob",
        "last_name": "Petit",
        "email": bob.email,
        "department": "Technique",
    }

@pytest.mark.django_db
def test_requester_is_excluded_even_when_available(availabilities, alice, bob):
    Availability.objects.filter(member=alice).update(status=AvailabilityStatus.AVAILABLE)

    ids = [c.id for c in find_swap_candidates(alice.pk, SERVICE_DATE)]

    assert alice.pk not in ids
    assert bob.pk in ids

@pytest.mark.django_db
def test_other_dates_do_not_count(availabilities, alice):
    assert find_swap_candidates(alice.pk, SERVICE_DATE + timedelta(days=7)) == []

@pytest.mark.django_db
def test_candidates_are_sorted_by_name(availabilities, alice, bob):
    zoe = Member.objects.create(first_name="Zoé", last_name="Abel", email="zoe@example.com")
    Availability.objects.create(member=zoe, date=SERVICE_DATE, status=AvailabilityStatus.AVAILABLE)

    assert [c.id for c in find_swap_candidates(alice.pk, SERVICE_DATE)] == [zoe.pk, bob.pk]
