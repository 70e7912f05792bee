import pytest
from datetime import date, time

from django.contrib.auth.models import User

from staffing.models import (
    Member,
    MemberRole,
    Availability,
    AvailabilityStatus,
    Service,
    ServiceAssignment,
    AssignmentStatus,
)
from staffing.services.notifier import Notifier

SERVICE_DATE = date(2025, 3, 16)

class RecordingNotifier(Notifier):
    def __init__(self):
        self.calls = []

    def notify(self, event, swap, recipient):
        self.calls.append((str(event), swap.pk, recipient.pk))

class FailingNotifier(Notifier):
    def notify(self, event, swap, recipient):
        raise RuntimeError("smtp down")

def _member(first, last, role=MemberRole.USER, username=None, **extra):
    user = None
    if username:
        user = User.objects.create_user(username, f"{username}@example.com", "pw")
    return Member.objects.create(
        first_name=first,
        last_name=last,
        email=f"{first}.{last}@example.com".lower(),
        role=role,
        user=user,
        **extra,
    )

@pytest.fixture
def notifier():
    return RecordingNotifier()

@pytest.fixture
def failing_notifier():
    return FailingNotifier()

@pytest.fixture
def admin_member(db):
    return _member("Anne", "Admin", role=MemberRole.ADMIN, username="admin")

@pytest.fixture
def alice(db):
    return _member("Alice", "Durand", username="alice", department="Louange")

@pytest.fixture
def bob(db):
    return _member("Bob", "Petit", username="bob", department="Technique")

@pytest.fixture
def carol(db):
    return _member("Carol", "Roux", username="carol")

@pytest.fixture
def service(db):
    return Service.objects.create(title="Culte du dimanche", date=SERVICE_DATE, time=time(10, 0), location="Grande salle")

@pytest.fixture
def assignment(alice, service):
    return ServiceAssignment.objects.create(
        service=service, member=alice, role="Son", status=AssignmentStatus.CONFIRMED
    )

@pytest.fixture
def availabilities(alice, bob, carol, admin_member):
    return {
        "alice": Availability.objects.create(member=alice, date=SERVICE_DATE, status=AvailabilityStatus.BUSY),
        "bob": Availability.objects.create(member=bob, date=SERVICE_DATE, status=AvailabilityStatus.AVAILABLE),
        "carol": Availability.objects.create(member=carol, date=SERVICE_DATE, status=AvailabilityStatus.UNAVAILABLE),
        "admin": Availability.objects.create(member=admin_member, date=SERVICE_DATE, status=AvailabilityStatus.AVAILABLE),
    }

@pytest.fixture
def swap_setup(assignment, availabilities, alice, bob, service):
    """Alice serve no culto e Bob está livre na data."""
    return {"alice": alice, "bob": bob, "service": service, "assignment": assignment}
