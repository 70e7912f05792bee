from __future__ import annotations

from datetime import time, timedelta

from django.contrib.auth.models import User
from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from staffing.domain.models import (
    Member,
    MemberRole,
    Availability,
    AvailabilityStatus,
    Service,
    ServiceAssignment,
    AssignmentStatus,
)

DEFAULT_MEMBERS = [
    ("Claire", "Martin", "Accueil"),
    ("Julien", "Bernard", "Louange"),
    ("Sophie", "Dubois", "Technique"),
    ("Thomas", "Moreau", "Technique"),
    ("Camille", "Laurent", "Enfants"),
]

class Command(BaseCommand):
    help = (
        "Seed demo data (admin + intervenants + culte de dimanche prochain avec affectations "
        "et disponibilités). Idempotente."
    )

    def add_arguments(self, parser):
        parser.add_argument("--admin-user", type=str, default="admin", help="Username do superusuário demo (default: admin).")
        parser.add_argument("--admin-email", type=str, default="admin@churchmanager.local", help="Email do administrador demo.")
        parser.add_argument("--admin-pass", type=str, default="admin", help="Senha do superusuário demo (default: admin).")
        parser.add_argument("--password", type=str, default="demo", help="Senha das contas dos intervenants (default: demo).")

    @transaction.atomic
    def handle(self, *args, **kwargs):
        admin_user = kwargs["admin_user"]
        admin_email = kwargs["admin_email"]
        password = kwargs["password"]

        user = User.objects.filter(username=admin_user).first()
        if user is None:
            user = User.objects.create_superuser(admin_user, admin_email, kwargs["admin_pass"])
            self.stdout.write(self.style.SUCCESS(f"Created superuser {admin_user}"))
        else:
            self.stdout.write(self.style.WARNING(f"Superuser {admin_user} already exists."))
        Member.objects.get_or_create(
            email=admin_email,
            defaults={"first_name": "Admin", "last_name": "Église", "role": MemberRole.ADMIN, "user": user},
        )

        today = timezone.localdate()
        sunday = today + timedelta(days=(6 - today.weekday()) or 7)
        service, _ = Service.objects.get_or_create(
            title="Culte du dimanche",
            date=sunday,
            defaults={"time": time(10, 0), "location": "Grande salle"},
        )

        created_count = 0
        members = []
        for first, last, dept in DEFAULT_MEMBERS:
            email = f"{first}.{last}@churchmanager.local".lower()
            m, created = Member.objects.get_or_create(
                email=email,
                defaults={"first_name": first, "last_name": last, "department": dept},
            )
            if m.user_id is None:
                m.user = User.objects.create_user(email, email, password)
                m.save(update_fields=["user"])
            created_count += int(created)
            members.append(m)

        # os dois primeiros servem; os demais ficam disponíveis para troca
        for idx, m in enumerate(members):
            serving = idx < 2
            if serving:
                ServiceAssignment.objects.get_or_create(
                    service=service, member=m, role=m.department or "Bénévole",
                    defaults={"status": AssignmentStatus.CONFIRMED},
                )
            Availability.objects.update_or_create(
                member=m, date=sunday,
                defaults={"status": AvailabilityStatus.BUSY if serving else AvailabilityStatus.AVAILABLE},
            )

        self.stdout.write(self.style.SUCCESS(
            f"Seed completed. members: created={created_count}, total={Member.objects.count()}, "
            f"service={service}."
        ))
