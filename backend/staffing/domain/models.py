from __future__ import annotations

from django.contrib.auth.models import User
from django.db import models
from django.db.models import F, Q

# =========================
# Choices canônicos
# =========================

class MemberRole(models.TextChoices):
    ADMIN = "ADMIN", "Administrateur"
    USER = "USER", "Intervenant"

class ServiceStatus(models.TextChoices):
    SCHEDULED = "scheduled", "Programmé"
    CANCELLED = "cancelled", "Annulé"
    COMPLETED = "completed", "Terminé"

class AssignmentStatus(models.TextChoices):
    PENDING = "PENDING", "En attente"
    CONFIRMED = "CONFIRMED", "Confirmé"
    DECLINED = "DECLINED", "Refusé"

class AvailabilityStatus(models.TextChoices):
    AVAILABLE = "available", "Disponible"
    UNAVAILABLE = "unavailable", "Indisponible"
    BUSY = "busy", "Occupé"

class SwapStatus(models.TextChoices):
    PENDING = "pending", "En attente"
    ACCEPTED = "accepted", "Accepté"
    REJECTED = "rejected", "Refusé"
    ADMIN_APPROVED = "admin_approved", "Approuvé"
    ADMIN_REJECTED = "admin_rejected", "Rejeté par l'administrateur"

class NotificationType(models.TextChoices):
    SWAP_REQUEST = "swap_request", "Demande d'échange"
    SWAP_ACCEPTED = "swap_accepted", "Échange accepté"
    SWAP_REJECTED = "swap_rejected", "Échange rejeté"
    SWAP_APPROVED = "swap_approved", "Échange approuvé"
    SERVICE_REMINDER = "service_reminder", "Rappel de service"

# =========================
# Modelos
# =========================

class Member(models.Model):
    """Representa um intervenant (ou administrador) da igreja."""
    first_name = models.CharField(max_length=80)
    last_name = models.CharField(max_length=80, db_index=True)
    email = models.EmailField(unique=True)
    phone = models.CharField(max_length=30, blank=True, null=True)
    department = models.CharField(max_length=80, blank=True, null=True)
    role = models.CharField(
        max_length=10, choices=MemberRole.choices, default=MemberRole.USER, db_index=True
    )
    active = models.BooleanField(default=True, db_index=True)
    user = models.OneToOneField(
        User, blank=True, null=True, on_delete=models.SET_NULL, related_name="member"
    )

    class Meta:
        verbose_name = "Intervenant"
        verbose_name_plural = "Intervenants"
        ordering = ["last_name", "first_name"]
        indexes = [
            models.Index(fields=["role", "active"], name="member_role_active_idx"),
        ]

    def __str__(self):
        return self.full_name

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def is_admin(self) -> bool:
        return self.role == MemberRole.ADMIN

class Service(models.Model):
    """Representa uma ocorrência de culto/serviço numa data e hora."""
    title = models.CharField(max_length=120)
    description = models.TextField(blank=True, null=True)
    date = models.DateField(db_index=True)
    time = models.TimeField()
    location = models.CharField(max_length=120, blank=True, default="")
    status = models.CharField(
        max_length=12, choices=ServiceStatus.choices, default=ServiceStatus.SCHEDULED, db_index=True
    )

    class Meta:
        verbose_name = "Service"
        verbose_name_plural = "Services"
        ordering = ["date", "time"]
        indexes = [
            models.Index(fields=["date", "time"], name="service_date_time_idx"),
        ]

    def __str__(self):
        return f"{self.title} {self.date} {self.time:%H:%M}"

class ServiceAssignment(models.Model):
    """Um membro ocupa um papel (role) num serviço."""
    service = models.ForeignKey(Service, on_delete=models.CASCADE, related_name="assignments")
    member = models.ForeignKey(Member, on_delete=models.CASCADE, related_name="assignments")
    role = models.CharField(max_length=80)
    status = models.CharField(
        max_length=12, choices=AssignmentStatus.choices, default=AssignmentStatus.PENDING, db_index=True
    )
    created_by = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        verbose_name = "Affectation"
        verbose_name_plural = "Affectations"
        constraints = [
            models.UniqueConstraint(
                fields=("service", "member", "role"), name="uniq_assignment_service_member_role"
            ),
        ]
        indexes = [
            models.Index(fields=["service", "member"], name="assignment_service_member_idx"),
            models.Index(fields=["member", "status"], name="assignment_member_status_idx"),
        ]
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.service} -> {self.member} [{self.role}] ({self.status})"

class Availability(models.Model):
    """Disponibilidade declarada de um membro para uma data do calendário."""
    member = models.ForeignKey(Member, on_delete=models.CASCADE, related_name="availabilities")
    date = models.DateField(db_index=True)
    status = models.CharField(
        max_length=12, choices=AvailabilityStatus.choices, default=AvailabilityStatus.AVAILABLE, db_index=True
    )
    notes = models.TextField(blank=True, null=True)

    class Meta:
        verbose_name = "Disponibilité"
        verbose_name_plural = "Disponibilités"
        constraints = [
            models.UniqueConstraint(fields=("member", "date"), name="uniq_availability_member_date"),
        ]
        indexes = [
            models.Index(fields=["date", "status"], name="availability_date_status_idx"),
        ]

    def __str__(self):
        return f"{self.member} {self.date} {self.status}"

class SwapRequest(models.Model):
    """Pedido de troca de um serviço entre dois membros. Nunca é apagado."""
    from_member = models.ForeignKey(Member, on_delete=models.CASCADE, related_name="swaps_sent")
    to_member = models.ForeignKey(Member, on_delete=models.CASCADE, related_name="swaps_received")
    service = models.ForeignKey(Service, on_delete=models.CASCADE, related_name="swap_requests")
    date = models.DateField(db_index=True)
    message = models.TextField(blank=True, null=True)
    status = models.CharField(
        max_length=16, choices=SwapStatus.choices, default=SwapStatus.PENDING, db_index=True
    )
    decided_by = models.ForeignKey(
        Member, on_delete=models.SET_NULL, null=True, blank=True, related_name="swaps_decided"
    )
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Demande d'échange"
        verbose_name_plural = "Demandes d'échange"
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=~Q(from_member=F("to_member")), name="swap_distinct_members"
            ),
        ]
        indexes = [
            models.Index(fields=["status", "created_at"], name="swap_status_created_idx"),
            models.Index(fields=["service", "date"], name="swap_service_date_idx"),
        ]

    def __str__(self):
        return f"#{self.pk} {self.from_member} -> {self.to_member} {self.date} ({self.status})"

class Notification(models.Model):
    """Caixa de entrada in-app. Só o campo `read` muda depois de criado."""
    member = models.ForeignKey(Member, on_delete=models.CASCADE, related_name="notifications")
    type = models.CharField(max_length=24, choices=NotificationType.choices, db_index=True)
    title = models.CharField(max_length=160)
    message = models.TextField()
    data = models.JSONField(blank=True, null=True)
    read = models.BooleanField(default=False, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        verbose_name = "Notification"
        verbose_name_plural = "Notifications"
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["member", "read"], name="notification_member_read_idx"),
        ]

    def __str__(self):
        return f"{self.member} | {self.type} | {self.title}"

class AuditLog(models.Model):
    """Registra ações de criação, atualização e exclusão em outros modelos."""
    action = models.CharField(max_length=50, db_index=True)
    table = models.CharField(max_length=50, db_index=True)
    record_id = models.CharField(max_length=50)
    before = models.JSONField(blank=True, null=True)
    after = models.JSONField(blank=True, null=True)
    author = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    ip_address = models.GenericIPAddressField(blank=True, null=True)

    class Meta:
        verbose_name = "Audit"
        verbose_name_plural = "Audits"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["table", "created_at"], name="audit_table_created_idx"),
            models.Index(fields=["action", "created_at"], name="audit_action_created_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.created_at:%Y-%m-%d %H:%M:%S} | {self.table}:{self.record_id} | {self.action}"
