from __future__ import annotations

from django.contrib import admin, messages

from staffing.domain.exceptions import SwapError
from staffing.domain.models import (
    Member,
    Availability,
    Service,
    ServiceAssignment,
    SwapRequest,
    SwapStatus,
    Notification,
    AuditLog,
)
from staffing.domain.repositories import MemberRepository
from staffing.services.swaps import Actor, transition_swap_request

# =========================
# Filtros utilitários
# =========================

class ShiftFilter(admin.SimpleListFilter):
    title = "Créneau"
    parameter_name = "shift"

    def lookups(self, request, model_admin):
        return [("morning", "Matin"), ("evening", "Soir")]

    def queryset(self, request, qs):
        v = self.value()
        if v == "morning":
            return qs.filter(time__hour__lt=12)
        elif v == "evening":
            return qs.filter(time__hour__gte=12)
        return qs

# =========================
# Inlines
# =========================

class AvailabilityInline(admin.TabularInline):
    model = Availability
    extra = 0
    fields = ("date", "status", "notes")
    classes = ("collapse",)

class AssignmentInline(admin.TabularInline):
    model = ServiceAssignment
    extra = 0
    fields = ("member", "role", "status", "created_by", "created_at")
    readonly_fields = ("created_at",)
    autocomplete_fields = ("member",)
    classes = ("collapse",)

# =========================
# Member
# =========================

@admin.register(Member)
class MemberAdmin(admin.ModelAdmin):
    list_display = ("last_name", "first_name", "email", "department", "role", "active")
    list_filter = ("role", "active", "department")
    search_fields = ("first_name", "last_name", "email", "phone")
    ordering = ("last_name", "first_name")
    list_per_page = 50
    inlines = (AvailabilityInline,)

    actions = ["activate_members", "deactivate_members"]

    @admin.action(description="Activer les intervenants sélectionnés")
    def activate_members(self, request, qs):
        qs.update(active=True)

    @admin.action(description="Désactiver les intervenants sélectionnés")
    def deactivate_members(self, request, qs):
        qs.update(active=False)

# =========================
# Availability
# =========================

@admin.register(Availability)
class AvailabilityAdmin(admin.ModelAdmin):
    list_display = ("member", "date", "status")
    list_filter = ("status",)
    search_fields = ("member__first_name", "member__last_name")
    date_hierarchy = "date"
    autocomplete_fields = ("member",)
    list_per_page = 50

# =========================
# Service
# =========================

@admin.register(Service)
class ServiceAdmin(admin.ModelAdmin):
    list_display = ("date", "time", "title", "location", "status", "confirmed_count")
    list_filter = ("status", ShiftFilter)
    search_fields = ("title", "location")
    date_hierarchy = "date"
    ordering = ("-date", "-time")
    list_per_page = 50
    inlines = (AssignmentInline,)

    @admin.display(description="Confirmés")
    def confirmed_count(self, obj: Service) -> int:
        return obj.assignments.filter(status="CONFIRMED").count()

# =========================
# ServiceAssignment
# =========================

@admin.register(ServiceAssignment)
class ServiceAssignmentAdmin(admin.ModelAdmin):
    list_display = ("service", "service_date", "member", "role", "status", "created_at")
    list_filter = ("status", "role")
    search_fields = ("service__title", "member__first_name", "member__last_name", "role")
    ordering = ("-created_at",)
    list_select_related = ("service", "member", "created_by")
    autocomplete_fields = ("service", "member")
    list_per_page = 50

    @admin.display(description="Date")
    def service_date(self, obj: ServiceAssignment):
        return obj.service.date

# =========================
# SwapRequest
# =========================

@admin.register(SwapRequest)
class SwapRequestAdmin(admin.ModelAdmin):
    list_display = ("id", "service", "date", "from_member", "to_member", "status", "decided_by", "created_at")
    list_filter = ("status",)
    search_fields = ("from_member__last_name", "to_member__last_name", "service__title")
    date_hierarchy = "date"
    ordering = ("-created_at",)
    list_select_related = ("service", "from_member", "to_member", "decided_by")
    readonly_fields = (
        "from_member", "to_member", "service", "date", "message",
        "status", "decided_by", "created_at", "updated_at",
    )
    list_per_page = 50

    actions = ["approve_swaps", "reject_swaps"]

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    def _decide(self, request, qs, target: str) -> None:
        actor = MemberRepository.for_user(request.user)
        done = 0
        for swap in qs:
            try:
                transition_swap_request(swap.pk, Actor.ADMINISTRATOR, target, actor=actor)
                done += 1
            except SwapError as e:
                self.message_user(request, f"#{swap.pk}: {e}", level=messages.ERROR)
        if done:
            self.message_user(request, f"{done} demande(s) traitée(s).", level=messages.SUCCESS)

    @admin.action(description="Approuver les échanges sélectionnés")
    def approve_swaps(self, request, qs):
        self._decide(request, qs, SwapStatus.ADMIN_APPROVED)

    @admin.action(description="Rejeter les échanges sélectionnés")
    def reject_swaps(self, request, qs):
        self._decide(request, qs, SwapStatus.ADMIN_REJECTED)

# =========================
# Notification
# =========================

@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ("member", "type", "title", "read", "created_at")
    list_filter = ("type", "read")
    search_fields = ("member__last_name", "title")
    readonly_fields = ("member", "type", "title", "message", "data", "created_at")
    ordering = ("-created_at",)
    list_per_page = 50

# =========================
# AuditLog
# =========================

@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ("action", "table", "record_id", "created_at", "author")
    list_filter = ("table", "action")
    search_fields = ("table", "record_id", "author__username")
    readonly_fields = ("action", "table", "record_id", "before", "after", "author", "created_at")
    date_hierarchy = "created_at"
    ordering = ("-created_at",)
    list_per_page = 50
