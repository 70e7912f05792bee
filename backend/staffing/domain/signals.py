from __future__ import annotations

from django.db.models.signals import post_save, post_delete, pre_save
from django.dispatch import receiver

from .models import Availability, Member, Service, ServiceAssignment, SwapRequest
from staffing.services.audit import audit, snapshot_instance

# =========================
# Helpers
# =========================

def _capture_before(sender, instance) -> None:
    """Guarda o snapshot anterior na instância, para comparação em post_save."""
    if not instance.pk:
        instance._before_snapshot = None
        return
    try:
        old = sender.objects.get(pk=instance.pk)
        instance._before_snapshot = snapshot_instance(old)
    except sender.DoesNotExist:
        instance._before_snapshot = None

def _audit_saved(instance, created: bool) -> None:
    action = "create" if created else "update"
    audit(action, instance, before=getattr(instance, "_before_snapshot", None), after=snapshot_instance(instance))

# ========= Assignment =========

@receiver(pre_save, sender=ServiceAssignment)
def _assignment_pre_save(sender, instance: ServiceAssignment, **kwargs) -> None:
    _capture_before(sender, instance)

@receiver(post_save, sender=ServiceAssignment)
def _assignment_post_save(sender, instance: ServiceAssignment, created: bool, **kwargs) -> None:
    _audit_saved(instance, created)

@receiver(post_delete, sender=ServiceAssignment)
def _assignment_post_delete(sender, instance: ServiceAssignment, **kwargs) -> None:
    audit("delete", instance, before=snapshot_instance(instance), after=None)

# ========= Service =========

@receiver(pre_save, sender=Service)
def _service_pre_save(sender, instance: Service, **kwargs):
    _capture_before(sender, instance)

@receiver(post_save, sender=Service)
def _service_post_save(sender, instance: Service, created: bool, **kwargs):
    _audit_saved(instance, created)

@receiver(post_delete, sender=Service)
def _service_post_delete(sender, instance: Service, **kwargs):
    audit("delete", instance, before=snapshot_instance(instance), after=None)

# ======== Availability ========

@receiver(pre_save, sender=Availability)
def _availability_pre_save(sender, instance: Availability, **kwargs):
    _capture_before(sender, instance)

@receiver(post_save, sender=Availability)
def _availability_post_save(sender, instance: Availability, created: bool, **kwargs):
    _audit_saved(instance, created)

@receiver(post_delete, sender=Availability)
def _availability_post_delete(sender, instance: Availability, **kwargs):
    audit("delete", instance, before=snapshot_instance(instance), after=None)

# ======== Member ========

@receiver(pre_save, sender=Member)
def _member_pre_save(sender, instance: Member, **kwargs):
    _capture_before(sender, instance)

@receiver(post_save, sender=Member)
def _member_post_save(sender, instance: Member, created: bool, **kwargs):
    _audit_saved(instance, created)

@receiver(post_delete, sender=Member)
def _member_post_delete(sender, instance: Member, **kwargs):
    audit("delete", instance, before=snapshot_instance(instance), after=None)

# ======== SwapRequest ========
# Transições de status usam UPDATE condicional (sem signal); aqui só a criação
# e edições feitas pelo admin do Django.

@receiver(pre_save, sender=SwapRequest)
def _swap_pre_save(sender, instance: SwapRequest, **kwargs):
    _capture_before(sender, instance)

@receiver(post_save, sender=SwapRequest)
def _swap_post_save(sender, instance: SwapRequest, created: bool, **kwargs):
    _audit_saved(instance, created)
