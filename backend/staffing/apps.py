from __future__ import annotations

import logging
from typing import List

from django.apps import AppConfig
from django.core.checks import Error, Tags, register

from staffing.utils import _get_setting

log = logging.getLogger(__name__)

# =========================
# System checks (validações de settings)
# =========================

def _validate_positive_int(value, setting_name: str, error_id: str, *, upper: int | None = None) -> List[Error]:
    if not isinstance(value, int) or value < 0 or (upper is not None and value > upper):
        bound = f" e <= {upper}" if upper is not None else ""
        return [
            Error(
                f"{setting_name} deve ser um inteiro >= 0{bound}. Valor atual: {value!r}",
                id=error_id,
            )
        ]
    return []

@register(Tags.compatibility)
def staffing_settings_check(app_configs, **kwargs):
    """Garante que os settings essenciais estejam válidos."""
    errors: List[Error] = []

    limit = _get_setting("NOTIFICATION_LIST_LIMIT", 50)
    errors += _validate_positive_int(limit, "NOTIFICATION_LIST_LIMIT", "staffing.E001")
    if not errors and limit < 1:
        errors.append(Error("NOTIFICATION_LIST_LIMIT deve ser >= 1.", id="staffing.E001"))

    errors += _validate_positive_int(
        _get_setting("REMINDER_HOUR", 8), "REMINDER_HOUR", "staffing.E002", upper=23
    )

    if not _get_setting("DEFAULT_FROM_EMAIL"):
        errors.append(Error("DEFAULT_FROM_EMAIL não pode ser vazio.", id="staffing.E003"))

    return errors

# =========================
# AppConfig
# =========================

class StaffingConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'staffing'
    verbose_name = "Planning des intervenants"

    def ready(self):
        """Conecta signals do domínio de forma segura."""
        try:
            # importa e registra os signals (auditoria de Member, Service, Assignment, Availability, SwapRequest)
            from .domain import signals  # noqa: F401
        except Exception:  # pragma: no cover
            log.exception("Falha ao importar staffing.domain.signals")
