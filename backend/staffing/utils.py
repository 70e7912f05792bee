from datetime import date, datetime
from typing import Any, Optional

from django.conf import settings

# =========================
# Helpers
# =========================

def _parse_date(value: Any) -> Optional[date]:
    """Normaliza a entrada como date.

    Aceita `date`, `datetime` ou string ISO (`YYYY-MM-DD`, com ou sem hora).
    A string inteira precisa ser válida; retorna None caso contrário.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    try:
        if len(text) == 10:
            return date.fromisoformat(text)
        return datetime.fromisoformat(text).date()
    except ValueError:
        return None

def _get_setting(name: str, default: Any = None) -> Any:
    """Obtém uma configuração do Django settings com um valor padrão."""
    return getattr(settings, name, default)
