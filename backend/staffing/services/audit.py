from __future__ import annotations

import json
from typing import Any, Dict, Iterable, Optional

from django.contrib.auth.models import User
from django.core.serializers.json import DjangoJSONEncoder
from django.forms.models import model_to_dict

from core.middleware import get_current_ip, get_current_user
from staffing.domain.models import AuditLog

# FKs viram IDs e datas viram string ISO; tudo cabe no JSONField
SNAPSHOT_EXCLUDE = ("id",)

def snapshot_instance(instance, *, fields: Optional[Iterable[str]] = None) -> Dict[str, Any]:
    """Estado serializável de uma instância, para os campos before/after do AuditLog."""
    if fields:
        data = model_to_dict(instance, fields=list(fields))
    else:
        data = model_to_dict(instance, exclude=list(SNAPSHOT_EXCLUDE))
    return json.loads(json.dumps(data, cls=DjangoJSONEncoder))

def audit(
    action: str,
    instance, *,
    before: Optional[Dict[str, Any]] = None,
    after: Optional[Dict[str, Any]] = None,
    author: Optional[User] = None,
) -> AuditLog:
    """Grava uma linha de auditoria.

    Autor e IP vêm do thread-local da requisição (CurrentUserMiddleware e
    permissões da API). Fora de uma requisição (Celery, comandos, testes de
    serviço) ambos ficam nulos.

    Args:
        action (str): "create", "update", "delete" ou uma ação de domínio como "swap_executed".
        instance (Django Model): O registro afetado; define tabela e ID.
        before (Optional[Dict[str, Any]], optional): Snapshot anterior. Defaults to None.
        after (Optional[Dict[str, Any]], optional): Snapshot posterior. Defaults to None.
        author (Optional[User], optional): Força o autor. Defaults to the request user.

    Returns:
        AuditLog: A linha criada.
    """
    user = author or get_current_user()
    return AuditLog.objects.create(
        action=action,
        table=instance._meta.db_table,
        record_id=str(instance.pk),
        before=before,
        after=after,
        author=user if user is not None and user.is_authenticated else None,
        ip_address=get_current_ip(),
    )
