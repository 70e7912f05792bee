from __future__ import annotations
import threading
from typing import Optional, Any
import json
import logging
import uuid

_local = threading.local()

SENSITIVE_KEYS = {"password", "passwd", "mot_de_passe", "token", "authorization", "csrfmiddlewaretoken"}

def get_current_user() -> Optional[Any]:
    """Retorna o usuário atual armazenado no thread-local, ou None se não houver."""
    return getattr(_local, "user", None)

def set_current_user(user) -> None:
    """Atualiza o usuário do thread-local.

    A autenticação do DRF roda depois dos middlewares; as permissões da API
    chamam isto para que a auditoria enxergue o usuário autenticado por ela.
    """
    _local.user = user if user is not None and user.is_authenticated else None

def get_current_ip() -> Optional[str]:
    return getattr(_local, "ip", None)

def _client_ip(request):
    xff = request.META.get("HTTP_X_FORWARDED_FOR")
    if xff:
        return xff.split(",")[0].strip()
    return request.META.get("REMOTE_ADDR")

def _redact_mapping(data):
    out = {}
    try:
        items = (data or {}).items()
    except AttributeError:
        return {}
    for k, v in items:
        if str(k).lower() in SENSITIVE_KEYS:
            out[k] = "***redacted***"
        else:
            out[k] = v if isinstance(v, (str, int, float, bool, type(None))) else str(v)
    return out


class CurrentUserMiddleware:
    """Guarda o usuário autenticado e o IP do cliente num thread-local.

    Lido pelos signals de auditoria, que não recebem o request.
    """
    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        set_current_user(getattr(request, "user", None))
        _local.ip = _client_ip(request)
        try:
            return self.get_response(request)
        finally:
            _local.user = None
            _local.ip = None

class ErrorLoggingMiddleware:
    """Registra exceções não tratadas e respostas 5xx com o contexto da requisição.

    Também propaga o cabeçalho X-Request-ID na resposta.
    """
    def __init__(self, get_response):
        self.get_response = get_response
        self.logger = logging.getLogger("django.request")

    def __call__(self, request):
        req_id = request.META.get("HTTP_X_REQUEST_ID") or str(uuid.uuid4())
        request._request_id = req_id
        try:
            response = self.get_response(request)
        except Exception:
            self._log_exception(request)
            raise
        if getattr(response, "status_code", 200) >= 500:
            self._log_5xx(request, response)
        response["X-Request-ID"] = req_id
        return response

    def _build_context(self, request):
        body_excerpt = None
        if "application/json" in request.META.get("CONTENT_TYPE", ""):
            try:
                body_excerpt = (request.body or b"")[:2048].decode("utf-8", errors="replace")
            except Exception:
                # corpo já consumido pelo parser
                body_excerpt = "<unavailable>"

        user = getattr(request, "user", None)
        username = (user.get_username() or "<unavailable>") if user and user.is_authenticated else "Anonymous"

        return {
            "id": getattr(request, "_request_id", None),
            "method": request.method,
            "path": request.get_full_path(),
            "ip": _client_ip(request),
            "user": username,
            "ua": request.META.get("HTTP_USER_AGENT", ""),
            "get": _redact_mapping(getattr(request, "GET", {})),
            "json_body_excerpt": body_excerpt,
        }

    def _log_exception(self, request):
        self.logger.error(
            "Unhandled exception | ctx=%s",
            json.dumps(self._build_context(request), ensure_ascii=False),
            exc_info=True,
        )

    def _log_5xx(self, request, response):
        ctx = self._build_context(request)
        ctx["status_code"] = getattr(response, "status_code", None)
        self.logger.error("5xx response | ctx=%s", json.dumps(ctx, ensure_ascii=False))
