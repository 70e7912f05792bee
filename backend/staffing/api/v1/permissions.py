from rest_framework.permissions import BasePermission

from core.middleware import set_current_user
from staffing.domain.repositories import MemberRepository

class IsMember(BasePermission):
    """Usuário autenticado e ligado a um Member."""
    message = "Aucun intervenant n'est associé à ce compte."

    def has_permission(self, request, view):
        # o usuário do DRF (sessão ou basic auth) passa a ser o autor da auditoria
        set_current_user(request.user)
        member = MemberRepository.for_user(request.user)
        request.member = member
        return member is not None

class IsAdministrator(IsMember):
    """Membro com papel ADMIN (ou conta staff do Django)."""
    message = "Réservé aux administrateurs."

    def has_permission(self, request, view):
        if not super().has_permission(request, view):
            return False
        return request.member.is_admin or bool(request.user.is_staff)
