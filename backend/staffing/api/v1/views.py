import logging

from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from rest_framework import status

from staffing.domain.exceptions import (
    InvalidTransition,
    NotAllowed,
    NotFound,
    PersistenceError,
    SwapError,
    ValidationError,
)
from staffing.domain.models import SwapStatus
from staffing.domain.repositories import SwapRequestRepository
from staffing.services import notifications
from staffing.services.swaps import Actor, create_swap_request, transition_swap_request

from .filters import SwapRequestFilter
from .permissions import IsAdministrator, IsMember
from .serializers import (
    NotificationSerializer,
    SwapCreateSerializer,
    SwapDecisionSerializer,
    SwapRequestSerializer,
)

log = logging.getLogger(__name__)

ERROR_STATUS = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    InvalidTransition: status.HTTP_400_BAD_REQUEST,
    NotAllowed: status.HTTP_403_FORBIDDEN,
    NotFound: status.HTTP_404_NOT_FOUND,
    PersistenceError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

def _error_response(err: SwapError) -> Response:
    code = ERROR_STATUS.get(type(err), status.HTTP_400_BAD_REQUEST)
    if code >= 500:
        log.error("Falha de persistência na API: %s", err)
        return Response({"detail": "Erreur interne, veuillez réessayer."}, status=code)
    return Response({"detail": str(err)}, status=code)

# =========================
# Swap requests (intervenant)
# =========================

@api_view(["GET", "POST"])
@permission_classes([IsAuthenticated, IsMember])
def user_swap_requests(request):
    member = request.member
    if request.method == "GET":
        qs = SwapRequestRepository.involving(member)
        return Response(SwapRequestSerializer(qs, many=True).data)

    payload = SwapCreateSerializer(data=request.data)
    if not payload.is_valid():
        return Response(payload.errors, status=status.HTTP_400_BAD_REQUEST)
    data = payload.validated_data
    try:
        result = create_swap_request(
            member.pk,
            data["service_id"],
            data["date"],
            to_member_id=data.get("to_member_id"),
            message=data.get("message"),
        )
    except SwapError as e:
        return _error_response(e)
    if isinstance(result, list):
        return Response({"available_members": [c.to_dict() for c in result]})
    return Response(SwapRequestSerializer(result).data, status=status.HTTP_201_CREATED)

@api_view(["PUT"])
@permission_classes([IsAuthenticated, IsMember])
def user_swap_request_detail(request, swap_id: int):
    payload = SwapDecisionSerializer(data=request.data)
    if not payload.is_valid():
        return Response(payload.errors, status=status.HTTP_400_BAD_REQUEST)
    try:
        swap = transition_swap_request(
            swap_id, Actor.COUNTERPART, payload.validated_data["status"], actor=request.member
        )
    except SwapError as e:
        return _error_response(e)
    return Response(SwapRequestSerializer(swap).data)

# =========================
# Swap requests (administrador)
# =========================

@api_view(["GET"])
@permission_classes([IsAuthenticated, IsAdministrator])
def admin_swap_requests(request):
    params = request.query_params.copy()
    params.setdefault("status", SwapStatus.ACCEPTED.value)
    f = SwapRequestFilter(params, queryset=SwapRequestRepository.all_detailed())
    if not f.is_valid():
        return Response(f.errors, status=status.HTTP_400_BAD_REQUEST)
    return Response(SwapRequestSerializer(f.qs, many=True).data)

@api_view(["PUT"])
@permission_classes([IsAuthenticated, IsAdministrator])
def admin_swap_request_detail(request, swap_id: int):
    payload = SwapDecisionSerializer(data=request.data)
    if not payload.is_valid():
        return Response(payload.errors, status=status.HTTP_400_BAD_REQUEST)
    try:
        swap = transition_swap_request(
            swap_id, Actor.ADMINISTRATOR, payload.validated_data["status"], actor=request.member
        )
    except SwapError as e:
        return _error_response(e)
    return Response(SwapRequestSerializer(swap).data)

# =========================
# Notifications
# =========================

@api_view(["GET"])
@permission_classes([IsAuthenticated, IsMember])
def notification_list(request):
    limit_raw = request.query_params.get("limit")
    try:
        limit = int(limit_raw) if limit_raw is not None else None
        if limit is not None and limit < 1:
            raise ValueError(limit)
    except ValueError:
        return Response({"detail": "Le paramètre 'limit' doit être un entier >= 1."}, status=status.HTTP_400_BAD_REQUEST)
    items = notifications.list_for_member(request.member, limit=limit)
    return Response(NotificationSerializer(items, many=True).data)

@api_view(["POST"])
@permission_classes([IsAuthenticated, IsMember])
def notification_read(request, notification_id: int):
    try:
        n = notifications.mark_read(notification_id, request.member)
    except SwapError as e:
        return _error_response(e)
    return Response(NotificationSerializer(n).data)

@api_view(["POST"])
@permission_classes([IsAuthenticated, IsMember])
def notification_read_all(request):
    count = notifications.mark_all_read(request.member)
    return Response({"updated": count})
