from django.urls import path
from .views import (
    user_swap_requests,
    user_swap_request_detail,
    admin_swap_requests,
    admin_swap_request_detail,
    notification_list,
    notification_read,
    notification_read_all,
)

urlpatterns = [
    path("user/swap-requests/", user_swap_requests, name="api_user_swaps"),
    path("user/swap-requests/<int:swap_id>/", user_swap_request_detail, name="api_user_swap_detail"),
    path("admin/swap-requests/", admin_swap_requests, name="api_admin_swaps"),
    path("admin/swap-requests/<int:swap_id>/", admin_swap_request_detail, name="api_admin_swap_detail"),
    path("notifications/", notification_list, name="api_notifications"),
    path("notifications/<int:notification_id>/read/", notification_read, name="api_notification_read"),
    path("notifications/read-all/", notification_read_all, name="api_notifications_read_all"),
]
