import django_filters

from staffing.domain.models import SwapRequest, SwapStatus

class SwapRequestFilter(django_filters.FilterSet):
    status = django_filters.ChoiceFilter(choices=SwapStatus.choices)
    date_from = django_filters.DateFilter(field_name="date", lookup_expr="gte")
    date_to = django_filters.DateFilter(field_name="date", lookup_expr="lte")
    service = django_filters.NumberFilter(field_name="service_id")

    class Meta:
        model = SwapRequest
        fields = ["status", "service"]
