import django_filters

from modules.orders.constants import normalize_status
from modules.orders.models import Order


class OrderFilter(django_filters.FilterSet):
    status = django_filters.CharFilter(method="filter_status")
    school_name = django_filters.CharFilter(
        field_name="school_name", lookup_expr="icontains"
    )
    grade = django_filters.CharFilter(field_name="grade", lookup_expr="iexact")
    user = django_filters.NumberFilter(field_name="user_id")
    start_date = django_filters.DateFilter(
        field_name="created_at", lookup_expr="date__gte"
    )
    end_date = django_filters.DateFilter(
        field_name="created_at", lookup_expr="date__lte"
    )
    min_total = django_filters.NumberFilter(field_name="total", lookup_expr="gte")
    max_total = django_filters.NumberFilter(field_name="total", lookup_expr="lte")

    class Meta:
        model = Order
        fields = [
            "status",
            "school_name",
            "grade",
            "user",
            "start_date",
            "end_date",
            "min_total",
            "max_total",
        ]

    def filter_status(self, queryset, name, value):
        # Accepts English aliases; unknown tokens match nothing.
        canonical = normalize_status(value)
        if canonical is None:
            return queryset.none()
        return queryset.filter(status=canonical)
