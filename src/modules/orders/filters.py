import django_filters

from modules.orders.models import Order


class OrderFilter(django_filters.FilterSet):
    status = django_filters.CharFilter(field_name="status", lookup_expr="iexact")
    delivery_date = django_filters.DateFilter(field_name="delivery_date")
    delivery_from = django_filters.DateFilter(
        field_name="delivery_date", lookup_expr="gte"
    )
    delivery_to = django_filters.DateFilter(
        field_name="delivery_date", lookup_expr="lte"
    )
    created_from = django_filters.DateFilter(
        field_name="created_at", lookup_expr="date__gte"
    )
    created_to = django_filters.DateFilter(
        field_name="created_at", lookup_expr="date__lte"
    )

    class Meta:
        model = Order
        fields = [
            "status",
            "delivery_date",
            "delivery_from",
            "delivery_to",
            "created_from",
            "created_to",
        ]
