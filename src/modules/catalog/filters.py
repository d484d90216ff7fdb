import django_filters

from modules.catalog.models import Electronic


class ElectronicFilter(django_filters.FilterSet):
    category = django_filters.CharFilter(field_name="category", lookup_expr="iexact")
    brand = django_filters.CharFilter(field_name="brand", lookup_expr="iexact")
    in_stock = django_filters.BooleanFilter(field_name="in_stock")
    min_price = django_filters.NumberFilter(field_name="price", lookup_expr="gte")
    max_price = django_filters.NumberFilter(field_name="price", lookup_expr="lte")

    class Meta:
        model = Electronic
        fields = ["category", "brand", "in_stock", "min_price", "max_price"]
