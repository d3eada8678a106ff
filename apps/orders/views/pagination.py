from ..serializers import OrderSerializer

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


def paginated_orders(request, queryset):
    """Slice an order queryset by pageIndex (0-based) and pageSize"""
    try:
        page_index = max(int(request.GET.get('pageIndex', 0)), 0)
        page_size = min(max(int(request.GET.get('pageSize', DEFAULT_PAGE_SIZE)), 1), MAX_PAGE_SIZE)
    except ValueError:
        page_index, page_size = 0, DEFAULT_PAGE_SIZE

    total = queryset.count()
    start = page_index * page_size
    orders = queryset[start:start + page_size]
    return {
        'results': OrderSerializer(orders, many=True).data,
        'total': total,
        'pageIndex': page_index,
        'pageSize': page_size,
    }


def parse_flag(value):
    """'true'/'false' query parameter to bool, anything else to None"""
    if value is None:
        return None
    value = value.strip().lower()
    if value in ('true', '1'):
        return True
    if value in ('false', '0'):
        return False
    return None
