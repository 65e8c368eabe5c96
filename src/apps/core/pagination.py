"""Pagination shared by every list endpoint."""

from django.conf import settings
from rest_framework.pagination import PageNumberPagination


class StandardPagination(PageNumberPagination):  # type: ignore[misc]
    """Page-number pagination; clients pick the page size with `per_page`."""

    page_size = settings.API_PAGE_SIZE
    page_size_query_param = "per_page"
    max_page_size = settings.API_MAX_PAGE_SIZE


class PriceHistoryPagination(StandardPagination):  # type: ignore[misc]
    page_size = 20
