# backend/pagination.py

from rest_framework.pagination import PageNumberPagination


class StandardPagination(PageNumberPagination):
    """
    Page-number pagination with a client-controlled page size.

    ?page=2&page_size=50 (capped at max_page_size)
    """

    page_size = 20
    page_size_query_param = "page_size"
    max_page_size = 100
