"""
Pagination classes for DRF.
"""

from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response


class StandardResultsPagination(PageNumberPagination):
    """
    Page-number pagination with a client-controlled page size.

    Query parameters:
    - page: Page number (default: 1)
    - page_size: Number of results per page (default: 20, max: 100)

    The response carries ``total_pages`` and ``current_page`` next to the
    usual ``count``/``next``/``previous``/``results`` keys.
    """

    page_size = 20
    page_size_query_param = "page_size"
    max_page_size = 100
    page_query_param = "page"

    def get_paginated_response(self, data):
        return Response(
            {
                "count": self.page.paginator.count,
                "total_pages": self.page.paginator.num_pages,
                "current_page": self.page.number,
                "next": self.get_next_link(),
                "previous": self.get_previous_link(),
                "results": data,
            }
        )

    def get_paginated_response_schema(self, schema):
        response_schema = super().get_paginated_response_schema(schema)
        response_schema["properties"]["total_pages"] = {"type": "integer", "example": 3}
        response_schema["properties"]["current_page"] = {"type": "integer", "example": 1}
        return response_schema
