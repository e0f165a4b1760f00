"""
Pagination utilities for the project.

``DefaultPagination`` is the project-wide DRF paginator.
``RegistrationPagination`` serves the admin registration listing, which
is driven by ``page``/``limit`` query parameters and reports its page
metadata under a ``pagination`` key.
"""
import math

from rest_framework.exceptions import NotFound
from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response


class DefaultPagination(PageNumberPagination):
    """A simple page number paginator with a default page size."""
    page_size = 20


class RegistrationPagination(PageNumberPagination):
    """Page/limit paginator that answers a page past the end with an empty list."""

    page_size = 10
    page_size_query_param = "limit"
    max_page_size = 100

    def paginate_queryset(self, queryset, request, view=None):
        try:
            rows = super().paginate_queryset(queryset, request, view)
        except NotFound:
            requested = request.query_params.get(self.page_query_param, "")
            if not requested.isdigit() or int(requested) < 1:
                raise
            self.request = request
            self.page = None
            self._paginator = self.django_paginator_class(queryset, self.get_page_size(request))
            self._page_number = int(requested)
            return []
        if rows is not None:
            self._paginator = self.page.paginator
            self._page_number = self.page.number
        return rows

    def get_paginated_response(self, data):
        limit = self._paginator.per_page
        total = self._paginator.count
        return Response({
            "registrations": data,
            "pagination": {
                "page": self._page_number,
                "limit": limit,
                "total": total,
                "pages": math.ceil(total / limit) if limit else 0,
            },
        })
