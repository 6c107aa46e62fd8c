import math

from django.core.paginator import Page
from rest_framework.pagination import PageNumberPagination

from .responses import success_response


class StandardPagination(PageNumberPagination):
    """Page/limit pagination with the list metadata clients expect."""
    page_size = 10
    page_size_query_param = 'limit'
    max_page_size = 100

    def get_page_size(self, request):
        raw = request.query_params.get(self.page_size_query_param)
        try:
            size = int(raw)
        except (TypeError, ValueError):
            return self.page_size
        return max(1, min(size, self.max_page_size))

    def get_page_number(self, request, paginator):
        try:
            number = int(request.query_params.get(self.page_query_param, 1))
        except (TypeError, ValueError):
            number = 1
        return max(1, number)

    def paginate_queryset(self, queryset, request, view=None):
        """
        Clamp the page to at least 1; a page past the end comes back empty
        with its metadata instead of raising.
        """
        self.request = request
        paginator = self.django_paginator_class(queryset, self.get_page_size(request))
        number = self.get_page_number(request, paginator)

        if number > paginator.num_pages:
            self.page = Page([], number, paginator)
        else:
            self.page = paginator.page(number)
        return list(self.page)

    def get_pagination_meta(self):
        total = self.page.paginator.count
        limit = self.page.paginator.per_page
        page = self.page.number
        total_pages = math.ceil(total / limit) if limit else 0
        return {
            'total': total,
            'page': page,
            'limit': limit,
            'totalPages': total_pages,
            'hasNextPage': page < total_pages,
            'hasPrevPage': page > 1,
        }

    def get_paginated_response(self, data, message="Success"):
        return success_response(data, message, meta={'pagination': self.get_pagination_meta()})
