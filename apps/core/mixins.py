from .responses import success_response


class EnvelopeListMixin:
    """Paginate a queryset and wrap the page in the standard envelope."""
    list_message = "Records retrieved successfully"

    def paginated_response(self, queryset, serializer_class=None, message=None):
        serializer_class = serializer_class or self.get_serializer_class()
        page = self.paginate_queryset(queryset)
        if page is None:
            data = serializer_class(queryset, many=True, context=self.get_serializer_context()).data
            return success_response(data, message or self.list_message)
        data = serializer_class(page, many=True, context=self.get_serializer_context()).data
        return self.paginator.get_paginated_response(data, message or self.list_message)
