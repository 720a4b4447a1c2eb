"""Registry of the business objects served by the generic record endpoints"""
import logging

from backend.metadata.pluralize import get_singular_label, get_plural_label
from .exceptions import UnknownObjectCode

logger = logging.getLogger(__name__)


class ObjectType:
    """
    How one object code maps onto a model.

    prepare_create(data, company, user) and prepare_update(instance, data)
    may rewrite the payload before validation and raise
    RecordValidationError. can_delete(instance) returns None when the record
    may be deleted, otherwise the refusal message.
    """

    def __init__(self, code, model, serializer_class, label=None, default_sort='name',
                 sortable_fields=None, search_fields=(), select_related=(),
                 prepare_create=None, prepare_update=None, can_delete=None):
        self.code = code
        self.model = model
        self.serializer_class = serializer_class
        self.label = label or get_singular_label(code)
        self.plural_label = get_plural_label(code)
        self.default_sort = default_sort
        self.sortable_fields = tuple(sortable_fields or (default_sort,))
        self.search_fields = tuple(search_fields)
        self.select_related = tuple(select_related)
        self.prepare_create = prepare_create
        self.prepare_update = prepare_update
        self.can_delete = can_delete

    def __repr__(self):
        return f"<ObjectType {self.code}>"


class ObjectRegistry:
    def __init__(self):
        self._types = {}

    def register(self, object_type):
        if object_type.code in self._types:
            logger.debug("Replacing registration of %s", object_type.code)
        self._types[object_type.code] = object_type
        return object_type

    def unregister(self, code):
        self._types.pop(code, None)

    def get(self, code):
        try:
            return self._types[code]
        except KeyError:
            raise UnknownObjectCode(code)

    def __contains__(self, code):
        return code in self._types

    def codes(self):
        return sorted(self._types)

    def all(self):
        return [self._types[code] for code in self.codes()]


registry = ObjectRegistry()
