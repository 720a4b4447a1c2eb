"""
Cache invalidation signals
Field type maps are dropped whenever a field definition changes
"""
from django.db.models.signals import post_save, post_delete
from django.dispatch import receiver
import logging
import threading
from contextlib import contextmanager

from .models import FieldDefinition
from .services import invalidate_field_cache

logger = logging.getLogger(__name__)

# Thread-local storage to track signal suspension
_thread_locals = threading.local()


@contextmanager
def suspend_cache_signals():
    """
    Temporarily suspend cache invalidation signals for bulk operations.
    Remember to invalidate the cache manually after the block!
    """
    try:
        _thread_locals.suspended = True
        yield
    finally:
        _thread_locals.suspended = False


def is_suspended():
    return getattr(_thread_locals, 'suspended', False)


@receiver([post_save, post_delete], sender=FieldDefinition)
def invalidate_field_definition_cache(sender, instance, **kwargs):
    """Invalidate the field type maps of the definition's object"""
    if is_suspended():
        return
    try:
        invalidate_field_cache(instance.object_code)
    except Exception as e:
        logger.warning(f"Error in invalidate_field_definition_cache signal: {e}")
