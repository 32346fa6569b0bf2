"""
Manual ordering of menu collections.

Categories, menu items and special offers all carry an integer ``order``
field. ``OrderedCollectionStore`` owns the persisted values: new rows are
appended after the current maximum and drag-and-drop results are written back
as one atomic batch. ``ReorderController`` turns a single drag gesture into
the new visible sequence right away and hands the batch write to an executor,
so the caller never waits on the database.

Gaps in ``order`` are harmless, only the relative order matters. A move
renumbers the whole visible collection from 0, which closes any gaps.
"""
import copy
import logging
import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from functools import partial

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured, ValidationError
from django.db import DatabaseError, connections, transaction
from django.db.models import Max

from .exceptions import NotFound, PartialWriteRejected, StoreUnavailable
from .models import CollectionSequence

logger = logging.getLogger(__name__)


# =============== STORE ===============

class OrderedCollectionStore:
    """Persistence for one ordered collection, generic over the model class"""

    def __init__(self, model):
        self.model = model

    @property
    def collection(self):
        return self.model._meta.db_table

    def get_queryset(self):
        return self.model._default_manager.all()

    def list_ordered(self, queryset=None):
        """All entities ascending by order. No pagination, collections are small."""
        if queryset is None:
            queryset = self.get_queryset()
        try:
            return list(queryset.order_by('order'))
        except DatabaseError as exc:
            raise StoreUnavailable(f"Could not read {self.collection}: {exc}") from exc

    def append(self, entity):
        """
        Save a new entity at the end of the collection (max order + 1, or 1 when empty).
        The collection's sequence row is locked for the duration so concurrent
        appends on databases with row locks get distinct values.
        """
        with transaction.atomic():
            sequence, _ = CollectionSequence.objects.select_for_update().get_or_create(
                collection=self.collection
            )
            max_order = self.get_queryset().aggregate(max_order=Max('order'))['max_order'] or 0
            entity.order = max_order + 1
            entity.save()

            sequence.last_value = entity.order
            sequence.save(update_fields=['last_value', 'updated_at'])

        logger.info(f"Appended {self.collection} {entity.pk} at order {entity.order}")
        return entity

    def reassign_order(self, pairs):
        """Apply every (id, order) pair or none of them"""
        pairs = [(entity_id, order) for entity_id, order in pairs]
        if not pairs:
            return

        for entity_id, order in pairs:
            if isinstance(order, bool) or not isinstance(order, int) or order < 0:
                raise PartialWriteRejected(
                    f"Invalid order {order!r} for {self.collection} {entity_id}", pairs
                )

        try:
            with transaction.atomic():
                queryset = self.get_queryset()
                for entity_id, order in pairs:
                    if not queryset.filter(pk=entity_id).update(order=order):
                        raise PartialWriteRejected(
                            f"{self.collection} {entity_id} no longer exists", pairs
                        )
        except (DatabaseError, ValidationError, ValueError) as exc:
            raise PartialWriteRejected(
                f"Batch reorder of {self.collection} rejected: {exc}", pairs
            ) from exc

        logger.info(f"Reassigned order of {len(pairs)} {self.collection}")

    def remove(self, entity_id):
        """Delete one entity. Remaining orders are left as they are."""
        deleted, _ = self.get_queryset().filter(pk=entity_id).delete()
        if deleted:
            logger.info(f"Removed {self.collection} {entity_id}")


class SpecialOfferStore(OrderedCollectionStore):

    def list_active(self, limit=3):
        return [offer for offer in self.list_ordered() if offer.is_active][:limit]


# =============== MOVE ===============

def _index_of(sequence, entity_id):
    key = str(entity_id)
    for index, element in enumerate(sequence):
        if str(element.id) == key:
            return index
    raise NotFound(f"{entity_id} is not in the current sequence")


def move(sequence, source_id, destination_id):
    """
    Single-element list move (not a swap).

    Returns ``(new_sequence, pairs)`` where every element of ``new_sequence`` is
    a shallow copy carrying its 0-based position as ``order``, or ``None`` when
    nothing moves: an id is missing (stale drag target) or source equals
    destination.
    """
    try:
        source_index = _index_of(sequence, source_id)
        destination_index = _index_of(sequence, destination_id)
    except NotFound as exc:
        logger.debug(f"Ignoring stale move: {exc}")
        return None

    if source_index == destination_index:
        return None

    reordered = list(sequence)
    reordered.insert(destination_index, reordered.pop(source_index))

    new_sequence = []
    for position, element in enumerate(reordered):
        element = copy.copy(element)
        element.order = position
        new_sequence.append(element)

    pairs = [(element.id, element.order) for element in new_sequence]
    return new_sequence, pairs


# =============== EXECUTORS ===============

class InlineExecutor(Executor):
    """Runs submitted work immediately on the calling thread"""

    def submit(self, fn, /, *args, **kwargs):
        future = Future()
        try:
            result = fn(*args, **kwargs)
        except Exception as exc:
            future.set_exception(exc)
        else:
            future.set_result(result)
        return future


class BackgroundExecutor(ThreadPoolExecutor):
    """Thread pool whose jobs release their database connections when done"""

    def submit(self, fn, /, *args, **kwargs):
        return super().submit(self._run, fn, *args, **kwargs)

    @staticmethod
    def _run(fn, *args, **kwargs):
        try:
            return fn(*args, **kwargs)
        finally:
            connections.close_all()


_background_executor = None
_executor_lock = threading.Lock()


def get_reorder_executor():
    global _background_executor

    dispatch = getattr(settings, 'MENUBOARD_REORDER_DISPATCH', 'thread')
    if dispatch == 'inline':
        return InlineExecutor()
    if dispatch != 'thread':
        raise ImproperlyConfigured(
            f"MENUBOARD_REORDER_DISPATCH must be 'thread' or 'inline', got {dispatch!r}"
        )

    with _executor_lock:
        if _background_executor is None:
            _background_executor = BackgroundExecutor(
                max_workers=getattr(settings, 'MENUBOARD_REORDER_WORKERS', 2),
                thread_name_prefix='menuboard-reorder',
            )
        return _background_executor


# =============== CONTROLLER ===============

class ReorderController:
    """
    Optimistic drag-and-drop reordering.

    ``handle_move`` returns the new sequence without waiting for the write. A
    failed write is only logged: the persisted order stays as it was and the
    next ``list_ordered()`` shows it. Writes from rapid successive moves are
    not sequenced, so the batch that reaches the database last wins.
    """

    def __init__(self, store, executor=None):
        self.store = store
        self.executor = executor or get_reorder_executor()

    def handle_move(self, current_sequence, source_id, destination_id):
        result = move(current_sequence, source_id, destination_id)
        if result is None:
            return current_sequence

        new_sequence, pairs = result
        future = self.executor.submit(self.store.reassign_order, pairs)
        future.add_done_callback(partial(self._report_failure, pairs))
        return new_sequence

    def _report_failure(self, pairs, future):
        if future.cancelled():
            logger.error(f"Background reorder of {self.store.collection} was cancelled (pairs={pairs})")
            return
        exc = future.exception()
        if exc is not None:
            logger.error(
                f"Background reorder of {self.store.collection} failed, "
                f"persisted order is stale: {exc} (pairs={pairs})"
            )
