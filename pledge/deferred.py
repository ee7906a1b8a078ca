# -*- coding: utf-8 -*-

from collections import deque
import logging

from .common import config
from .context import scoped
from .errors import UsageError
from .promise import Promise
from .util import caller_location, infer_name

_logger = logging.getLogger(__name__)


class Deferred(object):
    """Single-assignment result of an operation expected to end later.

    A Deferred is the "producer" side of an asynchronous operation. The
    producer calls `resolve()` or `reject()` once the operation is done; the
    consumers register callbacks with `success()` and `fail()`, before or
    after the outcome is known. Consumers should receive the read-only view
    returned by `promise()`.

    The outcome is fixed by the first call to `resolve()` or `reject()`. All
    subsequent calls are ignored.

    Callbacks registered before the outcome is known are called in the order
    of registration. A callback registered after (or while the callbacks are
    being executed) is called immediately, so it may run before callbacks
    registered earlier.

    Attributes:
        name (str): label used in logs. It has no effect on the behavior.
    """

    UNSET = 'unset'
    SUCCESS = 'success'
    FAILURE = 'failure'

    def __init__(self, name=None, context=None):
        """Constructor of the Deferred.

        Args:
            name (str, optional): label used in logs. By default, the name of
                the function creating the Deferred.
            context (optional): execution context, with `enter()` and `exit()`
                methods. It's entered around each callback execution.
        """
        self.name = infer_name() if name is None else name
        self._context = context

        self._outcome = self.UNSET
        self._payload = ()
        self._firing = False
        self._fired = False

        self._callbacks = deque()
        self._errbacks = deque()

        self._promise = Promise(self)

    @property
    def outcome(self):
        """One of `Deferred.UNSET`, `Deferred.SUCCESS`, `Deferred.FAILURE`."""
        return self._outcome

    @property
    def payload(self):
        """tuple: values given to the call who fixed the outcome."""
        return self._payload

    def resolve(self, *args):
        """Set the operation as successful.

        All success callbacks are called with `args`. Does nothing if the
        outcome is already fixed.

        Returns:
            Deferred: self
        """
        return self._fire(self._callbacks, self.SUCCESS, args)

    def reject(self, *args):
        """Set the operation as failed.

        All failure callbacks are called with `args`. Does nothing if the
        outcome is already fixed.

        Returns:
            Deferred: self
        """
        # Calls on a settled Deferred change nothing.
        level = logging.DEBUG if self._firing or self._fired \
            else logging.WARNING
        if config.get('trace_rejections'):
            _logger.log(level, '%s called reject on [%s]',
                        caller_location(), self.name)
        else:
            _logger.log(level, 'reject called on [%s]', self.name)
        return self._fire(self._errbacks, self.FAILURE, args)

    def success(self, callback):
        """Register a callback called if the operation succeeds.

        Args:
            callback (callable): called with the values passed to `resolve()`.
        Returns:
            Deferred: self
        """
        return self._add_callback(callback, self._callbacks, self.SUCCESS)

    def fail(self, callback):
        """Register a callback called if the operation fails.

        Args:
            callback (callable): called with the values passed to `reject()`.
        Returns:
            Deferred: self
        """
        return self._add_callback(callback, self._errbacks, self.FAILURE)

    def promise(self):
        """Returns the read-only view of this Deferred.

        Returns:
            Promise: a view exposing only `success()` and `fail()`.
        """
        return self._promise

    def guard(self, *args, **kwargs):
        """Execute a function, and reject the Deferred if it raises an error.

        The form is chosen by the number of positional arguments:
        - `guard(fn)` calls `fn()`.
        - `guard(context, fn, *fn_args)` calls `fn(context, *fn_args)`, the
          context taking the place of the receiver (`self`) of `fn`. If the
          context is None, `fn(*fn_args)` is called.
        Keywords arguments are passed to `fn`.

        If `fn` raises an exception, the Deferred is rejected with the
        exception as its only value.

        Returns:
            Deferred: self
        Raises:
            UsageError: if there is no callable at the expected position.
        """
        if len(args) == 1:
            block, block_args = args[0], ()
        elif len(args) >= 2:
            block, block_args = args[1], args[2:]
            if args[0] is not None:
                block_args = (args[0],) + block_args
        else:
            block, block_args = None, ()

        if not callable(block):
            raise UsageError('Deferred.guard() requires a callable. '
                             'Received a %s' % type(block).__name__)

        with scoped(self._context):
            try:
                block(*block_args, **kwargs)
            except Exception as error:
                _logger.warning('Guarded block of [%s] raised an exception',
                                self.name, exc_info=True)
                self.reject(error)
        return self

    def _fire(self, callbacks, outcome, args):
        if self._firing or self._fired:
            return self

        with scoped(self._context):
            # payload and outcome must be set before firing.
            self._payload = args
            self._outcome = outcome
            self._firing = True
            try:
                while callbacks:
                    self._exec_callback(callbacks.popleft())
            finally:
                self._fired = True
                self._firing = False

                # Free the references
                self._callbacks.clear()
                self._errbacks.clear()
        return self

    def _add_callback(self, callback, callbacks, outcome):
        if not (self._firing or self._fired):
            callbacks.append(callback)
        elif self._outcome == outcome:
            with scoped(self._context):
                self._exec_callback(callback)
        return self

    def _exec_callback(self, callback):
        try:
            callback(*self._payload)
        except Exception:
            _logger.exception('Exception raised in %s callback of [%s]',
                              self._outcome, self.name)

    def _inner_print(self):
        if self._outcome == self.SUCCESS:
            state = 'S'
        elif self._outcome == self.FAILURE:
            state = 'F'
        else:
            state = 'U'
        return '%s %s' % (self.name, state)

    def __repr__(self):
        return 'Deferred(%s)' % self._inner_print()
