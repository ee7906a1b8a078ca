# -*- coding: utf-8 -*-


class Promise(object):
    """Read-only view of a Deferred.

    The Promise is the "consumer" side of an asynchronous operation: it only
    allows to register callbacks, whereas the Deferred, held by the producer,
    can also resolve or reject the operation.

    The view shares the Deferred state: it's never a snapshot, and a callback
    registered after the outcome is known is called immediately.
    """

    def __init__(self, deferred):
        self._deferred = deferred

    @property
    def name(self):
        return self._deferred.name

    def success(self, callback):
        """Register a callback called when the operation succeeds.

        Args:
            callback (callable): will receive the values given to
                `Deferred.resolve()` as positional arguments.
        Returns:
            Promise: self, to allow chaining.
        """
        self._deferred.success(callback)
        return self

    def fail(self, callback):
        """Register a callback called when the operation fails.

        Args:
            callback (callable): will receive the values given to
                `Deferred.reject()` as positional arguments.
        Returns:
            Promise: self, to allow chaining.
        """
        self._deferred.fail(callback)
        return self

    def __repr__(self):
        return 'Promise(%s)' % self._deferred._inner_print()
