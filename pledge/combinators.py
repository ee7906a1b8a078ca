# -*- coding: utf-8 -*-

"""Functions creating or combining promises.

All functions returns the read-only `Promise` view of a new Deferred.
"""

from collections import deque
from functools import partial
import logging

from .deferred import Deferred
from .errors import UsageError
from .util import is_promise

_logger = logging.getLogger(__name__)


def _check_promises(promises, func_name):
    if not isinstance(promises, (list, tuple)):
        raise UsageError('%s() requires a list of promises. Received a %s'
                         % (func_name, type(promises).__name__))
    for p in promises:
        if not is_promise(p):
            raise UsageError('%s() requires a list of promises. Received a '
                             'list containing a %s'
                             % (func_name, type(p).__name__))


def resolved(*args):
    """Create a promise already fulfilled with the values passed in argument.

    Returns:
        Promise: new promise already resolved.
    """
    return Deferred(name='RESOLVED').resolve(*args).promise()


def rejected(*args):
    """Create a promise already rejected with the values passed in argument.

    Returns:
        Promise: new promise already rejected.
    """
    return Deferred(name='REJECTED').reject(*args).promise()


def after_all(promises, context=None):
    """Create a Promise who wait a list of promises to be all fulfilled.

    The resulting promise resolves when all the promises of the list are
    resolved. Its only value is a list containing, for each promise and
    keeping the order of the promise list, the list of values the promise has
    been resolved with.

    If a promise is rejected, the resulting promise is rejected with the same
    values, and the results of the other promises are ignored.

    Args:
        promises (list of Promise)
        context (optional): execution context of the resulting Deferred.
    Returns:
        Promise<list>: resulting promise.
    Raises:
        UsageError: if `promises` is not a list of promises.
    """
    _check_promises(promises, 'after_all')
    promises = list(promises)

    df = Deferred(name='AFTER_ALL', context=context)
    results = [None] * len(promises)
    remaining = len(promises)

    if not promises:
        return df.resolve(results).promise()

    def resolve_one_promise(index, *args):
        nonlocal remaining
        results[index] = list(args)
        remaining -= 1
        if remaining == 0:
            df.resolve(results)

    for index, p in enumerate(promises):
        p.success(partial(resolve_one_promise, index))
        p.fail(df.reject)

    return df.promise()


def forgiving_after_all(promises, context=None):
    """Create a Promise who wait a list of promises to be all settled.

    Like `after_all()`, except that a rejected promise doesn't reject the
    resulting promise: `None` is stored at its position in the result list.
    The resulting promise is never rejected.

    Args:
        promises (list of Promise)
        context (optional): execution context of the resulting Deferred.
    Returns:
        Promise<list>: resulting promise.
    Raises:
        UsageError: if `promises` is not a list of promises.
    """
    _check_promises(promises, 'forgiving_after_all')
    promises = list(promises)

    df = Deferred(name='FORGIVING_AFTER_ALL', context=context)
    results = [None] * len(promises)
    remaining = len(promises)

    if not promises:
        return df.resolve(results).promise()

    def settle_one_promise(index, value):
        nonlocal remaining
        results[index] = value
        remaining -= 1
        if remaining == 0:
            df.resolve(results)

    def on_success(index, *args):
        settle_one_promise(index, list(args))

    def on_failure(index, *args):
        _logger.debug('Promise #%s failed in forgiving_after_all(): %r',
                      index, args)
        settle_one_promise(index, None)

    for index, p in enumerate(promises):
        p.success(partial(on_success, index))
        p.fail(partial(on_failure, index))

    return df.promise()


def after_all_seq(functions, context=None):
    """Execute promise factories one after the other.

    Each function of the list is called without argument, and must return a
    promise. The next function is called only when the promise returned by the
    previous one is resolved.

    The resulting promise is resolved with a list containing, in order of
    execution, the values of each promise. If a promise is rejected, the
    resulting promise is rejected with the same values, and the remaining
    functions are not called.

    Args:
        functions (list of callable): functions returning a Promise.
        context (optional): execution context of the resulting Deferred.
    Returns:
        Promise<list>: resulting promise.
    Raises:
        UsageError: if `functions` is not a list of callables.
    """
    if not isinstance(functions, (list, tuple)):
        raise UsageError('after_all_seq() requires a list of functions. '
                         'Received a %s' % type(functions).__name__)
    for f in functions:
        if not callable(f):
            raise UsageError('after_all_seq() requires a list of functions. '
                             'Received a list containing a %s'
                             % type(f).__name__)

    df = Deferred(name='AFTER_ALL_SEQ', context=context)
    results = []
    pending = deque(functions)

    def wait_for(promise):
        """Register the callbacks on the promise.

        Returns:
            boolean: True if the promise has been resolved synchronously.
        """
        status = {'sync': True, 'resolved': False}

        def on_success(*args):
            results.append(list(args))
            if status['sync']:
                status['resolved'] = True
            else:
                execute_next_functions()

        promise.success(on_success)
        promise.fail(df.reject)
        status['sync'] = False
        return status['resolved']

    def execute_next_functions():
        # Promises resolved synchronously are consumed in this loop, to not
        # grow the stack with each function.
        while pending:
            f = pending.popleft()
            try:
                promise = f()
            except Exception as error:
                _logger.warning('Function %s raised an exception in '
                                'after_all_seq()',
                                getattr(f, '__name__', '???'), exc_info=True)
                df.reject(error)
                return
            if not is_promise(promise):
                df.reject(UsageError('after_all_seq(): function %s returned '
                                     'a %s instead of a promise'
                                     % (getattr(f, '__name__', '???'),
                                        type(promise).__name__)))
                return
            if not wait_for(promise):
                return
        df.resolve(results)

    execute_next_functions()
    return df.promise()
