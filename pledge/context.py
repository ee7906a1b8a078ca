# -*- coding: utf-8 -*-

"""Execution context hooks.

A Deferred can be associated to an execution context: any object having an
`enter()` and an `exit()` method. The context is entered before callbacks are
dispatched, and exited after, so that context-sensitive facilities (like
scoped diagnostics) see the right active scope during the callback execution.

The core only calls the hook; what it does is up to the host application.
`DiagnosticScope` is an implementation tagging log records with the name of
the active scope.
"""

from contextlib import contextmanager
import logging
import threading


@contextmanager
def scoped(context):
    """Enter the execution context for the duration of the `with` block.

    `exit()` is always called, even if the block raises an exception.

    Args:
        context: object with `enter()` and `exit()` methods. If None, the
            block is executed without context.
    """
    if context is None:
        yield
        return

    context.enter()
    try:
        yield
    finally:
        context.exit()


class DiagnosticScope(object):
    """Execution context naming the logical operation being executed.

    Scopes can be nested. Each thread has its own stack of active scopes.
    """

    _local = threading.local()

    def __init__(self, name):
        self.name = name

    @classmethod
    def _stack(cls):
        stack = getattr(cls._local, 'stack', None)
        if stack is None:
            stack = cls._local.stack = []
        return stack

    @classmethod
    def current(cls):
        """Returns the innermost active scope of this thread, or None."""
        stack = cls._stack()
        return stack[-1] if stack else None

    def enter(self):
        self._stack().append(self)

    def exit(self):
        stack = self._stack()
        if stack and stack[-1] is self:
            stack.pop()
        elif self in stack:
            # Unbalanced exit; drop this scope and all its inner scopes.
            del stack[stack.index(self):]

    def __repr__(self):
        return 'DiagnosticScope(%s)' % self.name


class ScopeFilter(logging.Filter):
    """Logging filter who adds the active scope name to the records.

    The name is available as `%(scope)s` in the format strings. It's '-' when
    no scope is active.
    """

    def filter(self, record):
        scope = DiagnosticScope.current()
        record.scope = scope.name if scope else '-'
        return True
