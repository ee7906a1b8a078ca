# -*- coding: utf-8 -*-


class UsageError(Exception):
    """A pledge function has been called with malformed arguments.

    It's always raised synchronously to the caller, and never transmitted
    through a rejection.
    """
    pass
