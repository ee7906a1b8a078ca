# -*- coding: utf-8 -*-

import os.path
import sys


def is_promise(value):
    """Check if an object can be observed like a Promise.

    Any object with callable `success` and `fail` attributes is accepted: a
    Deferred, its read-only Promise view, or a compatible third-party object.

    Returns:
        boolean: True if the value has both observer methods; False if not.
    """
    return (hasattr(getattr(value, 'success', None), '__call__') and
            hasattr(getattr(value, 'fail', None), '__call__'))


def infer_name(depth=2):
    """Find the name of a function in the call stack.

    Args:
        depth (int, optional): number of frames to go up, starting from the
            caller of `infer_name()`. The default is the caller's caller.
    Returns:
        str: name of the function, or '???' if the stack is not deep enough.
    """
    try:
        frame = sys._getframe(depth)
    except ValueError:
        return '???'
    return frame.f_code.co_name


def caller_location(depth=2):
    """Describe the place from where a function has been called.

    Args:
        depth (int, optional): number of frames to go up, starting from the
            caller of `caller_location()`.
    Returns:
        str: location in the form "file.py:42 in function_name".
    """
    try:
        frame = sys._getframe(depth)
    except ValueError:
        return '<unknown>'
    return '%s:%s in %s' % (os.path.basename(frame.f_code.co_filename),
                            frame.f_lineno, frame.f_code.co_name)
