# -*- coding: utf-8 -*-

from functools import wraps

from .combinators import rejected, resolved
from .deferred import Deferred
from .util import is_promise


def wrap_promise(f):
    """Decorator who converts the result in a Promise object.

    If the function decorated returns a promise, it's transmitted as is.
    Else, a new promise is resolved with the returned value. If the function
    raises an exception, the promise is rejected with it.
    """
    @wraps(f)
    def wrapper(*args, **kwargs):
        try:
            result = f(*args, **kwargs)
        except Exception as error:
            return rejected(error)
        if is_promise(result):
            return result
        return resolved(result)

    return wrapper


def guarded(f):
    """Decorator giving a new Deferred to a producer function.

    The decorated function receives a Deferred as first argument, followed by
    the call arguments. It's executed through `Deferred.guard()`: if it raises
    an exception, the Deferred is rejected with it.
    The caller receives the Promise of the Deferred.
    """
    @wraps(f)
    def wrapper(*args, **kwargs):
        df = Deferred(name=f.__name__)
        df.guard(df, f, *args, **kwargs)
        return df.promise()

    return wrapper
