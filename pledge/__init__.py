# -*- coding: utf-8 -*-

from .__version__ import __version__  # noqa

from .combinators import (after_all, after_all_seq, forgiving_after_all,
                          rejected, resolved)
from .context import DiagnosticScope, ScopeFilter, scoped
from .decorators import guarded, wrap_promise
from .deferred import Deferred
from .errors import UsageError
from .promise import Promise
from .util import is_promise

__all__ = ['Deferred', 'Promise', 'UsageError', 'DiagnosticScope',
           'ScopeFilter', 'after_all', 'after_all_seq', 'forgiving_after_all',
           'guarded', 'is_promise', 'rejected', 'resolved', 'scoped',
           'wrap_promise']
