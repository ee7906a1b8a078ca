# -*- coding: utf-8 -*-

import pytest

from pledge import (Deferred, UsageError, after_all, after_all_seq,
                    forgiving_after_all, rejected, resolved)


class Recorder(object):

    def __init__(self):
        self.calls = []

    def __call__(self, *args):
        self.calls.append(args)


def fail_test(*args):
    pytest.fail('This callback should never be called: %r' % (args,))


class ThinPromise(object):
    """Third-party promise whose observer methods return None."""

    def __init__(self):
        self._callbacks = []
        self._errbacks = []

    def success(self, callback):
        self._callbacks.append(callback)

    def fail(self, callback):
        self._errbacks.append(callback)

    def resolve(self, *args):
        for callback in self._callbacks:
            callback(*args)

    def reject(self, *args):
        for errback in self._errbacks:
            errback(*args)


class TestResolvedRejected(object):

    def test_resolved(self):
        cb = Recorder()
        resolved('abc').success(cb).fail(fail_test)
        assert cb.calls == [('abc',)]

    def test_resolved_multiple_values(self):
        cb = Recorder()
        resolved(1, 2, 3).success(cb)
        assert cb.calls == [(1, 2, 3)]

    def test_rejected(self):
        errback = Recorder()
        rejected('abc').success(fail_test).fail(errback)
        assert errback.calls == [('abc',)]

    def test_returns_read_only_view(self):
        assert not hasattr(resolved(1), 'resolve')
        assert not hasattr(rejected(1), 'reject')


class TestAfterAll(object):

    def test_after_all(self):
        expected = [['a', '6'], ['f', 'ksdf', 'jjr'], [1, 2, 3, 5]]
        cb = Recorder()
        after_all([resolved(*values) for values in expected]) \
            .success(cb).fail(fail_test)
        assert cb.calls == [(expected,)]

    def test_order_by_index_not_by_completion(self):
        d0, d1, d2 = Deferred(), Deferred(), Deferred()
        cb = Recorder()
        after_all([d0.promise(), d1.promise(), d2.promise()]).success(cb)

        d2.resolve(1, 2, 3)
        d0.resolve('a', '6')
        assert cb.calls == []
        d1.resolve('f')
        assert cb.calls == [([['a', '6'], ['f'], [1, 2, 3]],)]

    def test_empty_list(self):
        cb = Recorder()
        after_all([]).success(cb).fail(fail_test)
        assert cb.calls == [([],)]

    def test_first_failure_wins(self):
        d0, d1, d2 = Deferred(), Deferred(), Deferred()
        errback = Recorder()
        after_all([d0, d1, d2]).success(fail_test).fail(errback)

        d0.resolve('ok')
        d1.reject('first error', 42)
        d2.reject('second error')
        assert errback.calls == [('first error', 42)]

    def test_failure_then_success(self):
        errback = Recorder()
        err = ValueError('oops')
        d = Deferred()
        after_all([resolved(1), rejected(err), d.promise()]) \
            .success(fail_test).fail(errback)
        d.resolve(2)
        assert errback.calls == [(err,)]

    def test_accepts_tuple(self):
        cb = Recorder()
        after_all((resolved(1), resolved(2))).success(cb)
        assert cb.calls == [([[1], [2]],)]

    def test_invalid_argument(self):
        with pytest.raises(UsageError):
            after_all(resolved(1))
        with pytest.raises(UsageError):
            after_all([resolved(1), 'not a promise'])

    def test_third_party_promises(self):
        first, second = ThinPromise(), ThinPromise()
        cb = Recorder()
        after_all([first, second]).success(cb).fail(fail_test)
        second.resolve(2)
        first.resolve(1)
        assert cb.calls == [([[1], [2]],)]

    def test_third_party_promise_failure(self):
        thin = ThinPromise()
        errback = Recorder()
        after_all([thin, Deferred()]).success(fail_test).fail(errback)
        thin.reject('error')
        assert errback.calls == [('error',)]

    def test_context(self):
        events = []

        class Ctx(object):
            def enter(self):
                events.append('enter')

            def exit(self):
                events.append('exit')

        after_all([resolved(1)], context=Ctx()) \
            .success(lambda r: events.append('callback'))
        assert events == ['enter', 'exit', 'enter', 'callback', 'exit']


class TestForgivingAfterAll(object):

    def test_one_failure(self):
        cb = Recorder()
        forgiving_after_all([resolved('a'), rejected('error'),
                             resolved('b', 'c'), resolved()]) \
            .success(cb).fail(fail_test)
        assert cb.calls == [([['a'], None, ['b', 'c'], []],)]

    def test_all_failures(self):
        cb = Recorder()
        forgiving_after_all([rejected(1), rejected(2)]) \
            .success(cb).fail(fail_test)
        assert cb.calls == [([None, None],)]

    def test_waits_for_all_promises(self):
        d0, d1 = Deferred(), Deferred()
        cb = Recorder()
        forgiving_after_all([d0, d1]).success(cb)
        d1.reject('error')
        assert cb.calls == []
        d0.resolve('value')
        assert cb.calls == [([['value'], None],)]

    def test_empty_list(self):
        cb = Recorder()
        forgiving_after_all([]).success(cb)
        assert cb.calls == [([],)]

    def test_invalid_argument(self):
        with pytest.raises(UsageError):
            forgiving_after_all({'a': resolved(1)})

    def test_third_party_promises(self):
        ok, ko = ThinPromise(), ThinPromise()
        cb = Recorder()
        forgiving_after_all([ok, ko]).success(cb)
        ko.reject('error')
        ok.resolve('value')
        assert cb.calls == [([['value'], None],)]


class TestAfterAllSeq(object):

    def test_all_success(self):
        cb = Recorder()
        after_all_seq([lambda: resolved('a', '6'),
                       lambda: resolved('f'),
                       lambda: resolved(1, 2, 3)]) \
            .success(cb).fail(fail_test)
        assert cb.calls == [([['a', '6'], ['f'], [1, 2, 3]],)]

    def test_sequential_execution(self):
        calls = []
        deferreds = [Deferred(), Deferred(), Deferred()]

        def factory(index):
            def f():
                calls.append(index)
                return deferreds[index].promise()
            return f

        cb = Recorder()
        after_all_seq([factory(0), factory(1), factory(2)]).success(cb)

        assert calls == [0]
        deferreds[0].resolve('r0')
        assert calls == [0, 1]
        deferreds[1].resolve('r1')
        assert calls == [0, 1, 2]
        assert cb.calls == []
        deferreds[2].resolve('r2')
        assert cb.calls == [([['r0'], ['r1'], ['r2']],)]

    def test_stops_at_later_failure(self):
        calls = []
        deferreds = [Deferred(), Deferred(), Deferred()]

        def factory(index):
            def f():
                calls.append(index)
                return deferreds[index].promise()
            return f

        errback = Recorder()
        after_all_seq([factory(0), factory(1), factory(2)]) \
            .success(fail_test).fail(errback)

        deferreds[0].resolve('r0')
        assert calls == [0, 1]
        deferreds[1].reject('error')
        assert calls == [0, 1]
        assert errback.calls == [('error',)]

    def test_third_party_promise(self):
        thin = ThinPromise()
        cb = Recorder()
        after_all_seq([lambda: thin]).success(cb)
        thin.resolve('done')
        assert cb.calls == [([['done']],)]

    def test_stops_at_first_failure(self):
        calls = []
        errback = Recorder()

        def f0():
            calls.append(0)
            return resolved('ok')

        def f1():
            calls.append(1)
            return rejected('error', 'details')

        def f2():
            calls.append(2)
            return resolved('never')

        after_all_seq([f0, f1, f2]).success(fail_test).fail(errback)
        assert calls == [0, 1]
        assert errback.calls == [('error', 'details')]

    def test_empty_list(self):
        cb = Recorder()
        after_all_seq([]).success(cb).fail(fail_test)
        assert cb.calls == [([],)]

    def test_list_not_modified(self):
        functions = [lambda: resolved(1), lambda: resolved(2)]
        after_all_seq(functions)
        assert len(functions) == 2

    def test_function_raising_exception(self):
        err = ValueError('oops')
        errback = Recorder()

        def f():
            raise err

        after_all_seq([f]).success(fail_test).fail(errback)
        assert errback.calls == [(err,)]

    def test_function_not_returning_promise(self):
        errback = Recorder()
        after_all_seq([lambda: 42]).success(fail_test).fail(errback)
        assert len(errback.calls) == 1
        assert isinstance(errback.calls[0][0], UsageError)

    def test_long_synchronous_sequence(self):
        cb = Recorder()
        after_all_seq([lambda: resolved(i) for i in range(5000)]) \
            .success(cb)
        assert len(cb.calls[0][0]) == 5000

    def test_invalid_argument(self):
        with pytest.raises(UsageError):
            after_all_seq(lambda: resolved(1))
        with pytest.raises(UsageError):
            after_all_seq([resolved(1)])
