from boxexplorer.utils.debounce import Debouncer


def test_flush_runs_latest_arguments_once(qapp):
    calls = []
    debouncer = Debouncer(calls.append, 1000)

    debouncer.trigger(1)
    debouncer.trigger(2)
    assert debouncer.is_pending

    debouncer.flush()
    debouncer.flush()
    assert calls == [2]
    assert not debouncer.is_pending


def test_cancel_discards_pending_call(qapp):
    calls = []
    debouncer = Debouncer(lambda: calls.append(True), 1000)

    generation = debouncer.trigger()
    debouncer.cancel()
    debouncer.flush()

    assert calls == []
    assert debouncer.generation > generation


def test_stale_timeout_is_ignored(qapp):
    calls = []
    debouncer = Debouncer(lambda: calls.append(True), 1000)

    debouncer.trigger()
    debouncer.cancel()
    debouncer._fire()

    assert calls == []
