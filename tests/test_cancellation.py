from core.cancellation import CancelToken, ScanRegistry


def test_token_starts_clear():
    token = CancelToken()
    assert not token.cancelled
    token.cancel()
    assert token.cancelled


def test_new_scan_cancels_previous_of_same_caller():
    registry = ScanRegistry()
    first = registry.begin('client-1')
    second = registry.begin('client-1')

    assert first.cancelled
    assert not second.cancelled
    assert registry.active('client-1') is second


def test_callers_are_independent():
    registry = ScanRegistry()
    a = registry.begin('a')
    registry.begin('b')
    assert not a.cancelled
    assert len(registry) == 2


def test_finish_ignores_superseded_token():
    registry = ScanRegistry()
    first = registry.begin('a')
    second = registry.begin('a')

    registry.finish('a', first)
    assert registry.active('a') is second

    registry.finish('a', second)
    assert registry.active('a') is None


def test_cancel_explicitly():
    registry = ScanRegistry()
    token = registry.begin('a')

    assert registry.cancel('a') is True
    assert token.cancelled
    assert registry.cancel('a') is False
