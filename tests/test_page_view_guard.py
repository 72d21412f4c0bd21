import threading

from page_view_guard import PageViewGuard


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now


def test_same_page_within_window_writes_once():
    clock = FakeClock()
    guard = PageViewGuard(clock=clock)
    writes = []

    assert guard.track("p1", "p1:/jane", lambda: writes.append(1)) is True
    clock.now += 30
    assert guard.track("p1", "p1:/jane", lambda: writes.append(1)) is False

    assert len(writes) == 1


def test_same_page_after_window_writes_again():
    clock = FakeClock()
    guard = PageViewGuard(clock=clock)
    writes = []

    guard.track("p1", "p1:/jane", lambda: writes.append(1))
    clock.now += 61
    guard.track("p1", "p1:/jane", lambda: writes.append(1))

    assert len(writes) == 2


def test_session_storage_survives_new_guard():
    clock = FakeClock()
    storage: dict[str, str] = {}
    writes = []

    PageViewGuard(session_storage=storage, clock=clock).track("p1", "p1:/jane", lambda: writes.append(1))
    clock.now += 5
    reloaded = PageViewGuard(session_storage=storage, clock=clock)

    assert reloaded.track("p1", "p1:/jane", lambda: writes.append(1)) is False
    assert len(writes) == 1
    assert PageViewGuard.session_key("p1") in storage


def test_new_session_tracks_again():
    clock = FakeClock()
    writes = []

    PageViewGuard(session_storage={}, clock=clock).track("p1", "p1:/jane", lambda: writes.append(1))
    PageViewGuard(session_storage={}, clock=clock).track("p1", "p1:/jane", lambda: writes.append(1))

    assert len(writes) == 2


def test_write_in_flight_suppresses_other_profiles():
    guard = PageViewGuard()
    started = threading.Event()
    release = threading.Event()
    results = {}

    def slow_write():
        started.set()
        release.wait(timeout=5)

    worker = threading.Thread(target=lambda: results.setdefault("first", guard.track("p1", "p1:/a", slow_write)))
    worker.start()
    assert started.wait(timeout=5)

    results["second"] = guard.track("p2", "p2:/b", lambda: None)
    release.set()
    worker.join(timeout=5)

    assert results == {"first": True, "second": False}
    assert guard.in_flight is False


def test_failed_write_is_reported_and_releases_flag():
    guard = PageViewGuard()

    def failing_write():
        raise RuntimeError("store unavailable")

    assert guard.track("p1", "p1:/jane", failing_write) is False
    assert guard.in_flight is False
    assert PageViewGuard.session_key("p1") not in guard.session_storage
