# pylint: disable=missing-module-docstring,missing-function-docstring

import asyncio

import pytest

from constants import MSG_REQUIRES_ANDROID_11, MSG_TAP_WIRELESS_DEBUGGING
from fakes import FakeClock, FakeDevice, FakePopup, capture_events, event_types
from navigation.presenter import NavigationFallbackPresenter
from navigation.targets import DEFAULT_TARGETS, NavigationTarget
from orchestrator.outcomes import Navigated, PopupShown


def make_targets(n: int) -> tuple[NavigationTarget, ...]:
    return tuple(
        NavigationTarget(label=f"t{i}", action=f"example.action.T{i}")
        for i in range(1, n + 1)
    )


def build(device: FakeDevice, targets=DEFAULT_TARGETS) -> tuple[NavigationFallbackPresenter, FakePopup]:
    popup = FakePopup()
    presenter = NavigationFallbackPresenter(
        launcher=device,
        popup=popup,
        targets=targets,
        session_id="sess_test",
    )
    return presenter, popup


@pytest.mark.parametrize("n,k", [(1, 1), (6, 1), (6, 3), (6, 6), (10, 7)])
def test_only_the_viable_candidate_is_launched(n: int, k: int):
    device = FakeDevice(FakeClock(), viable={f"t{k}"})
    presenter, popup = build(device, make_targets(n))

    result = asyncio.run(presenter.present())

    assert isinstance(result, Navigated)
    assert result.position == k
    assert result.target.label == f"t{k}"
    assert device.launched == [f"t{k}"]
    # Candidates after the winner are never checked
    assert device.resolved == [f"t{i}" for i in range(1, k + 1)]
    assert popup.shown == []
    assert device.developer_options_opened == 0


def test_first_viable_wins_when_several_are():
    device = FakeDevice(FakeClock(), viable={"t2", "t4"})
    presenter, _ = build(device, make_targets(5))

    result = asyncio.run(presenter.present())

    assert isinstance(result, Navigated)
    assert result.position == 2
    assert device.launched == ["t2"]


def test_no_viable_candidate_shows_popup(monkeypatch: pytest.MonkeyPatch):
    events = capture_events(monkeypatch)
    device = FakeDevice(FakeClock(), viable=set())
    presenter, popup = build(device)

    result = asyncio.run(presenter.present())

    assert result == PopupShown(message=MSG_TAP_WIRELESS_DEBUGGING)
    assert device.developer_options_opened == 1
    assert popup.shown == [(MSG_TAP_WIRELESS_DEBUGGING, 4.0)]
    assert device.launched == []
    assert "NAVIGATION_FALLBACK" in event_types(events)


def test_launch_exception_moves_to_next_candidate(monkeypatch: pytest.MonkeyPatch):
    events = capture_events(monkeypatch)
    device = FakeDevice(
        FakeClock(),
        viable={"t1", "t2", "t3"},
        resolve_raises={"t1"},
        launch_raises={"t2"},
    )
    presenter, _ = build(device, make_targets(3))

    result = asyncio.run(presenter.present())

    assert isinstance(result, Navigated)
    assert result.position == 3
    assert device.launched == ["t3"]
    assert event_types(events).count("NAVIGATION_ATTEMPT_FAILED") == 2


def test_every_candidate_failing_never_raises():
    class ExplodingDevice(FakeDevice):
        async def open_developer_options(self) -> None:
            raise RuntimeError("settings app missing")

    labels = {f"t{i}" for i in range(1, 7)}
    device = ExplodingDevice(FakeClock(), viable=labels, launch_raises=labels)
    presenter, popup = build(device, make_targets(6))

    result = asyncio.run(presenter.present())

    assert isinstance(result, PopupShown)
    assert len(popup.shown) == 1


def test_old_android_skips_candidates():
    device = FakeDevice(FakeClock(), sdk=29, viable={t.label for t in DEFAULT_TARGETS})
    presenter, popup = build(device)

    result = asyncio.run(presenter.present())

    assert result == PopupShown(message=MSG_REQUIRES_ANDROID_11)
    assert device.resolved == []
    assert device.developer_options_opened == 1
    assert popup.shown[0][0] == MSG_REQUIRES_ANDROID_11


def test_popup_auto_dismisses_and_can_be_dismissed_early():
    async def scenario() -> tuple[str, str]:
        device = FakeDevice(FakeClock())
        presenter = NavigationFallbackPresenter(
            launcher=device,
            popup=FakePopup(),
            targets=make_targets(1),
            popup_dismiss_ms=10,
        )
        await presenter.present()
        assert presenter.popup_handle is not None
        auto = await asyncio.wait_for(presenter.popup_handle.wait(), timeout=1.0)

        presenter2 = NavigationFallbackPresenter(
            launcher=device,
            popup=FakePopup(),
            targets=make_targets(1),
        )
        await presenter2.present()
        handle = presenter2.popup_handle
        assert handle is not None
        assert handle.dismiss("user") is True
        assert handle.dismiss("user") is False
        early = await handle.wait()
        return auto, early

    assert asyncio.run(scenario()) == ("timeout", "user")
