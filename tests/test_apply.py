from unittest.mock import MagicMock

import pytest

from lambda_fleet_tool.apply import ApplyEngine, ItemState
from lambda_fleet_tool.models import UpgradePlanItem, UpgradeStatus

from .conftest import client_error


def item(name, change_runtime=True, change_layers=False, to_layers=None):
    return UpgradePlanItem(
        name=name,
        from_runtime="python3.9",
        to_runtime="python3.12",
        from_layers=("L0",),
        to_layers=to_layers,
        change_runtime=change_runtime,
        change_layers=change_layers,
    )


@pytest.fixture
def engine(lambda_mgr, clock):
    return ApplyEngine(lambda_mgr, timeout=10, initial_interval=1, max_interval=5, backoff=1.5,
                       sleep=clock.sleep, clock=clock)


def test_success_failure_timeout_in_order_and_strictly_sequential(lambda_mgr, clock):
    events = []

    def update(name, runtime=None, layers=None):
        events.append(("submit", name))
        if name == "two":
            raise client_error("InvalidParameterValueException", "runtime not allowed")
        return {"FunctionName": name, "Runtime": runtime}

    def get_config(name):
        events.append(("poll", name))
        if name == "one":
            return {"LastUpdateStatus": "Successful"}
        return {"LastUpdateStatus": "InProgress"}

    lambda_mgr.update_function_configuration.side_effect = update
    lambda_mgr.get_function_configuration.side_effect = get_config
    engine = ApplyEngine(lambda_mgr, timeout=3, initial_interval=1, max_interval=5,
                         sleep=clock.sleep, clock=clock)

    results = engine.apply([item("one"), item("two"), item("three")])

    assert [r.status for r in results] == [UpgradeStatus.SUCCESSFUL, UpgradeStatus.FAILED, UpgradeStatus.TIMEOUT]
    assert [r.name for r in results] == ["one", "two", "three"]
    assert results[1].reason == "runtime not allowed"
    assert "3s" in results[2].reason

    # item two was never polled and item three started only after two finished
    assert ("poll", "two") not in events
    assert events.index(("submit", "three")) > events.index(("submit", "two"))
    assert events.index(("submit", "two")) > events.index(("poll", "one"))
    assert engine.states == {
        "one": UpgradeStatus.SUCCESSFUL,
        "two": UpgradeStatus.FAILED,
        "three": UpgradeStatus.TIMEOUT,
    }


def test_one_result_per_item_even_when_submission_raises_unexpectedly(engine, lambda_mgr):
    lambda_mgr.update_function_configuration.side_effect = RuntimeError("connection reset")

    results = engine.apply([item("a"), item("b")])

    assert len(results) == 2
    assert all(r.status is UpgradeStatus.FAILED for r in results)
    assert results[0].reason == "connection reset"
    lambda_mgr.get_function_configuration.assert_not_called()


def test_runtime_and_layers_go_in_a_single_call(engine, lambda_mgr):
    engine.apply([item("a", change_runtime=True, change_layers=True, to_layers=("L1",))])

    lambda_mgr.update_function_configuration.assert_called_once_with("a", runtime="python3.12", layers=["L1"])


def test_layer_only_change_does_not_send_runtime(engine, lambda_mgr):
    engine.apply([item("a", change_runtime=False, change_layers=True, to_layers=("L1",))])

    lambda_mgr.update_function_configuration.assert_called_once_with("a", runtime=None, layers=["L1"])


def test_runtime_only_change_does_not_send_layers(engine, lambda_mgr):
    engine.apply([item("a", change_runtime=True, change_layers=False, to_layers=("L1",))])

    lambda_mgr.update_function_configuration.assert_called_once_with("a", runtime="python3.12", layers=None)


def test_remote_failure_carries_status_reason(engine, lambda_mgr):
    lambda_mgr.get_function_configuration.return_value = {
        "LastUpdateStatus": "Failed",
        "LastUpdateStatusReason": "Layer not compatible",
    }

    result = engine.apply_item(item("a"))

    assert result.status is UpgradeStatus.FAILED
    assert result.reason == "Layer not compatible"


def test_poll_error_fails_the_item(engine, lambda_mgr):
    lambda_mgr.get_function_configuration.side_effect = client_error("ServiceException", "try later")

    result = engine.apply_item(item("a"))

    assert result.status is UpgradeStatus.FAILED
    assert "try later" in result.reason


def test_poll_interval_backs_off_to_the_cap(lambda_mgr, clock):
    statuses = iter(["InProgress"] * 6 + ["Successful"])
    lambda_mgr.get_function_configuration.side_effect = lambda name: {"LastUpdateStatus": next(statuses)}
    engine = ApplyEngine(lambda_mgr, timeout=60, initial_interval=1, max_interval=5, backoff=1.5,
                         sleep=clock.sleep, clock=clock)

    status, reason = engine.wait_for_update("a")

    assert status is UpgradeStatus.SUCCESSFUL
    assert reason is None
    assert clock.sleeps == [1, 1.5, 2.25, 3.375, 5, 5]


def test_timeout_never_sleeps_past_the_deadline(lambda_mgr, clock):
    lambda_mgr.get_function_configuration.return_value = {"LastUpdateStatus": "InProgress"}
    engine = ApplyEngine(lambda_mgr, timeout=4, initial_interval=1, max_interval=5, backoff=1.5,
                         sleep=clock.sleep, clock=clock)

    status, reason = engine.wait_for_update("a")

    assert status is UpgradeStatus.TIMEOUT
    assert sum(clock.sleeps) == pytest.approx(4)
    assert reason == "No terminal update status after 4s"


def test_successful_result_reports_acknowledged_runtime(engine, lambda_mgr):
    lambda_mgr.update_function_configuration.return_value = {"FunctionName": "a", "Runtime": "python3.12"}

    result = engine.apply_item(item("a"))

    assert result.ok
    assert result.runtime == "python3.12"
    assert result.duration_seconds == 0


def test_callbacks_fire_around_each_item(engine):
    on_start, on_result = MagicMock(), MagicMock()

    engine.apply([item("a"), item("b")], on_start=on_start, on_result=on_result)

    assert [c.args[0].name for c in on_start.call_args_list] == ["a", "b"]
    assert [c.args[0].name for c in on_result.call_args_list] == ["a", "b"]


def test_pending_state_before_submission(engine, lambda_mgr):
    seen = {}

    def update(name, runtime=None, layers=None):
        seen[name] = engine.states[name]
        return {}

    lambda_mgr.update_function_configuration.side_effect = update
    engine.apply_item(item("a"))

    assert seen["a"] is ItemState.PENDING


def test_states_reset_between_runs(engine):
    engine.apply([item("a"), item("b")])
    engine.apply([item("c")])

    assert engine.states == {"c": UpgradeStatus.SUCCESSFUL}
