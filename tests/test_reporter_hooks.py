"""Hook outcomes, unit close and call-sequence errors."""
from __future__ import annotations

import logging

import pytest

from step_notifier.engine.reporter import ExecutionUnit, ScenarioReporter
from step_notifier.errors import AssumptionViolatedError, ExecutionUnitError, PendingError
from step_notifier.notify.sinks import RecordingSink
from step_notifier.replay import ScenarioDescriptions
from step_notifier.types import FAILED, PASSED, PENDING, SKIPPED, UNDEFINED, Result

# ─── Hooks ───


class TestHookStrict:
    def test_pending_hook_fails_scenario_immediately(self, strict_harness):
        strict_harness.hook(Result(PENDING, PendingError()))

        failures = strict_harness.failures()
        assert len(failures) == 1
        assert failures[0].description == strict_harness.scenario
        assert isinstance(failures[0].cause, PendingError)
        assert strict_harness.unit.scenario_failed is True

    def test_undefined_hook_gets_synthesized_pending(self, strict_harness):
        strict_harness.hook(Result(UNDEFINED))

        assert isinstance(strict_harness.failures()[0].cause, PendingError)

    def test_hook_never_touches_active_step(self, strict_harness):
        step = strict_harness.start_step()

        strict_harness.hook(Result(PENDING, PendingError()))

        assert strict_harness.verbs(step) == []
        assert strict_harness.unit.step_notifier is not None

    def test_assumption_hook_fails_scenario(self, strict_harness):
        error = AssumptionViolatedError("no database")

        strict_harness.hook(Result(FAILED, error))

        assert strict_harness.failures()[0].cause is error
        assert strict_harness.failures()[0].description == strict_harness.scenario

    def test_close_after_strict_pending_hook_emits_nothing(self, strict_harness):
        strict_harness.hook(Result(PENDING, PendingError()))
        strict_harness.close()

        assert strict_harness.verbs() == ["fail"]


class TestHookNonStrict:
    def test_pending_hook_is_deferred_until_close(self, harness):
        harness.hook(Result(PENDING, PendingError()))

        assert len(harness.sink) == 0
        assert harness.unit.deferred_ignore is True

        harness.close()

        assert [(n.verb, n.description) for n in harness.sink.notifications] == [
            ("ignore", harness.scenario),
        ]

    def test_undefined_hook_is_deferred(self, harness):
        harness.hook(Result(UNDEFINED))
        harness.close()

        assert harness.verbs(harness.scenario) == ["ignore"]

    def test_assumption_hook_is_deferred(self, harness):
        harness.hook(Result(FAILED, AssumptionViolatedError("no network")))
        harness.close()

        assert harness.verbs(harness.scenario) == ["ignore"]

    def test_failed_step_then_pending_hook_is_not_ignored(self, harness):
        harness.step(Result(FAILED, RuntimeError("boom")))
        harness.hook(Result(PENDING, PendingError()))
        harness.close()

        assert harness.verbs(harness.scenario) == ["fail"]

    def test_pending_hook_then_failed_step_is_not_ignored(self, harness):
        """A failure discovered after the hook still wins over the deferred ignore."""
        harness.hook(Result(PENDING, PendingError()))
        step = harness.start_step()
        harness.step(Result(FAILED, RuntimeError("boom")))
        harness.close()

        assert harness.sink.calls("ignore") == []
        assert harness.verbs(step) == ["fail"]

    def test_two_pending_hooks_ignore_once(self, harness):
        harness.hook(Result(PENDING, PendingError()))
        harness.hook(Result(UNDEFINED))
        harness.close()

        assert harness.verbs() == ["ignore"]

    def test_dropped_ignore_is_logged(self, harness, caplog):
        harness.step(Result(FAILED, RuntimeError("boom")))
        harness.hook(Result(PENDING, PendingError()))

        with caplog.at_level(logging.INFO, logger="step_notifier.engine.reporter"):
            harness.close()

        assert "dropping deferred ignore" in caplog.text


class TestOtherHookOutcomes:
    @pytest.mark.parametrize("strict", [False, True])
    def test_failed_hook_fails_scenario(self, harness_factory, strict):
        h = harness_factory(strict=strict)
        error = RuntimeError("after hook crashed")

        h.hook(Result(FAILED, error))
        h.close()

        assert h.verbs(h.scenario) == ["fail"]
        assert h.failures()[0].cause is error

    @pytest.mark.parametrize("strict", [False, True])
    @pytest.mark.parametrize("status", [PASSED, SKIPPED])
    def test_passed_and_skipped_hooks_are_silent(self, harness_factory, strict, status):
        h = harness_factory(strict=strict)

        h.hook(Result(status))
        h.close()

        assert len(h.sink) == 0
        assert h.unit is None


# ─── Unit lifecycle ───


class TestUnitLifecycle:
    def test_close_releases_unit(self, harness):
        unit = harness.unit
        harness.close()

        assert harness.reporter.unit is None
        assert unit.closed is True
        assert unit.deferred_ignore is False

    def test_close_with_failure_emits_nothing_regardless_of_deferred_ignore(self, harness):
        harness.step(Result(FAILED, RuntimeError("boom")))
        harness.unit.deferred_ignore = True
        count = len(harness.sink)

        harness.close()

        assert len(harness.sink) == count

    def test_units_do_not_share_state(self):
        reporter = ScenarioReporter()
        sink = RecordingSink()

        reporter.start_execution_unit(ScenarioDescriptions("first"), sink)
        reporter.step_result(Result(FAILED, RuntimeError("boom")))
        reporter.finish_execution_unit()

        reporter.start_execution_unit(ScenarioDescriptions("second"), sink)
        reporter.hook_result(Result(PENDING, PendingError()))
        reporter.finish_execution_unit()

        assert sink.verbs("second") == ["ignore"]

    def test_unit_can_be_built_directly(self):
        sink = RecordingSink()
        unit = ExecutionUnit.open(ScenarioDescriptions("direct"), sink)
        reporter = ScenarioReporter()
        reporter.unit = unit

        reporter.hook_result(Result(UNDEFINED))
        reporter.finish_execution_unit()

        assert sink.verbs() == ["ignore"]


class TestCallSequenceErrors:
    @pytest.mark.parametrize("call", [
        lambda r: r.step_started("step"),
        lambda r: r.step_result(Result(PASSED)),
        lambda r: r.hook_result(Result(PASSED)),
        lambda r: r.finish_execution_unit(),
    ])
    def test_calls_without_open_unit_raise(self, call):
        with pytest.raises(ExecutionUnitError):
            call(ScenarioReporter())

    def test_double_close_raises(self, harness):
        harness.close()
        with pytest.raises(ExecutionUnitError):
            harness.close()

    def test_opening_twice_raises(self, harness):
        with pytest.raises(ExecutionUnitError, match="still open"):
            harness.reporter.start_execution_unit(ScenarioDescriptions("other"), RecordingSink())

    def test_execution_unit_error_is_runtime_error(self):
        assert issubclass(ExecutionUnitError, RuntimeError)
