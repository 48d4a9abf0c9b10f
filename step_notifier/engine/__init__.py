from step_notifier.engine.classify import OutcomeClassifier, classify
from step_notifier.engine.reporter import ExecutionUnit, ScenarioReporter
from step_notifier.engine.translate import translate, translate_close

__all__ = [
    "ExecutionUnit",
    "OutcomeClassifier",
    "ScenarioReporter",
    "classify",
    "translate",
    "translate_close",
]
