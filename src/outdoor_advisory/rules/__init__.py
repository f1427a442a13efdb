"""Rules for classifying forecast samples against activity profiles."""

from outdoor_advisory.rules.classifier import (
    EvaluationResult,
    SuitabilityClassifier,
    evaluate_sample,
)
from outdoor_advisory.rules.conditions import (
    REASONS,
    RuleResult,
    RuleType,
    rules_for_profile,
)

__all__ = [
    "SuitabilityClassifier",
    "EvaluationResult",
    "evaluate_sample",
    "REASONS",
    "RuleResult",
    "RuleType",
    "rules_for_profile",
]
