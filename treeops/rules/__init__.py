"""Business rules engine for TreeScore pricing."""

from .engine import apply_business_rules, iter_rule_steps
from .models import RuleContext, RuleEffect
from .registry import BusinessRule, RuleRegistry, default_registry
from .thresholds import RuleThresholds

__all__ = [
    "apply_business_rules",
    "iter_rule_steps",
    "BusinessRule",
    "RuleContext",
    "RuleEffect",
    "RuleRegistry",
    "RuleThresholds",
    "default_registry",
]
