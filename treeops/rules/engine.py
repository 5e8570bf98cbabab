"""Core rules evaluation engine.

The rules are folded left over a single :class:`RuleEffect`, starting from
the pre-rules base cost. Later rules see the cost produced by earlier ones.
"""
from __future__ import annotations

import logging
from collections.abc import Iterator
from functools import reduce

from . import ruleset
from .models import RuleContext, RuleEffect
from .registry import BusinessRule, RuleRegistry, default_registry

logger = logging.getLogger(__name__)


def _resolve_rules(registry: RuleRegistry | None) -> tuple[BusinessRule, ...]:
    if registry is None:
        # ensure default registry is populated
        ruleset.register_default_rules(default_registry)
        registry = default_registry
    return registry.active_rules()


def iter_rule_steps(
    context: RuleContext,
    base_cost: float,
    registry: RuleRegistry | None = None,
) -> Iterator[tuple[BusinessRule, RuleEffect]]:
    """Yield each rule together with the accumulator after it ran."""
    effect = RuleEffect(cost=base_cost)
    for rule in _resolve_rules(registry):
        effect = rule(context, effect)
        yield rule, effect


def apply_business_rules(
    context: RuleContext,
    base_cost: float,
    registry: RuleRegistry | None = None,
) -> RuleEffect:
    """Evaluate every active rule in order and return the final accumulator."""
    rules = _resolve_rules(registry)
    effect = reduce(
        lambda current, rule: rule(context, current),
        rules,
        RuleEffect(cost=base_cost),
    )
    logger.debug(
        f"Applied {len(effect.applied_rules)} of {len(rules)} pricing rules: "
        f"{base_cost:.2f} -> {effect.cost:.2f}"
    )
    return effect
