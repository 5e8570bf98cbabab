"""Job pricing floor rules."""

from __future__ import annotations

from treeops.rules.models import RuleContext, RuleEffect


def minimum_job_size_rule(context: RuleContext, effect: RuleEffect) -> RuleEffect:
    """Raise the running cost to the minimum job price.

    Only the cost at this point in the rule order is floored. Rules that run
    afterwards still add their fees on top.
    """
    minimum = context.thresholds.minimum_job_cost
    if effect.cost >= minimum:
        return effect

    return effect.with_cost(minimum).record_rule(
        f"BR-003: Minimum Job Size Enforced (${minimum:,.0f})"
    )
