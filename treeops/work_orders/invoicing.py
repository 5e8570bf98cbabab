"""Invoice drafts built from a work order's tree assessments."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from treeops import config
from treeops.work_orders.models import TreeCalculation, WorkOrder


@dataclass(frozen=True)
class InvoiceLineItem:
    description: str
    quantity: int
    unit_price: float
    total_price: float
    tree_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "description": self.description,
            "quantity": self.quantity,
            "unit_price": self.unit_price,
            "total_price": self.total_price,
            "tree_id": self.tree_id,
        }


@dataclass(frozen=True)
class InvoiceDraft:
    work_order_id: str
    customer_name: str
    billing_address: str
    line_items: list[InvoiceLineItem] = field(default_factory=list)
    tax_rate: float = 0.0
    subtotal: float = 0.0
    tax_amount: float = 0.0
    total_amount: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "work_order_id": self.work_order_id,
            "customer_name": self.customer_name,
            "billing_address": self.billing_address,
            "line_items": [item.to_dict() for item in self.line_items],
            "tax_rate": self.tax_rate,
            "subtotal": self.subtotal,
            "tax_amount": self.tax_amount,
            "total_amount": self.total_amount,
        }


def describe_tree(calculation: TreeCalculation) -> str:
    measurement = calculation.measurement
    species = measurement.species or "Unknown species"
    return (
        f"Tree removal - {species} "
        f"({measurement.height:g}ft H x {measurement.dbh:g}in DBH)"
    )


def draft_invoice(work_order: WorkOrder, tax_rate: float | None = None) -> InvoiceDraft:
    """Build an unsaved invoice for a work order.

    One line per attached tree, priced at its assessed total. A work order
    without tree assessments is billed as a single line at its actual cost
    when one was recorded on completion, otherwise at its estimated cost.
    """
    if tax_rate is None:
        tax_rate = config.INVOICE_TAX_RATE

    line_items = [
        InvoiceLineItem(
            description=describe_tree(calculation),
            quantity=1,
            unit_price=calculation.result.total_cost,
            total_price=calculation.result.total_cost,
            tree_id=calculation.tree_id,
        )
        for calculation in work_order.tree_calculations
    ]

    if not line_items:
        # A recorded actual cost of 0 falls back to the estimate.
        amount = work_order.actual_cost or work_order.estimated_cost
        line_items.append(
            InvoiceLineItem(
                description=work_order.job_description or work_order.service_type,
                quantity=1,
                unit_price=amount,
                total_price=amount,
            )
        )

    subtotal = sum(item.total_price for item in line_items)
    tax_amount = subtotal * (tax_rate / 100)

    return InvoiceDraft(
        work_order_id=work_order.id,
        customer_name=work_order.customer_name,
        billing_address=work_order.property_address,
        line_items=line_items,
        tax_rate=tax_rate,
        subtotal=round(subtotal, 2),
        tax_amount=round(tax_amount, 2),
        total_amount=round(subtotal + tax_amount, 2),
    )
