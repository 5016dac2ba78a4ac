"""
agent.tools.invoice - Structured invoice from line items.

Pure computation, no I/O. Amounts are Decimal internally and rounded
half-up to cents; the JSON output carries them as floats.
"""

from __future__ import annotations

import json
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from application.context import InvocationContext
from agent.tools.base import BaseTool, ToolName, ToolResult

_CENT = Decimal("0.01")


class LineItem(BaseModel):
    model_config = ConfigDict(extra="forbid")

    description: str = Field(min_length=1, description="What is being billed")
    quantity: int = Field(ge=1, description="Number of units")
    unit_price: float = Field(ge=0, description="Price of one unit")


class InvoiceInput(BaseModel):
    """Input schema for the invoice tool."""

    model_config = ConfigDict(extra="forbid")

    customer_name: str = Field(min_length=1, description="Who the invoice is addressed to")
    line_items: list[LineItem] = Field(min_length=1, description="Items to bill")
    currency: str = Field(default="USD", pattern=r"^[A-Z]{3}$", description="ISO 4217 code")
    tax_rate: float = Field(default=0.0, ge=0, le=1, description="Tax as a fraction, e.g. 0.2")


def _money(value: Decimal) -> Decimal:
    return value.quantize(_CENT, rounding=ROUND_HALF_UP)


class InvoiceTool(BaseTool):
    """Build an invoice with per-line and overall totals."""

    name = ToolName.INVOICE
    description = (
        "Create an invoice for a customer from a list of line items "
        "(description, quantity, unit price). Returns line totals, subtotal, "
        "tax and grand total."
    )
    required_permission = "can_use_invoice"

    def get_schema(self) -> type[BaseModel]:
        return InvoiceInput

    async def execute(
        self,
        ctx: InvocationContext,
        customer_name: str = "",
        line_items: Optional[list[dict[str, Any]]] = None,
        currency: str = "USD",
        tax_rate: float = 0.0,
        **kwargs,
    ) -> ToolResult:
        invoice = build_invoice(
            invoice_number=f"INV-{ctx.request_id[:8].upper()}",
            customer_name=customer_name,
            line_items=line_items or [],
            currency=currency,
            tax_rate=tax_rate,
        )
        return ToolResult(output=json.dumps(invoice), data=invoice)


def build_invoice(
    invoice_number: str,
    customer_name: str,
    line_items: list[dict[str, Any]],
    currency: str = "USD",
    tax_rate: float = 0.0,
) -> dict[str, Any]:
    lines = []
    subtotal = Decimal("0")
    for item in line_items:
        unit_price = _money(Decimal(str(item["unit_price"])))
        line_total = _money(unit_price * item["quantity"])
        subtotal += line_total
        lines.append({
            "description": item["description"],
            "quantity": item["quantity"],
            "unit_price": float(unit_price),
            "line_total": float(line_total),
        })

    tax = _money(subtotal * Decimal(str(tax_rate)))
    return {
        "invoice_number": invoice_number,
        "customer_name": customer_name,
        "currency": currency,
        "line_items": lines,
        "subtotal": float(subtotal),
        "tax_rate": tax_rate,
        "tax": float(tax),
        "total": float(subtotal + tax),
    }
