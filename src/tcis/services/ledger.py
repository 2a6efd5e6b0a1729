"""Sale ledger helpers. Money is the sum of every recorded sale."""

from __future__ import annotations

from sqlalchemy import func
from sqlalchemy.orm import Session

from src.tcis.db.models.sale import Sale
from src.tcis.db.session_context import managed_session
from src.tcis.enums import SaleKind


def add_sale(
    session: Session,
    *,
    kind: SaleKind,
    item_name: str,
    amount: float,
    quantity: int = 1,
) -> Sale:
    """Stage a sale row in the caller's session."""
    sale = Sale(kind=kind, item_name=item_name, quantity=quantity, amount=amount)
    session.add(sale)
    return sale


def record_sale(
    kind: SaleKind, item_name: str, amount: float, quantity: int = 1
) -> Sale:
    with managed_session(commit=True) as session:
        return add_sale(
            session, kind=kind, item_name=item_name, amount=amount, quantity=quantity
        )


def total_money() -> float:
    with managed_session() as session:
        total = session.query(func.coalesce(func.sum(Sale.amount), 0.0)).scalar()
    return float(total or 0.0)


def list_sales(limit: int | None = None) -> list[Sale]:
    """Return recorded sales, newest first."""
    with managed_session() as session:
        query = session.query(Sale).order_by(Sale.created_at.desc(), Sale.id.desc())
        if limit is not None:
            query = query.limit(limit)
        return query.all()
