from datetime import date

from pos_app.models.invoice import Invoice
from pos_app.models.product import Product
from pos_app.services.store import Store
from pos_app.time_utils import end_of_day, start_of_day, utcnow


def _invoices_between(store: Store, start_date: date | None, end_date: date | None) -> list[Invoice]:
    invoices = store.get_all(Invoice)
    if start_date:
        start = start_of_day(start_date)
        invoices = [i for i in invoices if i.created_at >= start]
    if end_date:
        end = end_of_day(end_date)
        invoices = [i for i in invoices if i.created_at <= end]
    return invoices


def sales_summary(store: Store, start_date: date | None = None, end_date: date | None = None) -> dict:
    invoices = _invoices_between(store, start_date, end_date)
    total_sales = sum(i.total for i in invoices)
    total_invoices = len(invoices)
    total_discount = sum(i.discount for i in invoices)
    # Profit uses the purchase price frozen on each line, not today's price
    total_profit = sum(
        (item.price - item.product.get("purchase_price", 0.0)) * item.quantity
        for i in invoices
        for item in i.items
    )

    return {
        "total_sales": round(total_sales, 2),
        "total_invoices": total_invoices,
        "avg_invoice_value": round(total_sales / total_invoices, 2) if total_invoices else 0.0,
        "total_discount": round(total_discount, 2),
        "total_profit": round(total_profit, 2),
        "date_range": {
            "start": start_date.isoformat() if start_date else None,
            "end": end_date.isoformat() if end_date else None,
        },
    }


def top_products(
    store: Store, start_date: date | None = None, end_date: date | None = None, limit: int = 10
) -> list[dict]:
    sales: dict[str, dict] = {}
    for invoice in _invoices_between(store, start_date, end_date):
        for item in invoice.items:
            if item.product_id not in sales:
                sales[item.product_id] = {
                    "product_id": item.product_id,
                    "name": item.product.get("name", ""),
                    "total_quantity": 0,
                    "total_revenue": 0.0,
                }
            sales[item.product_id]["total_quantity"] += item.quantity
            sales[item.product_id]["total_revenue"] += item.total

    ranked = sorted(sales.values(), key=lambda s: s["total_revenue"], reverse=True)[:limit]
    for s in ranked:
        s["total_revenue"] = round(s["total_revenue"], 2)
    return ranked


def category_sales(store: Store, start_date: date | None = None, end_date: date | None = None) -> list[dict]:
    cats: dict[str, dict] = {}
    for invoice in _invoices_between(store, start_date, end_date):
        for item in invoice.items:
            cat = item.product.get("category") or "Uncategorized"
            if cat not in cats:
                cats[cat] = {"category": cat, "sales": 0.0, "quantity": 0}
            cats[cat]["sales"] += item.total
            cats[cat]["quantity"] += item.quantity
    for v in cats.values():
        v["sales"] = round(v["sales"], 2)
    return sorted(cats.values(), key=lambda c: c["sales"], reverse=True)


def daily_sales(store: Store, start_date: date | None = None, end_date: date | None = None) -> list[dict]:
    days: dict[str, dict] = {}
    for invoice in _invoices_between(store, start_date, end_date):
        day = invoice.created_at.date().isoformat()
        if day not in days:
            days[day] = {"date": day, "sales": 0.0, "invoices": 0}
        days[day]["sales"] += invoice.total
        days[day]["invoices"] += 1
    for v in days.values():
        v["sales"] = round(v["sales"], 2)
    return sorted(days.values(), key=lambda d: d["date"])


def inventory_summary(store: Store, threshold: int = 5) -> dict:
    products = store.get_all(Product)
    low_stock = [p for p in products if p.quantity <= threshold]

    return {
        "total_products": len(products),
        "total_units_in_stock": sum(p.quantity for p in products),
        "stock_cost_value": round(sum(p.quantity * p.purchase_price for p in products), 2),
        "stock_sale_value": round(sum(p.quantity * p.sale_price for p in products), 2),
        "low_stock_count": len(low_stock),
        "low_stock_items": [
            {"id": p.id, "barcode": p.barcode, "name": p.name, "quantity": p.quantity} for p in low_stock
        ],
        "by_category": _group_by_category(products),
    }


def _group_by_category(products: list[Product]) -> list[dict]:
    cats: dict[str, dict] = {}
    for p in products:
        cat = p.category or "Uncategorized"
        if cat not in cats:
            cats[cat] = {"category": cat, "product_count": 0, "total_units": 0, "total_value": 0.0}
        cats[cat]["product_count"] += 1
        cats[cat]["total_units"] += p.quantity
        cats[cat]["total_value"] += p.quantity * p.sale_price
    for v in cats.values():
        v["total_value"] = round(v["total_value"], 2)
    return list(cats.values())


def dashboard(store: Store, threshold: int = 5, today: date | None = None, recent: int = 5) -> dict:
    today = today or utcnow().date()
    invoices = store.get_all(Invoice)
    products = store.get_all(Product)
    todays = [i for i in invoices if i.created_at.date() == today]
    latest = sorted(invoices, key=lambda i: i.created_at, reverse=True)[:recent]

    return {
        "today_sales": round(sum(i.total for i in todays), 2),
        "today_invoices": len(todays),
        "total_revenue": round(sum(i.total for i in invoices), 2),
        "total_products": len(products),
        "low_stock_count": sum(1 for p in products if p.quantity <= threshold),
        "recent_invoices": [
            {
                "id": i.id,
                "total": i.total,
                "items": sum(item.quantity for item in i.items),
                "created_at": i.created_at.isoformat(),
            }
            for i in latest
        ],
    }


def sales_report(store: Store, start_date: date | None = None, end_date: date | None = None, threshold: int = 5) -> dict:
    """Everything the reports screen exports in one document."""
    return {
        "generated_at": utcnow().isoformat(),
        "summary": sales_summary(store, start_date, end_date),
        "top_products": top_products(store, start_date, end_date),
        "category_sales": category_sales(store, start_date, end_date),
        "daily_sales": daily_sales(store, start_date, end_date),
        "low_stock": inventory_summary(store, threshold)["low_stock_items"],
    }
