"""
Estadísticas y CSV del panel.
"""

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

from app.services.report_service import (
    CSV_HEADERS,
    build_orders_csv,
    compute_order_stats,
    export_filename,
)

NOW = datetime(2024, 6, 30, 12, 0, tzinfo=timezone.utc)


def test_stats_windows_and_counts():
    rows = [
        ("pending", NOW - timedelta(days=1)),
        ("pending", NOW - timedelta(days=1, hours=2)),
        ("completed", NOW - timedelta(days=10)),
        ("cancelled", NOW - timedelta(days=45)),
        # Fecha sin zona: se interpreta como UTC
        ("processing", (NOW - timedelta(days=2)).replace(tzinfo=None)),
    ]

    stats = compute_order_stats(rows, ["Sport", "Sport", "Clásico", None, ""], now=NOW)

    assert stats["totalOrders"] == 5
    assert stats["recentOrders"] == 3
    assert stats["statusCounts"] == {"pending": 2, "processing": 1, "completed": 1, "cancelled": 1}
    assert stats["ordersByDay"] == {"2024-06-20": 1, "2024-06-28": 1, "2024-06-29": 2}
    assert list(stats["ordersByDay"]) == sorted(stats["ordersByDay"])
    assert stats["productTypeCounts"] == {"Sport": 2, "Clásico": 1}


def test_stats_keep_unknown_statuses():
    stats = compute_order_stats([("archived", NOW)], [], now=NOW)

    assert stats["statusCounts"]["archived"] == 1
    assert stats["statusCounts"]["pending"] == 0


def test_csv_without_orders_is_only_the_header():
    assert build_orders_csv([]) == ",".join(CSV_HEADERS)


def test_csv_rows_quote_every_field():
    order = SimpleNamespace(
        id=3,
        name="Ana",
        lastname='Pé"rez',
        email="ana@example.com",
        phone=None,
        status="completed",
        created_at=datetime(2024, 5, 4, 10, 0),
        products=[object(), object()],
        notes=None,
    )

    lines = build_orders_csv([order]).split("\n")

    # Las comillas internas no se escapan
    assert lines[1] == '"3","Ana","Pé"rez","ana@example.com","","completed","04/05/2024","2",""'


def test_export_filename():
    assert export_filename(datetime(2024, 1, 9)) == "pedidos_2024-01-09.csv"


def test_csv_dates_use_local_timezone():
    # 01:30 UTC del 5 de mayo todavía es 4 de mayo en Buenos Aires
    order = SimpleNamespace(
        id=1, name="Ana", lastname="Pérez", email="ana@example.com", phone="",
        status="pending", created_at=datetime(2024, 5, 5, 1, 30, tzinfo=timezone.utc),
        products=[], notes="",
    )

    assert '"04/05/2024"' in build_orders_csv([order])
