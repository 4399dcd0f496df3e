"""Relational read contract for :class:`~pos_reports.snapshot.loader.SnapshotLoader`.

The loader only reads. ``SCHEMA_SQL`` documents the tables and columns it
expects and is used to create throwaway SQLite databases (tests, local
fixtures). Timestamps are stored as ``YYYY-MM-DD HH:MM:SS`` text in the
restaurant's local time.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)

TABLES = (
    "businesses",
    "employees",
    "restaurant_tables",
    "menu_categories",
    "menu_items",
    "modifiers",
    "orders",
    "checks",
    "order_items",
    "order_item_modifiers",
    "payment_histories",
    "order_access_logs",
)

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS businesses (
    id INTEGER PRIMARY KEY,
    name TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS employees (
    id INTEGER PRIMARY KEY,
    business_id INTEGER NOT NULL REFERENCES businesses(id),
    first_name TEXT,
    last_name TEXT
);

CREATE TABLE IF NOT EXISTS restaurant_tables (
    id INTEGER PRIMARY KEY,
    business_id INTEGER REFERENCES businesses(id),
    name TEXT
);

CREATE TABLE IF NOT EXISTS menu_categories (
    id INTEGER PRIMARY KEY,
    business_id INTEGER REFERENCES businesses(id),
    parent_id INTEGER REFERENCES menu_categories(id),
    name TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS menu_items (
    id INTEGER PRIMARY KEY,
    business_id INTEGER REFERENCES businesses(id),
    menu_category_id INTEGER REFERENCES menu_categories(id),
    name TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS modifiers (
    id INTEGER PRIMARY KEY,
    name TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS orders (
    id INTEGER PRIMARY KEY,
    business_id INTEGER NOT NULL REFERENCES businesses(id),
    order_ticket_id TEXT,
    order_ticket_title TEXT,
    table_id INTEGER REFERENCES restaurant_tables(id),
    created_by_employee_id INTEGER REFERENCES employees(id),
    status TEXT NOT NULL DEFAULT 'pending',
    customer INTEGER DEFAULT 0,
    gratuity_key TEXT DEFAULT 'NotApplicable',
    gratuity_type TEXT,
    gratuity_value DECIMAL(10, 2) DEFAULT 0,
    tax_value DECIMAL(10, 2) DEFAULT 0,
    fee_value DECIMAL(10, 2) DEFAULT 0,
    created_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS checks (
    id INTEGER PRIMARY KEY,
    order_id INTEGER NOT NULL REFERENCES orders(id)
);

CREATE TABLE IF NOT EXISTS order_items (
    id INTEGER PRIMARY KEY,
    order_id INTEGER NOT NULL REFERENCES orders(id),
    check_id INTEGER NOT NULL REFERENCES checks(id),
    menu_item_id INTEGER REFERENCES menu_items(id),
    qty INTEGER NOT NULL DEFAULT 1,
    unit_price DECIMAL(10, 2) NOT NULL DEFAULT 0,
    order_status INTEGER NOT NULL DEFAULT 0,
    customer_no INTEGER,
    discount_amount DECIMAL(10, 2) DEFAULT 0,
    employee_id INTEGER REFERENCES employees(id)
);

CREATE TABLE IF NOT EXISTS order_item_modifiers (
    id INTEGER PRIMARY KEY,
    order_item_id INTEGER NOT NULL REFERENCES order_items(id),
    modifier_id INTEGER REFERENCES modifiers(id),
    qty INTEGER NOT NULL DEFAULT 1,
    price DECIMAL(10, 2) NOT NULL DEFAULT 0
);

CREATE TABLE IF NOT EXISTS payment_histories (
    id INTEGER PRIMARY KEY,
    order_id INTEGER NOT NULL REFERENCES orders(id),
    check_id INTEGER REFERENCES checks(id),
    employee_id INTEGER REFERENCES employees(id),
    amount DECIMAL(10, 2) NOT NULL DEFAULT 0,
    tip_amount DECIMAL(10, 2) DEFAULT 0,
    payment_mode TEXT,
    status TEXT NOT NULL DEFAULT 'completed',
    refunded_payment_id INTEGER DEFAULT 0,
    refund_reason TEXT,
    payment_is_refund INTEGER DEFAULT 0,
    comment TEXT,
    created_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS order_access_logs (
    id INTEGER PRIMARY KEY,
    order_id INTEGER NOT NULL REFERENCES orders(id),
    employee_id INTEGER NOT NULL REFERENCES employees(id),
    start_date TEXT NOT NULL,
    end_date TEXT
);

CREATE INDEX IF NOT EXISTS idx_orders_business_created ON orders (business_id, created_at);
CREATE INDEX IF NOT EXISTS idx_order_items_order ON order_items (order_id);
CREATE INDEX IF NOT EXISTS idx_payment_histories_order ON payment_histories (order_id);
CREATE INDEX IF NOT EXISTS idx_access_logs_start ON order_access_logs (start_date);
"""


def create_schema(connection) -> None:
    """Create every table the loader reads on a SQLite connection.

    Args:
        connection: An open ``sqlite3.Connection``.
    """
    cursor = connection.cursor()
    cursor.executescript(SCHEMA_SQL)
    connection.commit()
    logger.debug("Created report schema (%s tables)", len(TABLES))
