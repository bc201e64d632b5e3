"""Table definitions for the four record types.

Enumerated attributes are stored as their raw value string (e.g. "premium").
Timestamps are ISO 8601 text in UTC.
"""

import sqlalchemy as sa

metadata = sa.MetaData()

# Largest value a 64-bit INTEGER id column holds
MAX_RECORD_ID = 2**63 - 1

users = sa.Table(
    "users",
    metadata,
    sa.Column("id", sa.Integer(), primary_key=True),
    sa.Column("email", sa.Text(), nullable=False, unique=True),
    sa.Column("password_digest", sa.Text(), nullable=False),
    sa.Column("role", sa.Text(), nullable=False),
    sa.Column("created_at", sa.Text(), nullable=True),
    sa.Column("updated_at", sa.Text(), nullable=True),
)

departments = sa.Table(
    "departments",
    metadata,
    sa.Column("id", sa.Integer(), primary_key=True),
    sa.Column("name", sa.Text(), nullable=False),
    sa.Column("address", sa.Text(), nullable=True),
    sa.Column("status", sa.Text(), nullable=True),
    sa.Column("department_type", sa.Text(), nullable=True),
    sa.Column("created_at", sa.Text(), nullable=True),
    sa.Column("updated_at", sa.Text(), nullable=True),
)

customers = sa.Table(
    "customers",
    metadata,
    sa.Column("id", sa.Integer(), primary_key=True),
    sa.Column("name", sa.Text(), nullable=True),
    sa.Column("customer_type", sa.Text(), nullable=True),
    sa.Column("status", sa.Text(), nullable=True),
    sa.Column("department_id", sa.Integer(), sa.ForeignKey("departments.id"), nullable=False, index=True),
    sa.Column("created_at", sa.Text(), nullable=True),
    sa.Column("updated_at", sa.Text(), nullable=True),
)

work_records = sa.Table(
    "work_records",
    metadata,
    sa.Column("id", sa.Integer(), primary_key=True),
    sa.Column("customer_id", sa.Integer(), sa.ForeignKey("customers.id"), nullable=False, index=True),
    sa.Column("staff_user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False, index=True),
    sa.Column("department_id", sa.Integer(), sa.ForeignKey("departments.id"), nullable=False, index=True),
    sa.Column("content", sa.Text(), nullable=True),
    sa.Column("work_date", sa.Date(), nullable=True),
    sa.Column("status", sa.Text(), nullable=True),
    sa.Column("work_type", sa.Text(), nullable=True),
    sa.Column("created_at", sa.Text(), nullable=True),
    sa.Column("updated_at", sa.Text(), nullable=True),
)

# Entity type name -> table
TABLES: dict[str, sa.Table] = {
    "user": users,
    "department": departments,
    "customer": customers,
    "work_record": work_records,
}


def get_table(entity_type: str) -> sa.Table:
    """Look up the table for an entity type.

    Raises:
        KeyError: If the entity type has no table
    """
    try:
        return TABLES[entity_type]
    except KeyError:
        raise KeyError(f"Unknown entity type: {entity_type}") from None
