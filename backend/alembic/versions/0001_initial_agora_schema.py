"""Initial Agora schema: users, companies, events, RSVPs, subscriptions."""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql


# Revision identifiers, used by Alembic.
revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


user_role_enum = postgresql.ENUM(
    "IR_ADMIN",
    "ANALYST_MANAGER",
    "INVESTMENT_ANALYST",
    name="user_role_enum",
    create_type=False,
)
event_type_enum = postgresql.ENUM(
    "EARNINGS_CALL",
    "INVESTOR_MEETING",
    "CONFERENCE",
    "ROADSHOW",
    "ANALYST_DAY",
    "PRODUCT_LAUNCH",
    "OTHER",
    name="event_type_enum",
    create_type=False,
)
rsvp_status_enum = postgresql.ENUM(
    "ACCEPTED",
    "DECLINED",
    "TENTATIVE",
    "PENDING",
    name="rsvp_status_enum",
    create_type=False,
)
subscription_status_enum = postgresql.ENUM(
    "ACTIVE",
    "INACTIVE",
    "EXPIRED",
    name="subscription_status_enum",
    create_type=False,
)

_ENUMS = (user_role_enum, event_type_enum, rsvp_status_enum, subscription_status_enum)


def _uuid() -> postgresql.UUID:
    return postgresql.UUID(as_uuid=True)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    ]


def upgrade() -> None:
    bind = op.get_bind()
    for enum_type in _ENUMS:
        enum_type.create(bind, checkfirst=True)

    # -------------------------------------------------------------------------
    # 1. Company catalogs
    # -------------------------------------------------------------------------
    op.create_table(
        "user_companies",
        sa.Column("company_id", _uuid(), primary_key=True, nullable=False),
        sa.Column("company_name", sa.String(255), nullable=False),
        sa.Column("location", sa.String(255), nullable=True),
        *_timestamps(),
    )
    op.create_table(
        "gics_companies",
        sa.Column("company_id", _uuid(), primary_key=True, nullable=False),
        sa.Column("ticker_symbol", sa.String(16), nullable=False),
        sa.Column("company_name", sa.String(255), nullable=False),
        sa.Column("gics_sector", sa.String(128), nullable=False),
        sa.Column("gics_sub_category", sa.String(128), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("ticker_symbol", name="uq_gics_companies_ticker_symbol"),
    )
    op.create_index("ix_gics_companies_company_name", "gics_companies", ["company_name"])
    op.create_index("ix_gics_companies_sector", "gics_companies", ["gics_sector", "gics_sub_category"])

    # -------------------------------------------------------------------------
    # 2. users (self-referencing manager)
    # -------------------------------------------------------------------------
    op.create_table(
        "users",
        sa.Column("user_id", _uuid(), primary_key=True, nullable=False),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("username", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("role", user_role_enum, nullable=False),
        sa.Column(
            "manager_id",
            _uuid(),
            sa.ForeignKey("users.user_id", name="fk_users_manager_id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column(
            "company_id",
            _uuid(),
            sa.ForeignKey("user_companies.company_id", name="fk_users_company_id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("start", sa.DateTime(timezone=True), nullable=True),
        sa.Column("end", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("username", name="uq_users_username"),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )

    # -------------------------------------------------------------------------
    # 3. events
    # -------------------------------------------------------------------------
    op.create_table(
        "events",
        sa.Column("event_id", _uuid(), primary_key=True, nullable=False),
        sa.Column("event_name", sa.String(255), nullable=False),
        sa.Column("event_type", event_type_enum, nullable=False),
        sa.Column(
            "ticker_symbol",
            sa.String(16),
            sa.ForeignKey("gics_companies.ticker_symbol", name="fk_events_ticker_symbol", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("gics_sector", sa.String(128), nullable=True),
        sa.Column("gics_sub_sector", sa.String(128), nullable=True),
        sa.Column("location", sa.String(255), nullable=True),
        sa.Column("host_company", sa.String(255), nullable=True),
        sa.Column(
            "company_id",
            _uuid(),
            sa.ForeignKey("user_companies.company_id", name="fk_events_company_id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("start_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("end_date IS NULL OR end_date > start_date", name="ck_events_end_after_start"),
    )
    op.create_index("ix_events_start_date", "events", ["start_date"])
    op.create_index("ix_events_ticker_symbol", "events", ["ticker_symbol"])
    op.create_index("ix_events_gics_sector", "events", ["gics_sector"])

    # -------------------------------------------------------------------------
    # 4. rsvps: one row per (user, event)
    # -------------------------------------------------------------------------
    op.create_table(
        "rsvps",
        sa.Column("rsvp_id", _uuid(), primary_key=True, nullable=False),
        sa.Column(
            "user_id",
            _uuid(),
            sa.ForeignKey("users.user_id", name="fk_rsvps_user_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "event_id",
            _uuid(),
            sa.ForeignKey("events.event_id", name="fk_rsvps_event_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("status", rsvp_status_enum, nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("user_id", "event_id", name="uq_rsvps_user_event"),
    )
    op.create_index("ix_rsvps_event_id", "rsvps", ["event_id"])

    # -------------------------------------------------------------------------
    # 5. subscriptions: at most one ACTIVE row per (user, sector, sub-category)
    # -------------------------------------------------------------------------
    op.create_table(
        "subscriptions",
        sa.Column("sub_id", _uuid(), primary_key=True, nullable=False),
        sa.Column(
            "user_id",
            _uuid(),
            sa.ForeignKey("users.user_id", name="fk_subscriptions_user_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("gics_sector", sa.String(128), nullable=False),
        sa.Column("gics_sub_category", sa.String(128), nullable=True),
        sa.Column("status", subscription_status_enum, nullable=False, server_default="ACTIVE"),
        sa.Column("sub_start", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("sub_end", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_subscriptions_user_id", "subscriptions", ["user_id"])
    op.execute(
        "CREATE UNIQUE INDEX uq_subscriptions_active_tuple "
        "ON subscriptions (user_id, gics_sector, coalesce(gics_sub_category, '')) "
        "WHERE status = 'ACTIVE'"
    )


def downgrade() -> None:
    # Drop tables in strict reverse dependency order.
    op.execute("DROP INDEX IF EXISTS uq_subscriptions_active_tuple")
    op.drop_index("ix_subscriptions_user_id", table_name="subscriptions")
    op.drop_table("subscriptions")

    op.drop_index("ix_rsvps_event_id", table_name="rsvps")
    op.drop_table("rsvps")

    op.drop_index("ix_events_gics_sector", table_name="events")
    op.drop_index("ix_events_ticker_symbol", table_name="events")
    op.drop_index("ix_events_start_date", table_name="events")
    op.drop_table("events")

    op.drop_table("users")

    op.drop_index("ix_gics_companies_sector", table_name="gics_companies")
    op.drop_index("ix_gics_companies_company_name", table_name="gics_companies")
    op.drop_table("gics_companies")
    op.drop_table("user_companies")

    bind = op.get_bind()
    for enum_type in reversed(_ENUMS):
        enum_type.drop(bind, checkfirst=True)
