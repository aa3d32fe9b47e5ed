"""people, events, enrollments

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-17
"""
from alembic import op
import sqlalchemy as sa

revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None

EVENT_STATES = ("pending", "confirmed", "in_progress", "finished", "cancelled")
EVENT_KINDS = ("fair", "concert", "exhibition", "workshop", "film_cycle", "other")

def upgrade():
    op.create_table(
        "people",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("national_id", sa.BigInteger(), nullable=False),
        sa.Column("first_name", sa.String(120), nullable=False),
        sa.Column("last_name", sa.String(120), nullable=False),
        sa.Column("email", sa.String(160), nullable=True),
        sa.Column("phone", sa.String(30), nullable=True),
        sa.Column("handle", sa.String(60), nullable=True),
        sa.Column("password_hash", sa.String(255), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_people"),
        sa.UniqueConstraint("national_id", name="uq_people_national_id"),
        sa.UniqueConstraint("handle", name="uq_people_handle"),
    )
    # e-mail único só entre pessoas com conta
    op.create_index(
        "uq_people_email", "people", ["email"], unique=True,
        sqlite_where=sa.text("handle IS NOT NULL"),
        postgresql_where=sa.text("handle IS NOT NULL"),
    )

    op.create_table(
        "events",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("kind", sa.Enum(*EVENT_KINDS, name="event_kind", native_enum=False), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("duration_days", sa.Integer(), nullable=True),
        sa.Column("state", sa.Enum(*EVENT_STATES, name="event_state", native_enum=False), nullable=False),
        sa.Column("capacity", sa.Integer(), nullable=True),
        sa.Column("seats_taken", sa.Integer(), server_default="0", nullable=False),
        sa.Column("organizer_id", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_events"),
        sa.ForeignKeyConstraint(["organizer_id"], ["people.id"], name="fk_events_organizer_id_people"),
        sa.CheckConstraint("seats_taken >= 0", name="ck_events_seats_taken_non_negative"),
        sa.CheckConstraint("capacity IS NULL OR capacity >= 0", name="ck_events_capacity_non_negative"),
    )

    op.create_table(
        "enrollments",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("event_id", sa.Integer(), nullable=False),
        sa.Column("person_id", sa.Integer(), nullable=False),
        sa.Column("enrolled_on", sa.Date(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_enrollments"),
        sa.ForeignKeyConstraint(["event_id"], ["events.id"], name="fk_enrollments_event_id_events"),
        sa.ForeignKeyConstraint(["person_id"], ["people.id"], name="fk_enrollments_person_id_people"),
        sa.UniqueConstraint("event_id", "person_id", name="uq_enrollment_event_person"),
    )

def downgrade():
    op.drop_table("enrollments")
    op.drop_table("events")
    op.drop_index("uq_people_email", table_name="people")
    op.drop_table("people")
