"""event details per kind, organizers, artists, films

Revision ID: 0002_event_details
Revises: 0001_initial
Create Date: 2026-10-17
"""
from alembic import op
import sqlalchemy as sa

revision = "0002_event_details"
down_revision = "0001_initial"
branch_labels = None
depends_on = None

MODALITIES = ("in_person", "virtual")

def upgrade():
    with op.batch_alter_table("events") as batch:
        batch.add_column(sa.Column("stand_count", sa.Integer(), nullable=True))
        batch.add_column(sa.Column("outdoor", sa.Boolean(), nullable=True))
        batch.add_column(sa.Column("free_entry", sa.Boolean(), nullable=True))
        batch.add_column(sa.Column("venue", sa.String(200), nullable=True))
        batch.add_column(sa.Column("art_type", sa.String(120), nullable=True))
        batch.add_column(sa.Column("curator_id", sa.Integer(), nullable=True))
        batch.add_column(sa.Column("instructor_id", sa.Integer(), nullable=True))
        batch.add_column(sa.Column("modality", sa.Enum(*MODALITIES, name="event_modality", native_enum=False), nullable=True))
        batch.add_column(sa.Column("has_talks", sa.Boolean(), nullable=True))
        batch.create_foreign_key("fk_events_curator_id_people", "people", ["curator_id"], ["id"])
        batch.create_foreign_key("fk_events_instructor_id_people", "people", ["instructor_id"], ["id"])

    op.create_table(
        "event_organizers",
        sa.Column("event_id", sa.Integer(), nullable=False),
        sa.Column("person_id", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("event_id", "person_id", name="pk_event_organizers"),
        sa.ForeignKeyConstraint(["event_id"], ["events.id"], name="fk_event_organizers_event_id_events", ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["person_id"], ["people.id"], name="fk_event_organizers_person_id_people"),
    )
    # o responsável único vira o primeiro da lista
    op.execute(
        "INSERT INTO event_organizers (event_id, person_id) "
        "SELECT id, organizer_id FROM events WHERE organizer_id IS NOT NULL"
    )

    op.create_table(
        "concert_artists",
        sa.Column("event_id", sa.Integer(), nullable=False),
        sa.Column("person_id", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("event_id", "person_id", name="pk_concert_artists"),
        sa.ForeignKeyConstraint(["event_id"], ["events.id"], name="fk_concert_artists_event_id_events", ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["person_id"], ["people.id"], name="fk_concert_artists_person_id_people"),
    )

    op.create_table(
        "films",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("event_id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_films"),
        sa.ForeignKeyConstraint(["event_id"], ["events.id"], name="fk_films_event_id_events", ondelete="CASCADE"),
        sa.UniqueConstraint("event_id", "position", name="uq_films_event_position"),
        sa.CheckConstraint("position > 0", name="ck_films_position_positive"),
    )

    with op.batch_alter_table("events") as batch:
        batch.drop_constraint("fk_events_organizer_id_people", type_="foreignkey")
        batch.drop_column("organizer_id")

def downgrade():
    with op.batch_alter_table("events") as batch:
        batch.add_column(sa.Column("organizer_id", sa.Integer(), nullable=True))
        batch.create_foreign_key("fk_events_organizer_id_people", "people", ["organizer_id"], ["id"])
    # só o primeiro responsável sobrevive
    op.execute(
        "UPDATE events SET organizer_id = "
        "(SELECT MIN(person_id) FROM event_organizers WHERE event_organizers.event_id = events.id)"
    )

    op.drop_table("films")
    op.drop_table("concert_artists")
    op.drop_table("event_organizers")

    with op.batch_alter_table("events") as batch:
        batch.drop_constraint("fk_events_instructor_id_people", type_="foreignkey")
        batch.drop_constraint("fk_events_curator_id_people", type_="foreignkey")
        for column in ("has_talks", "modality", "instructor_id", "curator_id", "art_type",
                       "venue", "free_entry", "outdoor", "stand_count"):
            batch.drop_column(column)
