"""initial scoring schema

Revision ID: a1c4e7d2b9f0
Revises:
Create Date: 2026-10-19 10:12:41.530114

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "a1c4e7d2b9f0"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "clubs",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "players",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("external_id", sa.String(length=128), nullable=False),
        sa.Column("club_id", sa.Integer(), nullable=True),
        sa.Column("email", sa.String(length=320), nullable=True),
        sa.Column("username", sa.String(length=64), nullable=True),
        sa.Column("name", sa.String(length=128), nullable=True),
        sa.Column("current_handicap", sa.Float(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=False),
        sa.ForeignKeyConstraint(["club_id"], ["clubs.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_players_external_id"), "players", ["external_id"], unique=True)
    op.create_index(op.f("ix_players_email"), "players", ["email"], unique=True)
    op.create_index(op.f("ix_players_username"), "players", ["username"], unique=True)
    op.create_index(op.f("ix_players_club_id"), "players", ["club_id"], unique=False)

    op.create_table(
        "courses",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_courses_id"), "courses", ["id"], unique=False)

    op.create_table(
        "holes",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("course_id", sa.Integer(), nullable=False),
        sa.Column("number", sa.Integer(), nullable=False),
        sa.Column("par", sa.Integer(), nullable=False),
        sa.Column("stroke_index", sa.Integer(), nullable=True),
        sa.Column("distance", sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(["course_id"], ["courses.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("course_id", "number", name="uq_hole_course_number"),
    )
    op.create_index(op.f("ix_holes_course_id"), "holes", ["course_id"], unique=False)

    op.create_table(
        "tournaments",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("club_id", sa.Integer(), nullable=True),
        sa.Column("course_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=128), nullable=False),
        sa.Column("format", sa.String(length=32), nullable=False),
        sa.Column("is_major", sa.Boolean(), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False),
        sa.Column("tournament_date", sa.Date(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=False),
        sa.ForeignKeyConstraint(["club_id"], ["clubs.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["course_id"], ["courses.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_tournaments_club_id"), "tournaments", ["club_id"], unique=False)
    op.create_index(op.f("ix_tournaments_course_id"), "tournaments", ["course_id"], unique=False)
    op.create_index(op.f("ix_tournaments_tournament_date"), "tournaments", ["tournament_date"], unique=False)

    op.create_table(
        "tournament_participants",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("tournament_id", sa.Integer(), nullable=False),
        sa.Column("player_id", sa.Integer(), nullable=False),
        sa.Column("role", sa.String(length=16), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False),
        sa.Column("flight", sa.String(length=32), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=False),
        sa.ForeignKeyConstraint(["tournament_id"], ["tournaments.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["player_id"], ["players.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("tournament_id", "player_id", name="uq_tournament_participant"),
    )
    op.create_index(op.f("ix_tournament_participants_tournament_id"), "tournament_participants", ["tournament_id"], unique=False)
    op.create_index(op.f("ix_tournament_participants_player_id"), "tournament_participants", ["player_id"], unique=False)

    op.create_table(
        "tournament_scores",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("tournament_id", sa.Integer(), nullable=False),
        sa.Column("participant_id", sa.Integer(), nullable=False),
        sa.Column("player_id", sa.Integer(), nullable=False),
        sa.Column("gross_score", sa.Integer(), nullable=False),
        sa.Column("handicap_at_time", sa.Float(), nullable=False),
        sa.Column("net_score", sa.Integer(), nullable=False),
        sa.Column("stableford_points", sa.Integer(), nullable=True),
        sa.Column("position", sa.Integer(), nullable=True),
        sa.Column("handicap_adjustment", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=False),
        sa.ForeignKeyConstraint(["tournament_id"], ["tournaments.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["participant_id"], ["tournament_participants.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["player_id"], ["players.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("tournament_id", "player_id", name="uq_tournament_score_player"),
    )
    op.create_index(op.f("ix_tournament_scores_tournament_id"), "tournament_scores", ["tournament_id"], unique=False)
    op.create_index(op.f("ix_tournament_scores_participant_id"), "tournament_scores", ["participant_id"], unique=False)
    op.create_index(op.f("ix_tournament_scores_player_id"), "tournament_scores", ["player_id"], unique=False)
    op.create_index(op.f("ix_tournament_scores_net_score"), "tournament_scores", ["net_score"], unique=False)

    op.create_table(
        "hole_scores",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("tournament_score_id", sa.Integer(), nullable=False),
        sa.Column("hole_id", sa.Integer(), nullable=False),
        sa.Column("strokes", sa.Integer(), nullable=False),
        sa.Column("stableford_points", sa.Integer(), nullable=True),
        sa.Column("putts", sa.Integer(), nullable=True),
        sa.Column("fairway_hit", sa.Boolean(), nullable=True),
        sa.Column("green_in_regulation", sa.Boolean(), nullable=True),
        sa.ForeignKeyConstraint(["tournament_score_id"], ["tournament_scores.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["hole_id"], ["holes.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("tournament_score_id", "hole_id", name="uq_hole_score_score_hole"),
    )
    op.create_index(op.f("ix_hole_scores_tournament_score_id"), "hole_scores", ["tournament_score_id"], unique=False)
    op.create_index(op.f("ix_hole_scores_hole_id"), "hole_scores", ["hole_id"], unique=False)

    op.create_table(
        "handicap_history",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("player_id", sa.Integer(), nullable=False),
        sa.Column("handicap_index", sa.Float(), nullable=False),
        sa.Column("reason", sa.String(length=32), nullable=False),
        sa.Column("tournament_id", sa.Integer(), nullable=True),
        sa.Column("effective_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=False),
        sa.ForeignKeyConstraint(["player_id"], ["players.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["tournament_id"], ["tournaments.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_handicap_history_player_id"), "handicap_history", ["player_id"], unique=False)
    op.create_index(op.f("ix_handicap_history_tournament_id"), "handicap_history", ["tournament_id"], unique=False)
    op.create_index(op.f("ix_handicap_history_effective_date"), "handicap_history", ["effective_date"], unique=False)


def downgrade() -> None:
    op.drop_table("handicap_history")
    op.drop_table("hole_scores")
    op.drop_table("tournament_scores")
    op.drop_table("tournament_participants")
    op.drop_table("tournaments")
    op.drop_table("holes")
    op.drop_table("courses")
    op.drop_table("players")
    op.drop_table("clubs")
