"""Interventions et affectations des techniciens.

Rôle (fonctionnel) :
- Ajoute les créneaux d’intervention sur une mission et la table d’affectation des techniciens
  (un technicien au plus une fois par intervention).
- Index (date_heure_debut, date_heure_fin) pour la recherche de chevauchements.

Revision ID: c3d8e41f6a20
Revises: 5a1f3c2e9b07
Create Date: 2026-10-18 15:40:02.517390
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# Identifiants Alembic
revision: str = "c3d8e41f6a20"
down_revision: Union[str, Sequence[str], None] = "5a1f3c2e9b07"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Application des changements de schéma."""
    op.create_table(
        "interventions",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("mission_id", sa.Integer(), nullable=False),
        sa.Column("date_heure_debut", sa.DateTime(timezone=True), nullable=True),
        sa.Column("date_heure_fin", sa.DateTime(timezone=True), nullable=True),
        sa.Column("duree", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ["mission_id"],
            ["missions.id"],
            name=op.f("fk_interventions_mission_id_missions"),
            ondelete="RESTRICT",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_interventions")),
    )
    op.create_index(op.f("ix_interventions_mission_id"), "interventions", ["mission_id"], unique=False)
    op.create_index(
        "ix_interventions_creneau", "interventions", ["date_heure_debut", "date_heure_fin"], unique=False
    )

    op.create_table(
        "intervention_techniciens",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("intervention_id", sa.Integer(), nullable=False),
        sa.Column("technicien_id", sa.Integer(), nullable=False),
        sa.Column("role", sa.String(length=20), nullable=False),
        sa.Column("commentaire", sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(
            ["intervention_id"],
            ["interventions.id"],
            name=op.f("fk_intervention_techniciens_intervention_id_interventions"),
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["technicien_id"],
            ["techniciens.id"],
            name=op.f("fk_intervention_techniciens_technicien_id_techniciens"),
            ondelete="RESTRICT",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_intervention_techniciens")),
        sa.UniqueConstraint(
            "intervention_id", "technicien_id", name="uq_intervention_techniciens_affectation"
        ),
    )
    op.create_index(
        op.f("ix_intervention_techniciens_intervention_id"),
        "intervention_techniciens",
        ["intervention_id"],
        unique=False,
    )
    op.create_index(
        op.f("ix_intervention_techniciens_technicien_id"),
        "intervention_techniciens",
        ["technicien_id"],
        unique=False,
    )


def downgrade() -> None:
    """Retour arrière des changements de schéma."""
    op.drop_index(op.f("ix_intervention_techniciens_technicien_id"), table_name="intervention_techniciens")
    op.drop_index(op.f("ix_intervention_techniciens_intervention_id"), table_name="intervention_techniciens")
    op.drop_table("intervention_techniciens")
    op.drop_index("ix_interventions_creneau", table_name="interventions")
    op.drop_index(op.f("ix_interventions_mission_id"), table_name="interventions")
    op.drop_table("interventions")
