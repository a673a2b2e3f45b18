"""Schéma initial.

Rôle (fonctionnel) :
- Crée les référentiels (types de paiement, spécialités), les clients et techniciens,
  puis les documents métier : missions, devis (+ lignes), factures (+ lignes), rapports (+ images).
- Les numéros de documents (missions.num_intervention, devis.numero, factures.numero) sont UNIQUE :
  c’est la base qui arbitre deux allocations concurrentes du même numéro.

Revision ID: 5a1f3c2e9b07
Revises:
Create Date: 2026-10-18 09:12:44.180231
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# Identifiants Alembic
revision: str = "5a1f3c2e9b07"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Application des changements de schéma."""
    op.create_table(
        "types_paiement",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("libelle", sa.String(length=100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("delai_paiement", sa.Integer(), nullable=False),
        sa.Column("taux_remise", sa.Numeric(precision=5, scale=2), nullable=False),
        sa.Column("actif", sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_types_paiement")),
        sa.UniqueConstraint("libelle", name=op.f("uq_types_paiement_libelle")),
    )

    op.create_table(
        "specialites",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("libelle", sa.String(length=100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_specialites")),
        sa.UniqueConstraint("libelle", name=op.f("uq_specialites_libelle")),
    )

    op.create_table(
        "clients",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("nom", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("telephone", sa.String(length=30), nullable=True),
        sa.Column("entreprise", sa.String(length=255), nullable=True),
        sa.Column("type_de_cart", sa.String(length=50), nullable=False),
        sa.Column("statut", sa.String(length=20), nullable=False),
        sa.Column("localisation", sa.String(length=255), nullable=True),
        sa.Column("type_paiement_id", sa.Integer(), nullable=True),
        sa.Column("date_inscription", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ["type_paiement_id"],
            ["types_paiement.id"],
            name=op.f("fk_clients_type_paiement_id_types_paiement"),
            ondelete="SET NULL",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_clients")),
        sa.UniqueConstraint("email", name=op.f("uq_clients_email")),
    )
    op.create_index(op.f("ix_clients_nom"), "clients", ["nom"], unique=False)

    op.create_table(
        "techniciens",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("nom", sa.String(length=100), nullable=False),
        sa.Column("prenom", sa.String(length=100), nullable=False),
        sa.Column("contact", sa.String(length=100), nullable=False),
        sa.Column("specialite_id", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ["specialite_id"],
            ["specialites.id"],
            name=op.f("fk_techniciens_specialite_id_specialites"),
            ondelete="RESTRICT",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_techniciens")),
    )
    op.create_index(op.f("ix_techniciens_specialite_id"), "techniciens", ["specialite_id"], unique=False)
    op.create_index("ix_techniciens_nom_prenom", "techniciens", ["nom", "prenom"], unique=False)

    op.create_table(
        "missions",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("num_intervention", sa.String(length=32), nullable=False),
        sa.Column("nature_intervention", sa.String(length=255), nullable=False),
        sa.Column("objectif_du_contrat", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("priorite", sa.String(length=20), nullable=False),
        sa.Column("statut", sa.String(length=20), nullable=False),
        sa.Column("date_sortie_fiche_intervention", sa.DateTime(timezone=True), nullable=False),
        sa.Column("client_id", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ["client_id"], ["clients.id"], name=op.f("fk_missions_client_id_clients"), ondelete="RESTRICT"
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_missions")),
        sa.UniqueConstraint("num_intervention", name=op.f("uq_missions_num_intervention")),
    )
    op.create_index(op.f("ix_missions_statut"), "missions", ["statut"], unique=False)
    op.create_index(
        op.f("ix_missions_date_sortie_fiche_intervention"),
        "missions",
        ["date_sortie_fiche_intervention"],
        unique=False,
    )
    op.create_index(op.f("ix_missions_client_id"), "missions", ["client_id"], unique=False)

    op.create_table(
        "devis",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("numero", sa.String(length=32), nullable=False),
        sa.Column("client_id", sa.Integer(), nullable=False),
        sa.Column("mission_id", sa.Integer(), nullable=True),
        sa.Column("titre", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("taux_tva", sa.Numeric(precision=5, scale=2), nullable=False),
        sa.Column("montant_ht", sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column("montant_tva", sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column("montant_ttc", sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column("statut", sa.String(length=20), nullable=False),
        sa.Column("date_creation", sa.DateTime(timezone=True), nullable=False),
        sa.Column("date_validite", sa.Date(), nullable=False),
        sa.Column("date_validation_dg", sa.DateTime(timezone=True), nullable=True),
        sa.Column("valide_par", sa.String(length=120), nullable=True),
        sa.Column("commentaire_dg", sa.Text(), nullable=True),
        sa.Column("date_validation_pdg", sa.DateTime(timezone=True), nullable=True),
        sa.Column("valide_par_pdg", sa.String(length=120), nullable=True),
        sa.Column("commentaire_pdg", sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(
            ["client_id"], ["clients.id"], name=op.f("fk_devis_client_id_clients"), ondelete="RESTRICT"
        ),
        sa.ForeignKeyConstraint(
            ["mission_id"], ["missions.id"], name=op.f("fk_devis_mission_id_missions"), ondelete="SET NULL"
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_devis")),
        sa.UniqueConstraint("numero", name=op.f("uq_devis_numero")),
    )
    op.create_index(op.f("ix_devis_client_id"), "devis", ["client_id"], unique=False)
    op.create_index(op.f("ix_devis_mission_id"), "devis", ["mission_id"], unique=False)
    op.create_index(op.f("ix_devis_statut"), "devis", ["statut"], unique=False)

    op.create_table(
        "devis_lignes",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("devis_id", sa.Integer(), nullable=False),
        sa.Column("designation", sa.String(length=255), nullable=False),
        sa.Column("quantite", sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column("prix_unitaire", sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column("montant_ht", sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column("ordre", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(
            ["devis_id"], ["devis.id"], name=op.f("fk_devis_lignes_devis_id_devis"), ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_devis_lignes")),
    )
    op.create_index(op.f("ix_devis_lignes_devis_id"), "devis_lignes", ["devis_id"], unique=False)

    op.create_table(
        "factures",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("numero", sa.String(length=32), nullable=False),
        sa.Column("devis_id", sa.Integer(), nullable=True),
        sa.Column("client_id", sa.Integer(), nullable=False),
        sa.Column("montant_ht", sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column("taux_tva", sa.Numeric(precision=5, scale=2), nullable=False),
        sa.Column("montant_ttc", sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column("statut", sa.String(length=20), nullable=False),
        sa.Column("date_emission", sa.DateTime(timezone=True), nullable=False),
        sa.Column("date_echeance", sa.Date(), nullable=False),
        sa.Column("date_paiement", sa.DateTime(timezone=True), nullable=True),
        sa.Column("mode_paiement", sa.String(length=50), nullable=True),
        sa.Column("reference_transaction", sa.String(length=100), nullable=True),
        sa.ForeignKeyConstraint(
            ["client_id"], ["clients.id"], name=op.f("fk_factures_client_id_clients"), ondelete="RESTRICT"
        ),
        sa.ForeignKeyConstraint(
            ["devis_id"], ["devis.id"], name=op.f("fk_factures_devis_id_devis"), ondelete="SET NULL"
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_factures")),
        sa.UniqueConstraint("numero", name=op.f("uq_factures_numero")),
        sa.UniqueConstraint("devis_id", name=op.f("uq_factures_devis_id")),
    )
    op.create_index(op.f("ix_factures_client_id"), "factures", ["client_id"], unique=False)
    op.create_index("ix_factures_statut_echeance", "factures", ["statut", "date_echeance"], unique=False)

    op.create_table(
        "facture_lignes",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("facture_id", sa.Integer(), nullable=False),
        sa.Column("designation", sa.String(length=255), nullable=False),
        sa.Column("quantite", sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column("prix_unitaire", sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column("montant_ht", sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column("ordre", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(
            ["facture_id"],
            ["factures.id"],
            name=op.f("fk_facture_lignes_facture_id_factures"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_facture_lignes")),
    )
    op.create_index(op.f("ix_facture_lignes_facture_id"), "facture_lignes", ["facture_id"], unique=False)

    op.create_table(
        "rapports",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("titre", sa.String(length=255), nullable=False),
        sa.Column("contenu", sa.Text(), nullable=False),
        sa.Column("mission_id", sa.Integer(), nullable=False),
        sa.Column("technicien_id", sa.Integer(), nullable=False),
        sa.Column("statut", sa.String(length=20), nullable=False),
        sa.Column("commentaire", sa.Text(), nullable=True),
        sa.Column("date_validation", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ["mission_id"], ["missions.id"], name=op.f("fk_rapports_mission_id_missions"), ondelete="RESTRICT"
        ),
        sa.ForeignKeyConstraint(
            ["technicien_id"],
            ["techniciens.id"],
            name=op.f("fk_rapports_technicien_id_techniciens"),
            ondelete="RESTRICT",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_rapports")),
    )
    op.create_index(op.f("ix_rapports_mission_id"), "rapports", ["mission_id"], unique=False)
    op.create_index(op.f("ix_rapports_technicien_id"), "rapports", ["technicien_id"], unique=False)
    op.create_index(op.f("ix_rapports_statut"), "rapports", ["statut"], unique=False)

    op.create_table(
        "rapport_images",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("rapport_id", sa.Integer(), nullable=False),
        sa.Column("url", sa.String(length=500), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("ordre", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(
            ["rapport_id"],
            ["rapports.id"],
            name=op.f("fk_rapport_images_rapport_id_rapports"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_rapport_images")),
    )
    op.create_index(op.f("ix_rapport_images_rapport_id"), "rapport_images", ["rapport_id"], unique=False)


def downgrade() -> None:
    """Retour arrière des changements de schéma."""
    op.drop_index(op.f("ix_rapport_images_rapport_id"), table_name="rapport_images")
    op.drop_table("rapport_images")
    op.drop_index(op.f("ix_rapports_statut"), table_name="rapports")
    op.drop_index(op.f("ix_rapports_technicien_id"), table_name="rapports")
    op.drop_index(op.f("ix_rapports_mission_id"), table_name="rapports")
    op.drop_table("rapports")
    op.drop_index(op.f("ix_facture_lignes_facture_id"), table_name="facture_lignes")
    op.drop_table("facture_lignes")
    op.drop_index("ix_factures_statut_echeance", table_name="factures")
    op.drop_index(op.f("ix_factures_client_id"), table_name="factures")
    op.drop_table("factures")
    op.drop_index(op.f("ix_devis_lignes_devis_id"), table_name="devis_lignes")
    op.drop_table("devis_lignes")
    op.drop_index(op.f("ix_devis_statut"), table_name="devis")
    op.drop_index(op.f("ix_devis_mission_id"), table_name="devis")
    op.drop_index(op.f("ix_devis_client_id"), table_name="devis")
    op.drop_table("devis")
    op.drop_index(op.f("ix_missions_client_id"), table_name="missions")
    op.drop_index(op.f("ix_missions_date_sortie_fiche_intervention"), table_name="missions")
    op.drop_index(op.f("ix_missions_statut"), table_name="missions")
    op.drop_table("missions")
    op.drop_index("ix_techniciens_nom_prenom", table_name="techniciens")
    op.drop_index(op.f("ix_techniciens_specialite_id"), table_name="techniciens")
    op.drop_table("techniciens")
    op.drop_index(op.f("ix_clients_nom"), table_name="clients")
    op.drop_table("clients")
    op.drop_table("specialites")
    op.drop_table("types_paiement")
