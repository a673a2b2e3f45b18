from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal

from sqlalchemy import Date, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fieldops.db.base import Base

"""
Model Devis.

Rôle (fonctionnel) :
- Proposition de prix adressée à un client, éventuellement rattachée à une mission.
- Numéro `numero` (DEV-YYYY-NNNN) attribué à la création, unique en base.
- Montants HT / TVA / TTC calculés à partir des lignes (jamais saisis).

Workflow (statut) :
- brouillon / en_attente : modifiable.
- valide_dg / refuse_dg : décision du directeur général.
- valide_pdg / refuse_pdg : décision du PDG (devis internes).
- accepte_client / refuse_client : réponse du client.
- facture : converti en facture (plus supprimable).
"""


class Devis(Base):
    __tablename__ = "devis"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    numero: Mapped[str] = mapped_column(String(32), nullable=False, unique=True)

    client_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("clients.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    mission_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("missions.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    titre: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    taux_tva: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False)
    montant_ht: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    montant_tva: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    montant_ttc: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    statut: Mapped[str] = mapped_column(String(20), nullable=False, default="brouillon", index=True)

    date_creation: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    date_validite: Mapped[date] = mapped_column(Date, nullable=False)

    # Validation DG
    date_validation_dg: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    valide_par: Mapped[str | None] = mapped_column(String(120), nullable=True)
    commentaire_dg: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Validation PDG
    date_validation_pdg: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    valide_par_pdg: Mapped[str | None] = mapped_column(String(120), nullable=True)
    commentaire_pdg: Mapped[str | None] = mapped_column(Text, nullable=True)

    client = relationship("Client", lazy="joined")
    mission = relationship("Mission", lazy="joined")
    lignes = relationship(
        "DevisLigne",
        back_populates="devis",
        cascade="all, delete-orphan",
        order_by="DevisLigne.ordre",
        lazy="selectin",
    )


class DevisLigne(Base):
    """Ligne de devis : désignation, quantité, prix unitaire, montant HT (arrondi 2 décimales)."""

    __tablename__ = "devis_lignes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    devis_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("devis.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    designation: Mapped[str] = mapped_column(String(255), nullable=False)
    quantite: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    prix_unitaire: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    montant_ht: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    ordre: Mapped[int] = mapped_column(Integer, nullable=False)

    devis = relationship("Devis", back_populates="lignes")
