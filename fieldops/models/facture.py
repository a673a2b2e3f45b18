from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal

from sqlalchemy import Date, DateTime, ForeignKey, Index, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fieldops.db.base import Base

"""
Model Facture.

Rôle (fonctionnel) :
- Facture émise pour un travail réalisé, généralement issue de la conversion d’un devis accepté.
- Numéro `numero` (FAC-YYYY-NNNN) attribué à l’émission, unique en base.
- Lignes et montants recopiés depuis le devis (figés au moment de la conversion).

Statuts : emise | envoyee | payee | annulee.

Contraintes :
- devis_id unique : un devis ne peut être converti qu’une seule fois.

Index :
- (statut, date_echeance) : écran “factures en retard”.
"""


class Facture(Base):
    __tablename__ = "factures"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    numero: Mapped[str] = mapped_column(String(32), nullable=False, unique=True)

    devis_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("devis.id", ondelete="SET NULL"),
        nullable=True,
        unique=True,
    )
    client_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("clients.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    montant_ht: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    taux_tva: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False)
    montant_ttc: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    statut: Mapped[str] = mapped_column(String(20), nullable=False, default="emise")

    date_emission: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    date_echeance: Mapped[date] = mapped_column(Date, nullable=False)

    # Règlement
    date_paiement: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    mode_paiement: Mapped[str | None] = mapped_column(String(50), nullable=True)
    reference_transaction: Mapped[str | None] = mapped_column(String(100), nullable=True)

    client = relationship("Client", lazy="joined")
    lignes = relationship(
        "FactureLigne",
        back_populates="facture",
        cascade="all, delete-orphan",
        order_by="FactureLigne.ordre",
        lazy="selectin",
    )

    __table_args__ = (Index("ix_factures_statut_echeance", "statut", "date_echeance"),)


class FactureLigne(Base):
    __tablename__ = "facture_lignes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    facture_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("factures.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    designation: Mapped[str] = mapped_column(String(255), nullable=False)
    quantite: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    prix_unitaire: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    montant_ht: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    ordre: Mapped[int] = mapped_column(Integer, nullable=False)

    facture = relationship("Facture", back_populates="lignes")
