from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fieldops.db.base import Base

"""
Model Client.

Rôle (fonctionnel) :
- Donneur d’ordre des missions, destinataire des devis et des factures.
- Porte éventuellement un type de paiement (délai d’échéance utilisé lors de la facturation).

Contraintes :
- email unique.
- Pas de suppression si des missions / devis / factures y sont rattachés (règle applicative).
"""


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Client(Base):
    __tablename__ = "clients"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    nom: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    telephone: Mapped[str | None] = mapped_column(String(30), nullable=True)
    entreprise: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Segment commercial (Standard, Premium…)
    type_de_cart: Mapped[str] = mapped_column(String(50), nullable=False, default="Standard")
    statut: Mapped[str] = mapped_column(String(20), nullable=False, default="active")
    localisation: Mapped[str | None] = mapped_column(String(255), nullable=True)

    type_paiement_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("types_paiement.id", ondelete="SET NULL"),
        nullable=True,
    )

    date_inscription: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_utcnow)

    type_paiement = relationship("TypePaiement", lazy="joined")
