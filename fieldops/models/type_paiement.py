from __future__ import annotations

from decimal import Decimal

from sqlalchemy import Boolean, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from fieldops.db.base import Base


class TypePaiement(Base):
    """Conditions de paiement d’un client (délai d’échéance en jours, remise)."""

    __tablename__ = "types_paiement"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    libelle: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Délai entre émission et échéance d’une facture
    delai_paiement: Mapped[int] = mapped_column(Integer, nullable=False, default=30)
    taux_remise: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False, default=Decimal("0"))
    actif: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
