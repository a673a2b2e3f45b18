from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fieldops.db.base import Base

"""
Model Technicien.

Rôle (fonctionnel) :
- Intervenant terrain, rattaché à une spécialité.
- Auteur des rapports de mission.

Index :
- (nom, prenom) : ordre de tri par défaut des listes.
"""


class Technicien(Base):
    __tablename__ = "techniciens"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    nom: Mapped[str] = mapped_column(String(100), nullable=False)
    prenom: Mapped[str] = mapped_column(String(100), nullable=False)
    contact: Mapped[str] = mapped_column(String(100), nullable=False)

    specialite_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("specialites.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    specialite = relationship("Specialite", lazy="joined")

    __table_args__ = (Index("ix_techniciens_nom_prenom", "nom", "prenom"),)
