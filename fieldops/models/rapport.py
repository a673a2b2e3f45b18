from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fieldops.db.base import Base

"""
Model Rapport.

Rôle (fonctionnel) :
- Compte rendu rédigé par un technicien sur le travail effectué pendant une mission.
- Peut embarquer des images (URL + légende), ordonnées.
- Cycle : soumis -> valide | rejete (date_validation + commentaire du validateur).
"""


class Rapport(Base):
    __tablename__ = "rapports"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    titre: Mapped[str] = mapped_column(String(255), nullable=False)
    contenu: Mapped[str] = mapped_column(Text, nullable=False)

    mission_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("missions.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    technicien_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("techniciens.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    statut: Mapped[str] = mapped_column(String(20), nullable=False, default="soumis", index=True)
    commentaire: Mapped[str | None] = mapped_column(Text, nullable=True)
    date_validation: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    mission = relationship("Mission", lazy="joined")
    technicien = relationship("Technicien", lazy="joined")
    images = relationship(
        "RapportImage",
        back_populates="rapport",
        cascade="all, delete-orphan",
        order_by="RapportImage.ordre",
        lazy="selectin",
    )


class RapportImage(Base):
    __tablename__ = "rapport_images"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    rapport_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("rapports.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    url: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    ordre: Mapped[int] = mapped_column(Integer, nullable=False)

    rapport = relationship("Rapport", back_populates="images")
