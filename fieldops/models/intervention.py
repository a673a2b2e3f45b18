from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fieldops.db.base import Base

"""
Model Intervention.

Rôle (fonctionnel) :
- Passage planifié sur une mission : créneau (début / fin), durée estimée en minutes.
- Affecte un ou plusieurs techniciens, chacun avec un rôle (principal, assistant, expert).
- Sert de base au contrôle de disponibilité : deux créneaux d’un même technicien qui se
  chevauchent sont en conflit.

Index :
- (date_heure_debut, date_heure_fin) : recherche des créneaux qui chevauchent une période.
"""


class Intervention(Base):
    __tablename__ = "interventions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    mission_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("missions.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    # Créneau optionnel : une intervention non datée n’entre pas dans les conflits
    date_heure_debut: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    date_heure_fin: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    duree: Mapped[int | None] = mapped_column(Integer, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    mission = relationship("Mission", lazy="joined")
    techniciens = relationship(
        "InterventionTechnicien",
        back_populates="intervention",
        cascade="all, delete-orphan",
        order_by="InterventionTechnicien.id",
        lazy="selectin",
    )

    __table_args__ = (Index("ix_interventions_creneau", "date_heure_debut", "date_heure_fin"),)


class InterventionTechnicien(Base):
    """Affectation d’un technicien à une intervention."""

    __tablename__ = "intervention_techniciens"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    intervention_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("interventions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    technicien_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("techniciens.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    # principal | assistant | expert
    role: Mapped[str] = mapped_column(String(20), nullable=False, default="principal")
    commentaire: Mapped[str | None] = mapped_column(Text, nullable=True)

    intervention = relationship("Intervention", back_populates="techniciens")
    technicien = relationship("Technicien", lazy="joined")

    __table_args__ = (
        UniqueConstraint("intervention_id", "technicien_id", name="uq_intervention_techniciens_affectation"),
    )
