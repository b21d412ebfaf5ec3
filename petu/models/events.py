from datetime import datetime

from sqlalchemy import Boolean, DateTime, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from petu.database.db import Base

ESTADO_PENDIENTE = "pendiente"
ESTADO_CONFIRMADO = "confirmado"


class Event(Base):
    __tablename__ = "eventos"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    titulo: Mapped[str] = mapped_column(String(200), nullable=False)
    descripcion: Mapped[str] = mapped_column(Text, nullable=False, default="")
    categoria: Mapped[str] = mapped_column(String(32), nullable=False, default="other")
    fecha: Mapped[str] = mapped_column(String(64), nullable=False)
    ubicacion: Mapped[str] = mapped_column(String(200), nullable=False)
    max_participantes: Mapped[int] = mapped_column(Integer, nullable=False)
    min_quorum: Mapped[int] = mapped_column(Integer, nullable=False)
    participantes_actuales: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    requiere_aprobacion: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    estado: Mapped[str] = mapped_column(String(16), nullable=False, default=ESTADO_PENDIENTE)
    anfitrion: Mapped[str | None] = mapped_column(String(120), nullable=True)
    creado_en: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    solicitudes: Mapped[list["JoinRequest"]] = relationship(back_populates="evento")
