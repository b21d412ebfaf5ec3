import enum
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from petu.database.db import Base


class JoinRequestStatus(str, enum.Enum):
    PENDIENTE = "pendiente"
    ACEPTADA = "aceptada"


class JoinRequest(Base):
    __tablename__ = "solicitudes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    evento_id: Mapped[int] = mapped_column(ForeignKey("eventos.id"), nullable=False)
    usuario_id: Mapped[int | None] = mapped_column(ForeignKey("usuarios.id"), nullable=True)
    estado: Mapped[str] = mapped_column(String(16), nullable=False, default=JoinRequestStatus.PENDIENTE.value)
    notificado_en: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    creado_en: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    evento: Mapped["Event"] = relationship(back_populates="solicitudes")
