from datetime import datetime

from sqlalchemy import DateTime, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from petu.database.db import Base


class User(Base):
    __tablename__ = "usuarios"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    email: Mapped[str] = mapped_column(String(254), nullable=False, unique=True, index=True)
    nombre: Mapped[str] = mapped_column(String(120), nullable=False)
    contrasena: Mapped[str] = mapped_column(String(256), nullable=False)
    vidas: Mapped[int] = mapped_column(Integer, nullable=False, default=3)
    reputacion: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    nivel: Mapped[str] = mapped_column(String(16), nullable=False, default="principiante")
    creado_en: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
