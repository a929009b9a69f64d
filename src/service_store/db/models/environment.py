"""Environment table."""

from sqlalchemy import JSON, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from service_store.db.base import Base, TimestampMixin
from service_store.models.enums import EnvironmentStatus


class EnvironmentRow(Base, TimestampMixin):
    __tablename__ = "environments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    datacenter_id: Mapped[int] = mapped_column(Integer, nullable=False, default=0, index=True)
    type: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    options: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    credentials: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    status: Mapped[str] = mapped_column(
        String(50), nullable=False, default=EnvironmentStatus.INITIALIZING.value
    )

    builds: Mapped[list["BuildRow"]] = relationship(  # noqa: F821
        back_populates="environment",
        cascade="all, delete-orphan",
        order_by="BuildRow.created_at",
    )
