"""Build table."""

from sqlalchemy import JSON, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from service_store.db.base import Base, TimestampMixin
from service_store.models.enums import BuildStatus


class BuildRow(Base, TimestampMixin):
    __tablename__ = "builds"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    uuid: Mapped[str] = mapped_column(String(128), nullable=False, unique=True, index=True)
    environment_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("environments.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    type: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    status: Mapped[str] = mapped_column(String(50), nullable=False, default=BuildStatus.IN_PROGRESS.value)
    definition: Mapped[str] = mapped_column(Text, nullable=False, default="")
    mapping: Mapped[dict | None] = mapped_column(JSON, nullable=True)

    environment: Mapped["EnvironmentRow"] = relationship(back_populates="builds")  # noqa: F821
