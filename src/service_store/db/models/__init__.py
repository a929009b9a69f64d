"""SQLAlchemy ORM models - import all to register with Base.metadata."""

from service_store.db.models.environment import EnvironmentRow
from service_store.db.models.build import BuildRow

__all__ = ["EnvironmentRow", "BuildRow"]
