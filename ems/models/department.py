from sqlalchemy import Integer, String, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from ems.db.base import Base


class Department(Base):
    __tablename__ = "departments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)

    # departments <-> employees reference each other; the constraint is added after both tables exist
    manager_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("employees.id", use_alter=True, name="fk_departments_manager_id", ondelete="SET NULL"),
        nullable=True,
    )
    manager_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
