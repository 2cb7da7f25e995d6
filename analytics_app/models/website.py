from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func
from analytics_app.database.connection import Base


class Website(Base):
    """
    A tracked property.

    Created and deleted by the management side of the product;
    the collector only reads it. A non-null deleted_at means the
    website no longer accepts traffic.
    """
    __tablename__ = "websites"

    id = Column(String(36), primary_key=True)
    name = Column(String(100), nullable=False)
    domain = Column(String(500), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    deleted_at = Column(DateTime(timezone=True), nullable=True)
