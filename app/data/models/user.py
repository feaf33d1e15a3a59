from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import relationship

from app.data.database import Base, new_id, utcnow
from app.domain.enums import Role


class UserModel(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_id)
    email = Column(String, unique=True, nullable=True)
    first_name = Column(String, nullable=True)
    last_name = Column(String, nullable=True)
    profile_image_url = Column(String, nullable=True)
    role = Column(String(20), nullable=False, default=Role.CUSTOMER.value)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    cart = relationship("CartModel", back_populates="user", uselist=False)
    orders = relationship("OrderModel", back_populates="user")
