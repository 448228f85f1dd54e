from sqlalchemy import Column, Integer, String

from storefront.data.database import Base
from storefront.data.models._columns import created_at_column, updated_at_column


class UserModel(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    email = Column(String(255), nullable=False, unique=True)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(100), nullable=False)
    role = Column(String(20), nullable=False, default="CUSTOMER")

    created_at = created_at_column()
    updated_at = updated_at_column()
