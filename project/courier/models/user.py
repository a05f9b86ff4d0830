# courier/models/user.py

from sqlalchemy import Column, Integer, String
from courier.utils.database import Base

class User(Base):
    __tablename__ = "users"

    id       = Column(Integer, primary_key=True, index=True)        # автоинкремент
    username = Column(String, unique=True, nullable=False)          # логин
    password = Column(String, nullable=False)                       # хэш пароля
