from sqlalchemy import Boolean, Column, DateTime, Float, Integer, String

from .database import Base

# SQLAlchemy model for a sale transaction, replaced wholesale by the seed loader
class Transaction(Base):
    __tablename__ = "transactions"
    pk = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String, index=True) # identifier supplied by the external feed
    title = Column(String, nullable=False)
    price = Column(Float, nullable=False)
    description = Column(String)
    date_of_sale = Column(DateTime, nullable=False) # naive UTC
    category = Column(String, nullable=False, index=True)
    sold = Column(Boolean, nullable=False)
    image = Column(String)
