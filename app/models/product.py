# app/models/product.py
from sqlalchemy import Column, Integer, String, ForeignKey
from sqlalchemy.orm import relationship
from app.db.session import Base

# Справочные данные каталога: ядро их только читает

class Product(Base):
    __tablename__ = "products"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, index=True)
    price = Column(Integer, nullable=False, default=0)

    options = relationship("ProductOption", back_populates="product")


class ProductOption(Base):
    __tablename__ = "product_options"
    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    price = Column(Integer, nullable=False, default=0)

    # 'ACTIVE' | 'INACTIVE'
    status = Column(String, default="ACTIVE", nullable=False, server_default='ACTIVE')

    product = relationship("Product", back_populates="options")
