# app/models/funding.py
import enum

from sqlalchemy import Column, Integer, String, Text, Date, Boolean, ForeignKey, DateTime, Enum, func
from sqlalchemy.orm import relationship
from app.db.session import Base


class FundingStatus(str, enum.Enum):
    PRE_PROGRESS = "PRE_PROGRESS"
    IN_PROGRESS = "IN_PROGRESS"
    # Терминальные статусы выставляет платежный контур, ядро их только читает
    SUCCESS = "SUCCESS"
    FAIL = "FAIL"


class AnniversaryCategory(Base):
    __tablename__ = "anniversary_categories"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, unique=True)


class Funding(Base):
    __tablename__ = "fundings"

    id = Column(Integer, primary_key=True, index=True)
    consumer_id = Column(Integer, ForeignKey("consumers.id"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)
    product_option_id = Column(Integer, ForeignKey("product_options.id"), nullable=False)
    anniversary_category_id = Column(Integer, ForeignKey("anniversary_categories.id"), nullable=False)

    title = Column(String, nullable=False)
    content = Column(Text, nullable=True)
    # Цена опции на момент создания фандинга
    target_price = Column(Integer, nullable=False, default=0)

    start_date = Column(Date, nullable=False)
    anniversary_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)

    is_private = Column(Boolean, default=False, nullable=False, server_default='false')
    # Выставляется только при создании, см. DESIGN.md
    status = Column(Enum(FundingStatus, name="funding_status"), nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    consumer = relationship("Consumer")
    product = relationship("Product")
    product_option = relationship("ProductOption")
    anniversary_category = relationship("AnniversaryCategory")
