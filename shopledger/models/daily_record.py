from sqlalchemy import (
    BigInteger,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from shopledger.core.database import Base
from shopledger.models.shop import utcnow

# Денежные поля хранятся в копейках (целые числа)
MONEY_FIELDS = (
    "revenue_main_with_margin",
    "revenue_main_without_margin",
    "revenue_order_with_margin",
    "revenue_order_without_margin",
    "main_stock_value",
    "order_stock_value",
)


class DailyRecord(Base):
    __tablename__ = "daily_records"

    id = Column(Integer, primary_key=True, index=True)
    shop_id = Column(
        Integer, ForeignKey("shops.id", ondelete="CASCADE"), nullable=False
    )
    record_date = Column(Date, nullable=False, index=True)
    revenue_main_with_margin = Column(BigInteger, nullable=False, default=0)
    revenue_main_without_margin = Column(BigInteger, nullable=False, default=0)
    revenue_order_with_margin = Column(BigInteger, nullable=False, default=0)
    revenue_order_without_margin = Column(BigInteger, nullable=False, default=0)
    main_stock_value = Column(BigInteger, nullable=False, default=0)
    order_stock_value = Column(BigInteger, nullable=False, default=0)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    shop = relationship("Shop", back_populates="daily_records")

    __table_args__ = (
        UniqueConstraint("shop_id", "record_date", name="uq_daily_records_shop_date"),
    )
