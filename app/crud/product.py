# app/crud/product.py
from sqlalchemy.orm import Session
from app.models.product import Product, ProductOption
from app.models.funding import AnniversaryCategory


def get_product_by_id(db: Session, product_id: int) -> Product | None:
    return db.query(Product).filter(Product.id == product_id).first()

def get_active_product_option_by_id(db: Session, product_option_id: int) -> ProductOption | None:
    """Опция находится только если она активна."""
    return db.query(ProductOption).filter(
        ProductOption.id == product_option_id,
        ProductOption.status == "ACTIVE"
    ).first()

def get_anniversary_category_by_id(db: Session, category_id: int) -> AnniversaryCategory | None:
    return db.query(AnniversaryCategory).filter(AnniversaryCategory.id == category_id).first()
