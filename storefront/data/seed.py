# storefront/data/seed.py
from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.data.database import default_session_factory
from storefront.data.models.product import ProductModel, ProductVariantModel
from storefront.domain.enums import Role
from storefront.services.identity import IdentityProvider
from storefront.utils.logging import get_logger, setup_logging
from storefront.utils.settings import SERVICE_NAME

logger = get_logger(__name__)

USERS = [
    ("admin@example.com", "admin123", "Admin User", Role.ADMIN),
    ("customer@example.com", "customer123", "Customer User", Role.CUSTOMER),
]

# ceny w centach
PRODUCTS = [
    {
        "title": "Premium T-Shirt",
        "description": "High-quality cotton t-shirt with modern design.",
        "variants": [("Small", "TSHIRT-S", 1999, 50), ("Medium", "TSHIRT-M", 1999, 75), ("Large", "TSHIRT-L", 1999, 60)],
    },
    {
        "title": "Wireless Headphones",
        "description": "Noise-cancelling over-ear headphones.",
        "variants": [("Black", "HEAD-BLK", 9999, 30), ("White", "HEAD-WHT", 9999, 20)],
    },
    {
        "title": "Leather Wallet",
        "description": "Slim bifold wallet.",
        "variants": [("Brown", "WALLET-BRN", 3499, 40)],
    },
]


def seed(db: Session) -> None:
    identity = IdentityProvider(db)
    for email, password, name, role in USERS:
        if identity.repo.get_by_email(email) is None:
            identity.register(email, password, name, role=role)

    # only seed catalog if empty
    if db.execute(select(ProductModel.id).limit(1)).first():
        return

    for data in PRODUCTS:
        product = ProductModel(title=data["title"], description=data["description"])
        product.variants = [
            ProductVariantModel(name=name, sku=sku, price=price, stock=stock)
            for name, sku, price, stock in data["variants"]
        ]
        db.add(product)
    db.commit()
    logger.info(f"Seeded {len(USERS)} users and {len(PRODUCTS)} products")


if __name__ == "__main__":
    setup_logging(SERVICE_NAME)
    session = default_session_factory()()
    try:
        seed(session)
    finally:
        session.close()
