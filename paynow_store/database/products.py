"""Storefront product catalogue"""

from typing import Optional
from ..models.product import Product

# Demo catalogue
PRODUCTS: dict[str, Product] = {
    "prod-001": Product(
        id="prod-001",
        name="Wireless Headphones",
        description="Over-ear noise cancelling headphones with 30-hour battery life.",
        price=89.99,
        image_url="/static/images/headphones.jpg",
    ),
    "prod-002": Product(
        id="prod-002",
        name="Smart Watch",
        description="Fitness tracking, heart-rate monitor and notifications on your wrist.",
        price=149.50,
        image_url="/static/images/smart-watch.jpg",
    ),
    "prod-003": Product(
        id="prod-003",
        name="Bluetooth Speaker",
        description="Portable waterproof speaker with deep bass.",
        price=45.00,
        image_url="/static/images/speaker.jpg",
    ),
    "prod-004": Product(
        id="prod-004",
        name="Phone Charger",
        description="20W USB-C fast charger.",
        price=19.995,
        image_url="/static/images/charger.jpg",
    ),
    "prod-005": Product(
        id="prod-005",
        name="Laptop Backpack",
        description="Water resistant backpack with a padded 15-inch laptop sleeve.",
        price=39.99,
        image_url="/static/images/backpack.jpg",
    ),
    "prod-006": Product(
        id="prod-006",
        name="Coffee Mug",
        description="Insulated stainless steel mug, keeps drinks hot for 6 hours.",
        price=12.49,
        image_url="/static/images/mug.jpg",
    ),
}


class ProductDatabase:
    """In-memory product catalogue"""

    def __init__(self):
        self.products = PRODUCTS.copy()

    def get_product(self, product_id: str) -> Optional[Product]:
        """Get a product by ID"""
        return self.products.get(product_id)

    def get_all_products(self) -> list[Product]:
        """Get all products"""
        return list(self.products.values())


# Singleton instance
product_db = ProductDatabase()
