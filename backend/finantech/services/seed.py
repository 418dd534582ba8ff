# Overview: Demo catalog loaded when no products snapshot exists.

from __future__ import annotations

from decimal import Decimal

from ..models import Product


SEED_PRODUCTS = (
    ("1", "Kopi Kapal Api 165g", "Minuman", "15000", "12000", 50, 10),
    ("2", "Indomie Goreng Original", "Makanan", "3000", "2400", 120, 20),
    ("3", "Minyak Goreng Filma 2L", "Sembako", "38000", "34000", 5, 10),
    ("4", "Beras Pandan Wangi 5kg", "Sembako", "75000", "65000", 15, 5),
)


def seed_catalog() -> list[Product]:
    return [
        Product(
            id=pid,
            name=name,
            category=category,
            price=Decimal(price),
            cost_price=Decimal(cost),
            stock=stock,
            min_stock=min_stock,
        )
        for pid, name, category, price, cost, stock, min_stock in SEED_PRODUCTS
    ]
