from __future__ import annotations

import random
from decimal import Decimal
from uuid import UUID

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand

from modules.products.constants import ProductStatus
from modules.products.dtos import CreateProductDTO
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.selectors import ProductSelector
from modules.products.services import ProductService

CATEGORY_IDS = {
    "electronics": UUID("01900000-0000-7000-8000-000000000001"),
    "furniture": UUID("01900000-0000-7000-8000-000000000002"),
    "office": UUID("01900000-0000-7000-8000-000000000003"),
}

# sku, name, category, brand, price, weight, tags
CATALOG = [
    ("ELEC-001", 'Monitor 27"', "electronics", "Viewline", "1299.90", "6.20", ["display", "4k"]),
    ("ELEC-002", "Mechanical Keyboard", "electronics", "Keyforge", "399.90", "1.10", ["peripheral", "rgb"]),
    ("ELEC-003", "Gaming Mouse", "electronics", "Keyforge", "249.90", "0.12", ["peripheral", "rgb"]),
    ("ELEC-004", 'Laptop 14"', "electronics", "Northbook", "3999.00", "1.40", ["portable"]),
    ("ELEC-005", "Headset", "electronics", "Soundmark", "299.90", "0.35", ["audio"]),
    ("FURN-001", "Office Desk", "furniture", "Oakline", "899.00", "32.00", ["desk"]),
    ("FURN-002", "Ergonomic Chair", "furniture", "Oakline", "1499.00", "18.50", ["chair", "ergonomic"]),
    ("FURN-003", "Bookshelf", "furniture", "Oakline", "699.00", "25.00", ["storage"]),
    ("FURN-004", "Cabinet", "furniture", "Steelhome", "1199.00", "40.00", ["storage"]),
    ("FURN-005", "Two-seat Sofa", "furniture", "Steelhome", "2299.00", "55.00", ["lounge"]),
    ("OFF-001", "A4 Paper", "office", "Papyra", "29.90", "2.50", ["paper"]),
    ("OFF-002", "Blue Pen", "office", "Inkwell", "4.90", None, ["writing"]),
    ("OFF-003", "Notebook", "office", "Papyra", "19.90", "0.30", ["paper", "writing"]),
    ("OFF-004", "Stapler", "office", "Steelhome", "39.90", "0.25", []),
    ("OFF-005", "Sticky Notes", "office", "Papyra", "12.90", None, ["paper"]),
    ("OFF-006", "Planner", "office", "Papyra", "49.90", "0.40", ["paper"]),
    ("OFF-007", "Highlighter", "office", "Inkwell", "9.90", None, ["writing"]),
    ("OFF-008", "Calculator", "office", "Northbook", "89.90", "0.20", []),
    ("OFF-009", "LED Desk Lamp", "office", "Viewline", "59.90", "0.90", ["lighting"]),
    ("OFF-010", "Laptop Stand", "office", "Oakline", "149.90", "1.20", ["ergonomic"]),
]

STATUS_WEIGHTS = [
    (ProductStatus.ACTIVE, 0.70),
    (ProductStatus.DRAFT, 0.10),
    (ProductStatus.INACTIVE, 0.10),
    (ProductStatus.DISCONTINUED, 0.10),
]


class Command(BaseCommand):
    help = "Seed database with a demo product catalog."

    def handle(self, *args, **options):
        random.seed(42)
        self.stdout.write("Seeding development data...")

        users_created = self._seed_users()
        products_created = self._seed_products()

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"users={users_created}, "
                f"products={products_created}"
            )
        )

    def _seed_users(self) -> int:
        User = get_user_model()
        created = 0
        if not User.objects.filter(username="admin").exists():
            User.objects.create_superuser("admin", password="admin123")
            created += 1
        if not User.objects.filter(username="user").exists():
            User.objects.create_user("user", password="user123")
            created += 1
        return created

    def _seed_products(self) -> int:
        self.stdout.write("Creating products...")
        repository = ProductDjangoRepository()
        selector = ProductSelector(repository=repository)
        service = ProductService(repository=repository)

        statuses = [s for s, _ in STATUS_WEIGHTS]
        weights = [w for _, w in STATUS_WEIGHTS]

        created = 0
        for sku, name, category, brand, price, weight, tags in CATALOG:
            if selector.sku_exists(sku):
                continue
            quantity = random.randint(0, 200)
            status = random.choices(statuses, weights=weights, k=1)[0]
            if quantity == 0:
                status = ProductStatus.OUT_OF_STOCK
            service.create(
                CreateProductDTO(
                    sku=sku,
                    name=name,
                    description=f"{name} by {brand}",
                    price=Decimal(price),
                    quantity=quantity,
                    category_id=CATEGORY_IDS[category],
                    image_urls=[f"https://images.example.com/{sku.lower()}.jpg"],
                    status=status,
                    brand=brand,
                    weight=Decimal(weight) if weight else None,
                    tags=tags,
                )
            )
            created += 1
        self.stdout.write(self.style.SUCCESS("Creating products... Done!"))
        return created
