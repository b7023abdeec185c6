from __future__ import annotations

import random
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand

from modules.accounts.constants import Role
from modules.accounts.models import Profile
from modules.accounts.repositories.django_repository import AccountDjangoRepository
from modules.catalog.models import Product, ProductStatus
from modules.catalog.repositories.django_repository import ProductDjangoRepository
from modules.orders.dtos import CreateOrderDTO
from modules.orders.models import Order
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService
from shared.domain.value_objects import Address

SEED_USERS = [
    # username, password, roles, profile
    (
        "admin",
        "admin123",
        [Role.ADMIN],
        {"full_name": "Market Admin", "location_city": "Lagos", "location_state": "Lagos"},
    ),
    (
        "seller",
        "seller123",
        [Role.SELLER, Role.BUYER],
        {
            "full_name": "Adaeze Okafor",
            "business_name": "Okafor Farms",
            "phone": "08031234567",
            "street_address": "12 Farm Road",
            "location_city": "Ibadan",
            "location_state": "Oyo",
        },
    ),
    (
        "buyer",
        "buyer123",
        [Role.BUYER],
        {
            "full_name": "Tunde Bello",
            "phone": "08029876543",
            "street_address": "4 Allen Avenue",
            "location_city": "Ikeja",
            "location_state": "Lagos",
        },
    ),
    (
        "agent1",
        "agent123",
        [Role.DELIVERY_AGENT],
        {"full_name": "Musa Ibrahim", "location_city": "Lagos", "location_state": "Lagos"},
    ),
    (
        "agent2",
        "agent123",
        [Role.DELIVERY_AGENT],
        {"full_name": "Ngozi Eze", "location_city": "Ibadan", "location_state": "Oyo"},
    ),
]

SEED_PRODUCTS = [
    ("Yam tubers (10)", Decimal("5000.00")),
    ("Fresh tomatoes (basket)", Decimal("12000.00")),
    ("Local rice (25kg)", Decimal("38000.00")),
    ("Palm oil (5L)", Decimal("9500.00")),
    ("Plantain (bunch)", Decimal("3500.00")),
]


class Command(BaseCommand):
    help = "Seed database with marketplace users, products and pending orders."

    def handle(self, *args, **options):
        random.seed(42)
        self.stdout.write("Seeding development data...")

        users = self._seed_users()
        products = self._seed_products(users["seller"])
        orders_created = self._seed_orders(users["buyer"], products)

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"users={len(users)}, "
                f"products={len(products)}, "
                f"orders={orders_created}"
            )
        )

    def _seed_users(self) -> dict:
        User = get_user_model()
        accounts = AccountDjangoRepository()
        users = {}
        for username, password, roles, profile in SEED_USERS:
            user = User.objects.filter(username=username).first()
            if user is None:
                if Role.ADMIN in roles:
                    user = User.objects.create_superuser(username, password=password)
                else:
                    user = User.objects.create_user(username, password=password)
            Profile.objects.update_or_create(user=user, defaults=profile)
            accounts.assign_roles(user.pk, roles)
            users[username] = user
        return users

    def _seed_products(self, seller) -> list[Product]:
        self.stdout.write("Creating products...")
        products: list[Product] = []
        for title, price in SEED_PRODUCTS:
            product, _ = Product.objects.get_or_create(
                seller=seller,
                title=title,
                defaults={"price": price, "status": ProductStatus.ACTIVE},
            )
            products.append(product)
        self.stdout.write(self.style.SUCCESS("Creating products... Done!"))
        return products

    def _seed_orders(self, buyer, products: list[Product]) -> int:
        self.stdout.write("Creating orders...")
        if Order.objects.filter(buyer=buyer).exists():
            self.stdout.write(self.style.WARNING("Skipping orders (already seeded)."))
            return 0

        service = OrderService(
            order_repository=OrderDjangoRepository(),
            product_repository=ProductDjangoRepository(),
        )
        address = Address(
            full_name="Tunde Bello",
            address="4 Allen Avenue",
            city="Ikeja",
            state="Lagos",
            phone="08029876543",
        )
        for i, product in enumerate(products):
            service.create_order(
                CreateOrderDTO(
                    buyer_id=buyer.pk,
                    product_id=product.id,
                    quantity=random.randint(1, 3),
                    shipping_address=address,
                    notes=f"Seed order {i + 1}",
                    idempotency_key=f"seed-order-{i + 1}",
                )
            )
        self.stdout.write(self.style.SUCCESS("Creating orders... Done!"))
        return len(products)
