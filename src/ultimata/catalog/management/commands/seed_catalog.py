"""Management command to seed demo categories and products for Ultimata Shop."""

from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from ultimata.catalog.models import Category, Product


CATEGORIES = [
    {
        "name": "Streaming",
        "slug": "streaming",
        "description": "Video and music streaming accounts.",
    },
    {
        "name": "Gaming",
        "slug": "gaming",
        "description": "Game platform accounts and in-game bundles.",
    },
    {
        "name": "Combo Lists",
        "slug": "combo-lists",
        "description": "Downloadable combo list files.",
    },
]

PRODUCTS = [
    {
        "name": "Streaming Premium (1 month)",
        "description": "Premium streaming account, 4 screens, valid for 30 days.",
        "price": Decimal("4.99"),
        "stock": 25,
        "type": Product.Type.ACCOUNT,
        "category_slug": "streaming",
        "featured": True,
    },
    {
        "name": "Music Family Plan (3 months)",
        "description": "Family music subscription for up to six members.",
        "price": Decimal("9.50"),
        "stock": 10,
        "type": Product.Type.ACCOUNT,
        "category_slug": "streaming",
    },
    {
        "name": "Game Pass Ultimate (1 month)",
        "description": "Console and PC game pass with online play.",
        "price": Decimal("7.25"),
        "stock": 15,
        "type": Product.Type.ACCOUNT,
        "category_slug": "gaming",
        "featured": True,
    },
    {
        "name": "Mixed Combo Pack",
        "description": "Combo list file, delivered as a download after purchase.",
        "price": Decimal("2.00"),
        "stock": 100,
        "type": Product.Type.COMBO,
        "category_slug": "combo-lists",
    },
]


class Command(BaseCommand):
    help = "Seed demo categories and products"

    def add_arguments(self, parser):
        parser.add_argument(
            "--force",
            action="store_true",
            help="Delete existing seeded products and recreate them",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        self.stdout.write("\nCreating categories...")
        category_map = {}
        for cat_data in CATEGORIES:
            category, created = Category.objects.get_or_create(
                slug=cat_data["slug"],
                defaults={"name": cat_data["name"], "description": cat_data["description"]},
            )
            category_map[cat_data["slug"]] = category
            if created:
                self.stdout.write(self.style.SUCCESS(f"  Created: {cat_data['name']}"))
            else:
                self.stdout.write(f"  Skipping existing category: {cat_data['name']}")

        self.stdout.write("\nCreating products...")
        created_count = 0
        for product_data in PRODUCTS:
            data = dict(product_data)
            category = category_map[data.pop("category_slug")]

            existing = Product.objects.filter(name=data["name"]).first()
            if existing:
                if options["force"] and not existing.order_items.exists():
                    existing.delete()
                    self.stdout.write(f"  Deleted existing product: {data['name']}")
                else:
                    self.stdout.write(f"  Skipping existing product: {data['name']}")
                    continue

            Product.objects.create(category=category, **data)
            created_count += 1
            self.stdout.write(self.style.SUCCESS(f"  Created: {data['name']}"))

        self.stdout.write(self.style.SUCCESS("\nCatalog seed complete!"))
        self.stdout.write(f"  Categories: {len(CATEGORIES)}")
        self.stdout.write(f"  Products created: {created_count}")
