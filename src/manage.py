"""UhuyShop management CLI.

Creates and drops the database schema, seeds dummy catalogue data and
promotes users to administrators.

Usage:
    python src/manage.py setup-db               # Create all tables
    python src/manage.py drop-db                # Drop all tables
    python src/manage.py seed --products 100    # Dummy categories, products, banners, coupons
    python src/manage.py promote-admin <user_id>
"""

import argparse
import json
import random
import sys
import time
from datetime import UTC, datetime, timedelta

DUMMY_CATEGORIES = [
    {"name": "Elektronik", "slug": "elektronik", "description": "Kategori elektronik dummy", "sort_order": 1},
    {"name": "Fashion", "slug": "fashion", "description": "Kategori fashion dummy", "sort_order": 2},
    {"name": "Rumah Tangga", "slug": "rumah-tangga", "description": "Kategori rumah tangga dummy", "sort_order": 3},
    {"name": "Kesehatan", "slug": "kesehatan", "description": "Kategori kesehatan dummy", "sort_order": 4},
    {"name": "Olahraga", "slug": "olahraga", "description": "Kategori olahraga dummy", "sort_order": 5},
]

BRANDS = ["Aster", "Nexa", "Velora", "Kairo", "Lumina", "Orion"]
TAGS = ["promo", "baru", "favorit", "hemat", "unggulan", "terlaris"]

DUMMY_BANNERS = [
    {"title": "Promo Akhir Bulan", "subtitle": "Diskon hingga 50%", "image_url": "https://picsum.photos/seed/banner-1/1200/400", "link_url": "/products?tags=promo", "sort_order": 1},
    {"title": "Produk Terbaru", "subtitle": "Koleksi minggu ini", "image_url": "https://picsum.photos/seed/banner-2/1200/400", "link_url": "/products?sort=created_at", "sort_order": 2},
]

DUMMY_COUPONS = [
    {"code": "HEMAT10", "description": "Diskon 10% maksimal Rp 10.000", "discount_type": "percentage", "discount_value": 10, "max_discount": 10000},
    {"code": "POTONG25K", "description": "Potongan Rp 25.000 min. belanja Rp 200.000", "discount_type": "flat", "discount_value": 25000, "min_purchase": 200000, "usage_limit": 100},
]


def _init_domain():
    from storefront.domain import storefront

    storefront.init()
    return storefront


def setup_database():
    from storefront.utils.db import setup_db

    domain = _init_domain()
    print("Creating storefront database schema...")
    setup_db(domain)
    print("Done.")


def drop_database():
    from storefront.utils.db import drop_db

    domain = _init_domain()
    print("Dropping storefront database schema...")
    drop_db(domain)
    print("Done.")


def _product_payload(index, category_id, seed_key):
    running = f"{index + 1:03d}"
    base_price = random.randint(50000, 950000)
    name = f"Produk Dummy {running}"
    return {
        "name": name,
        "slug": f"produk-dummy-{running}-{seed_key}",
        "description": f"Ini adalah deskripsi produk dummy ke-{running} untuk kebutuhan development/testing.",
        "short_description": f"Produk dummy {running}",
        "price": base_price,
        "compare_price": base_price + random.randint(5000, 80000),
        "cost_price": max(1000, base_price - random.randint(2000, 15000)),
        "sku": f"DUMMY-{running}-{seed_key}",
        "stock": random.randint(5, 200),
        "weight": round(random.uniform(0.3, 4.8), 2),
        "category_id": category_id,
        "brand": random.choice(BRANDS),
        "tags": json.dumps(sorted({random.choice(TAGS), random.choice(TAGS)})),
        "is_featured": index % 10 == 0,
        "images": json.dumps(
            [{"url": f"https://picsum.photos/seed/uhuy-{seed_key}-{index + 1}/800/800", "alt_text": name}]
        ),
    }


def seed(total_products: int):
    from protean.exceptions import ObjectNotFoundError

    from storefront.catalogue.banner.banner import CreateBanner
    from storefront.catalogue.category.management import CreateCategory, find_category_by_slug
    from storefront.catalogue.product.creation import CreateProduct
    from storefront.ordering.coupon.coupon import Coupon
    from storefront.ordering.coupon.management import CreateCoupon

    domain = _init_domain()
    seed_key = str(int(time.time()))[-6:]

    with domain.domain_context():
        category_ids = []
        for payload in DUMMY_CATEGORIES:
            try:
                category_ids.append(str(find_category_by_slug(payload["slug"], active_only=False).id))
            except ObjectNotFoundError:
                category_ids.append(domain.process(CreateCategory(**payload), asynchronous=False))
        print(f"Using {len(category_ids)} categories")

        for index in range(total_products):
            category_id = category_ids[index % len(category_ids)]
            domain.process(CreateProduct(**_product_payload(index, category_id, seed_key)), asynchronous=False)
        print(f"Inserted {total_products} dummy products with primary images")

        for payload in DUMMY_BANNERS:
            domain.process(CreateBanner(**payload), asynchronous=False)

        coupon_repo = domain.repository_for(Coupon)
        expires_at = datetime.now(UTC) + timedelta(days=90)
        for payload in DUMMY_COUPONS:
            if coupon_repo.find_by_code(payload["code"], active_only=False) is None:
                domain.process(CreateCoupon(expires_at=expires_at, **payload), asynchronous=False)
        print(f"Coupons ready: {', '.join(c['code'] for c in DUMMY_COUPONS)}")

    print("Done.")


def promote_admin(user_id: str):
    from storefront.identity.management import AssignRole, ProvisionProfile

    domain = _init_domain()
    with domain.domain_context():
        domain.process(ProvisionProfile(user_id=user_id), asynchronous=False)
        domain.process(AssignRole(user_id=user_id, role="admin"), asynchronous=False)
    print(f"User {user_id} is now an admin.")


def main():
    parser = argparse.ArgumentParser(description="UhuyShop management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    seed_parser = subparsers.add_parser("seed", help="Insert dummy catalogue data and coupons")
    seed_parser.add_argument("--products", type=int, default=100, help="Number of dummy products (default: 100)")

    promote_parser = subparsers.add_parser("promote-admin", help="Grant the admin role to a user")
    promote_parser.add_argument("user_id", help="Identity provider user id")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "seed":
        seed(args.products)
    elif args.command == "promote-admin":
        promote_admin(args.user_id)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
