from __future__ import annotations

import random
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand

from modules.catalog.models import Electronic, School, SupplyPack

GRADE_SUPPLIES = {
    "Kindergarten": [
        ("k1", "Crayones de 24 colores", "Crayola", "3.99", 2, "Arte"),
        ("k2", "Marcadores lavables", "Crayola", "4.99", 1, "Arte"),
        ("k3", "Pegamento en barra", "Elmer's", "1.99", 4, "Oficina"),
        ("k4", "Tijeras punta roma", "Fiskars", "3.49", 1, "Oficina"),
        ("k5", "Cuadernos de composición", "Mead", "2.99", 3, "Papel"),
    ],
    "1st Grade": [
        ("1g1", "Lápices #2", "Ticonderoga", "4.99", 2, "Escritura"),
        ("1g2", "Borradores rosas", "Pink Pearl", "1.99", 4, "Escritura"),
        ("1g3", "Cuadernos rayados", "Mead", "2.99", 4, "Papel"),
        ("1g4", "Folders manila", "Generic", "0.79", 10, "Organización"),
    ],
    "3rd Grade": [
        ("3g1", "Lápices #2", "Ticonderoga", "4.99", 3, "Escritura"),
        ("3g2", "Bolígrafos azules", "BIC", "3.99", 1, "Escritura"),
        ("3g3", "Resaltadores", "Sharpie", "4.99", 1, "Escritura"),
        ("3g4", "Calculadora básica", "Texas Instruments", "12.99", 1, "Matemáticas"),
    ],
    "5th Grade": [
        ("5g1", "Lápices mecánicos", "BIC", "3.99", 3, "Escritura"),
        ("5g2", "Cuadernos de materias", "Five Star", "7.99", 4, "Papel"),
        ("5g3", "Calculadora científica", "Texas Instruments", "24.99", 1, "Matemáticas"),
        ("5g4", "Set de geometría", "Staedtler", "8.99", 1, "Matemáticas"),
    ],
}

SCHOOLS = [
    ("Lincoln Elementary", "1200 Oak Street", "(555) 201-4400", "Maria Torres"),
    ("Roosevelt Academy", "88 Maple Avenue", "(555) 330-1020", "James Carter"),
    ("Washington Primary", "410 Pine Road", "(555) 784-9031", "Ana Gutiérrez"),
]

ELECTRONICS = [
    ("Chromebook 11", "Acer", "Laptops", "229.00", "279.00", True),
    ("Tablet 10.1\"", "Samsung", "Tablets", "179.99", None, True),
    ("Calculadora gráfica TI-84", "Texas Instruments", "Calculadoras", "119.99", "139.99", True),
    ("Audífonos escolares", "JLab", "Audio", "19.99", None, True),
    ("Memoria USB 64GB", "SanDisk", "Almacenamiento", "12.99", None, False),
]


class Command(BaseCommand):
    help = "Seed database with realistic development data."

    def handle(self, *args, **options):
        random.seed(42)
        self.stdout.write("Seeding development data...")

        users_created = self._seed_users()
        schools = self._seed_schools()
        packs_created = self._seed_packs(schools)
        electronics_created = self._seed_electronics()

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"users={users_created}, "
                f"schools={len(schools)}, "
                f"packs={packs_created}, "
                f"electronics={electronics_created}"
            )
        )

    def _seed_users(self) -> int:
        User = get_user_model()
        created = 0
        if not User.objects.filter(username="admin").exists():
            User.objects.create_superuser("admin", password="admin123")
            created += 1
        if not User.objects.filter(username="parent").exists():
            User.objects.create_user(
                "parent", email="parent@example.com", password="parent123"
            )
            created += 1
        return created

    def _seed_schools(self) -> list[School]:
        self.stdout.write("Creating schools...")
        schools: list[School] = []
        for name, address, phone, principal in SCHOOLS:
            school, _ = School.objects.get_or_create(
                name=name,
                defaults={
                    "address": address,
                    "phone": phone,
                    "principal": principal,
                    "grades": ", ".join(GRADE_SUPPLIES),
                    "enrollment": random.randint(250, 900),
                    "is_active": True,
                },
            )
            schools.append(school)
        self.stdout.write(self.style.SUCCESS("Creating schools... Done!"))
        return schools

    def _seed_packs(self, schools: list[School]) -> int:
        self.stdout.write("Creating supply packs...")
        created = 0
        for school in schools:
            for grade, supplies in GRADE_SUPPLIES.items():
                items = [
                    {
                        "id": supply_id,
                        "name": name,
                        "brand": brand,
                        "price": price,
                        "quantity": quantity,
                        "category": category,
                    }
                    for supply_id, name, brand, price, quantity, category in supplies
                ]
                price = sum(
                    (Decimal(item["price"]) * item["quantity"] for item in items),
                    Decimal("0.00"),
                )
                _, was_created = SupplyPack.objects.get_or_create(
                    school=school,
                    grade=grade,
                    defaults={
                        "name": f"Pack - {grade} - {school.name}",
                        "description": f"Lista oficial de útiles de {grade}.",
                        "price": price,
                        "items": items,
                    },
                )
                created += int(was_created)
        self.stdout.write(self.style.SUCCESS("Creating supply packs... Done!"))
        return created

    def _seed_electronics(self) -> int:
        self.stdout.write("Creating electronics...")
        created = 0
        for name, brand, category, price, original, in_stock in ELECTRONICS:
            _, was_created = Electronic.objects.get_or_create(
                name=name,
                brand=brand,
                defaults={
                    "category": category,
                    "price": Decimal(price),
                    "original_price": Decimal(original) if original else None,
                    "in_stock": in_stock,
                    "rating": Decimal(str(round(random.uniform(3.8, 5.0), 1))),
                    "reviews": random.randint(5, 400),
                },
            )
            created += int(was_created)
        self.stdout.write(self.style.SUCCESS("Creating electronics... Done!"))
        return created
