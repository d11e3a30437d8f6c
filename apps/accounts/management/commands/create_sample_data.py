"""
Management command to create sample data for trying out the API.

Usage:
    python manage.py create_sample_data [--clear]

This creates:
- 1 admin who also owns the sample properties (admin@example.com)
- 2 tenant logins (john.smith@example.com, sarah.johnson@example.com)
- 2 properties with 5 rooms
- 2 tenants placed through the occupancy service
- a paid and an awaiting-approval rent payment
"""

from datetime import date
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from apps.accounts.models import User, Role
from apps.payments.models import Payment, PaymentStatus, PaymentType
from apps.payments.services import create_payment, approve_payment
from apps.properties.models import Property, Room, RoomType
from apps.tenants.models import Tenant
from apps.tenants.services import assign_tenant

PASSWORD = 'password123'

PROPERTIES = [
    {
        'name': 'Sunshine Apartments',
        'address': '123 Main Street',
        'city': 'New York',
        'state': 'NY',
        'zip_code': '10001',
        'total_rooms': 3,
        'rooms': [
            ('101', '1', RoomType.SINGLE, 1, '500'),
            ('102', '1', RoomType.DOUBLE, 2, '800'),
            ('201', '2', RoomType.SINGLE, 1, '550'),
        ],
    },
    {
        'name': 'Green Valley Residency',
        'address': '456 Park Avenue',
        'city': 'Los Angeles',
        'state': 'CA',
        'zip_code': '90001',
        'total_rooms': 2,
        'rooms': [
            ('301', '3', RoomType.SUITE, 3, '1200'),
            ('302', '3', RoomType.DOUBLE, 2, '900'),
        ],
    },
]

TENANTS = [
    {
        'property': 'Sunshine Apartments',
        'room': '102',
        'name': 'John Smith',
        'email': 'john.smith@example.com',
        'phone': '+1 (555) 123-4567',
        'lease_start': date(2023, 1, 1),
        'lease_end': date(2024, 12, 31),
        'rent_amount': Decimal('850'),
    },
    {
        'property': 'Green Valley Residency',
        'room': '302',
        'name': 'Sarah Johnson',
        'email': 'sarah.johnson@example.com',
        'phone': '+1 (555) 234-5678',
        'lease_start': date(2023, 2, 15),
        'lease_end': date(2024, 10, 15),
        'rent_amount': Decimal('950'),
    },
]


class Command(BaseCommand):
    help = 'Create sample data for testing the API'

    def add_arguments(self, parser):
        parser.add_argument(
            '--clear',
            action='store_true',
            help='Clear existing data before creating new sample data',
        )

    @transaction.atomic
    def handle(self, *args, **options):
        if options['clear']:
            self.stdout.write('Clearing existing data...')
            self.clear_data()

        self.stdout.write('Creating sample data...')

        admin = self.create_users()
        properties = self.create_properties(admin)
        tenants = self.create_tenants(admin, properties)
        self.create_payments(admin, tenants)

        self.stdout.write(self.style.SUCCESS('Sample data created successfully!'))
        self.stdout.write('')
        self.stdout.write('Test accounts:')
        self.stdout.write(f'  admin@example.com / {PASSWORD} (admin, owns the properties)')
        for seed in TENANTS:
            self.stdout.write(f"  {seed['email']} / {PASSWORD} (tenant)")

    def clear_data(self):
        """Clear all property data and the sample accounts."""
        Payment.objects.all().delete()
        Tenant.objects.all().delete()
        Room.objects.all().delete()
        Property.objects.all().delete()
        emails = ['admin@example.com'] + [seed['email'] for seed in TENANTS]
        User.objects.filter(email__in=emails).delete()

    def create_users(self):
        admin, created = User.objects.get_or_create(
            email='admin@example.com',
            defaults={
                'name': 'Admin User',
                'role': Role.ADMIN,
                'is_staff': True,
                'is_superuser': True,
            },
        )
        if created:
            admin.set_password(PASSWORD)
            admin.save()

        for seed in TENANTS:
            user, created = User.objects.get_or_create(
                email=seed['email'],
                defaults={'name': seed['name']},
            )
            if created:
                user.set_password(PASSWORD)
                user.save()

        self.stdout.write(f'  Users ready ({1 + len(TENANTS)})')
        return admin

    def create_properties(self, owner):
        properties = {}
        for seed in PROPERTIES:
            prop, _ = Property.objects.get_or_create(
                owner=owner,
                name=seed['name'],
                defaults={
                    key: seed[key]
                    for key in ('address', 'city', 'state', 'zip_code', 'total_rooms')
                },
            )
            for number, floor, room_type, capacity, price in seed['rooms']:
                Room.objects.get_or_create(
                    property=prop,
                    room_number=number,
                    defaults={
                        'floor': floor,
                        'type': room_type,
                        'capacity': capacity,
                        'price': Decimal(price),
                    },
                )
            properties[prop.name] = prop

        self.stdout.write(f'  Properties ready ({len(properties)})')
        return properties

    def create_tenants(self, owner, properties):
        tenants = []
        for seed in TENANTS:
            prop = properties[seed['property']]
            room = prop.rooms.get(room_number=seed['room'])
            existing = Tenant.objects.filter(room=room).first()
            if existing:
                tenants.append(existing)
                continue

            tenants.append(assign_tenant(
                caller=owner,
                property_id=prop.id,
                room_id=room.id,
                name=seed['name'],
                email=seed['email'],
                phone=seed['phone'],
                lease_start=seed['lease_start'],
                lease_end=seed['lease_end'],
                rent_amount=seed['rent_amount'],
            ))

        self.stdout.write(f'  Tenants placed ({len(tenants)})')
        return tenants

    def create_payments(self, owner, tenants):
        if Payment.objects.filter(tenant__in=tenants).exists():
            return

        john, sarah = tenants
        john_user = User.objects.get(email=john.email)
        sarah_user = User.objects.get(email=sarah.email)

        paid = create_payment(
            caller=john_user,
            tenant_id=john.id,
            amount=john.rent_amount,
            payment_type=PaymentType.RENT,
            status=PaymentStatus.WAITING_APPROVAL,
        )
        approve_payment(payment_id=paid.id, caller=owner)

        create_payment(
            caller=sarah_user,
            tenant_id=sarah.id,
            amount=sarah.rent_amount,
            payment_type=PaymentType.RENT,
            status=PaymentStatus.WAITING_APPROVAL,
        )

        self.stdout.write('  Payments created (2)')
