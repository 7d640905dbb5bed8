"""
Django management command to clear CRM data and create a default admin user
"""
from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction

from activities.models import Activity, Interaction, Opportunity
from customers.models import Customer, Sale
from inventory.models import Product, ProductCategory
from leads.models import Lead, LeadActivity
from orders.models import Order, OrderItem

User = get_user_model()

# Children before parents; customers and orders are PROTECT-referenced
DELETE_ORDER = (
    Activity,
    Interaction,
    Opportunity,
    Sale,
    OrderItem,
    LeadActivity,
    Order,
    Lead,
    Customer,
    Product,
    ProductCategory,
)


class Command(BaseCommand):
    help = 'Clears CRM data and creates the default admin user'

    def add_arguments(self, parser):
        parser.add_argument(
            '--keep-data',
            action='store_true',
            help='Keep existing data (only recreate the admin user)',
        )
        parser.add_argument('--username', default='admin')
        parser.add_argument('--email', default='admin@example.com')
        parser.add_argument('--password', default='admin@123')

    def handle(self, *args, **options):
        if not options['keep_data']:
            self.stdout.write(self.style.WARNING('Resetting database...'))
            with transaction.atomic():
                for model in DELETE_ORDER:
                    deleted, _ = model.objects.all().delete()
                    self.stdout.write(f'  {model._meta.verbose_name_plural}: {deleted} deleted')
            self.stdout.write(self.style.SUCCESS('Database tables cleared'))
        else:
            self.stdout.write(self.style.NOTICE('Keeping existing data...'))

        self.stdout.write('Creating default admin user...')
        User.objects.filter(username=options['username']).delete()
        admin_user = User.objects.create_superuser(
            username=options['username'],
            email=options['email'],
            password=options['password'],
        )

        self.stdout.write(self.style.SUCCESS(f'Admin user created: {admin_user.username}'))
        self.stdout.write(self.style.SUCCESS(f'  Email: {admin_user.email}'))
