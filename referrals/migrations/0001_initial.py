# Generated manually for the referrals app

from decimal import Decimal
import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models
import uuid


RATE_VALIDATORS = [
    django.core.validators.MinValueValidator(Decimal('0')),
    django.core.validators.MaxValueValidator(Decimal('100')),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('accounts', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Referral',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('status', models.CharField(choices=[('PENDING', 'Pending'), ('COMPLETED', 'Completed')], default='PENDING', max_length=20)),
                ('commission_paid', models.BooleanField(default=False)),
                ('group', models.ForeignKey(help_text='The tenant group this object belongs to', on_delete=django.db.models.deletion.CASCADE, related_name='%(app_label)s_%(class)s_set', to='accounts.group')),
                ('referred', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='referral', to=settings.AUTH_USER_MODEL)),
                ('referrer', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='referrals_made', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'referrals',
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='ReferralSettings',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('property_commission_rate', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=5, validators=RATE_VALIDATORS)),
                ('equipment_commission_rate', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=5, validators=RATE_VALIDATORS)),
                ('market_commission_rate', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=5, validators=RATE_VALIDATORS)),
                ('green_energy_commission_rate', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=5, validators=RATE_VALIDATORS)),
                ('group', models.ForeignKey(help_text='The tenant group this object belongs to', on_delete=django.db.models.deletion.CASCADE, related_name='%(app_label)s_%(class)s_set', to='accounts.group')),
                ('updated_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name_plural': 'referral settings',
                'db_table': 'referral_settings',
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='ReferralCommission',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('amount', models.DecimalField(decimal_places=2, max_digits=15)),
                ('rate', models.DecimalField(decimal_places=2, max_digits=5, validators=RATE_VALIDATORS)),
                ('transaction_type', models.CharField(choices=[('REAL_ESTATE_INVESTMENT', 'Real estate investment'), ('PROPERTY_PURCHASE', 'Property purchase'), ('EQUIPMENT_PURCHASE', 'Equipment purchase'), ('MARKET_INVESTMENT', 'Market investment'), ('GREEN_ENERGY_INVESTMENT', 'Green energy investment')], max_length=30)),
                ('investment_reference', models.CharField(blank=True, max_length=100)),
                ('status', models.CharField(choices=[('PENDING', 'Pending'), ('PAID', 'Paid'), ('REJECTED', 'Rejected')], db_index=True, default='PENDING', max_length=20)),
                ('paid_at', models.DateTimeField(blank=True, null=True)),
                ('rejection_reason', models.TextField(blank=True)),
                ('group', models.ForeignKey(help_text='The tenant group this object belongs to', on_delete=django.db.models.deletion.CASCADE, related_name='%(app_label)s_%(class)s_set', to='accounts.group')),
                ('referral', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='commissions', to='referrals.referral')),
                ('referred', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='commissions_generated', to=settings.AUTH_USER_MODEL)),
                ('referrer', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='commissions_earned', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'referral_commissions',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['referrer', 'status'], name='commission_referrer_status_idx'),
                ],
            },
        ),
    ]
