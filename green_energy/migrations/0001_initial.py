# Generated manually for the green_energy app

from decimal import Decimal
import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models
import uuid


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('accounts', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='GreenEnergyPlan',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('name', models.CharField(max_length=255)),
                ('description', models.TextField(blank=True)),
                ('type', models.CharField(choices=[('SEMI_ANNUAL', 'Semi-Annual'), ('ANNUAL', 'Annual')], max_length=20)),
                ('min_amount', models.DecimalField(decimal_places=2, max_digits=15)),
                ('max_amount', models.DecimalField(decimal_places=2, max_digits=15)),
                ('return_rate', models.DecimalField(decimal_places=2, help_text='Return over the plan duration in percent', max_digits=5)),
                ('duration_months', models.PositiveSmallIntegerField()),
                ('image', models.URLField(blank=True, max_length=500)),
                ('is_active', models.BooleanField(default=True)),
                ('group', models.ForeignKey(help_text='The tenant group this object belongs to', on_delete=django.db.models.deletion.CASCADE, related_name='%(app_label)s_%(class)s_set', to='accounts.group')),
            ],
            options={
                'db_table': 'green_energy_plans',
                'ordering': ['min_amount'],
            },
        ),
        migrations.CreateModel(
            name='GreenEnergyInvestment',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('amount', models.DecimalField(decimal_places=2, max_digits=15)),
                ('status', models.CharField(choices=[('ACTIVE', 'Active'), ('MATURED', 'Matured'), ('CANCELLED', 'Cancelled')], db_index=True, default='ACTIVE', max_length=20)),
                ('start_date', models.DateTimeField(default=django.utils.timezone.now)),
                ('end_date', models.DateTimeField()),
                ('expected_return', models.DecimalField(decimal_places=2, max_digits=15)),
                ('actual_return', models.DecimalField(blank=True, decimal_places=2, max_digits=15, null=True)),
                ('reinvest', models.BooleanField(default=False)),
                ('group', models.ForeignKey(help_text='The tenant group this object belongs to', on_delete=django.db.models.deletion.CASCADE, related_name='%(app_label)s_%(class)s_set', to='accounts.group')),
                ('plan', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='investments', to='green_energy.greenenergyplan')),
                ('reinvested_from', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='reinvestments', to='green_energy.greenenergyinvestment')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='green_energy_investments', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'green_energy_investments',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['status', 'end_date'], name='ge_investment_status_end_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Equipment',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('name', models.CharField(max_length=255)),
                ('description', models.TextField(blank=True)),
                ('type', models.CharField(choices=[('SOLAR_PANEL', 'Solar Panel'), ('WIND_TURBINE', 'Wind Turbine'), ('BATTERY_STORAGE', 'Battery Storage'), ('INVERTER', 'Inverter')], max_length=20)),
                ('price', models.DecimalField(decimal_places=2, max_digits=15, validators=[django.core.validators.MinValueValidator(Decimal('0.01'))])),
                ('stock_quantity', models.PositiveIntegerField(default=0)),
                ('status', models.CharField(choices=[('AVAILABLE', 'Available'), ('PENDING', 'Pending'), ('SOLD', 'Sold')], db_index=True, default='AVAILABLE', max_length=20)),
                ('features', models.JSONField(blank=True, default=list)),
                ('specifications', models.JSONField(blank=True, default=dict)),
                ('images', models.JSONField(blank=True, default=list)),
                ('group', models.ForeignKey(help_text='The tenant group this object belongs to', on_delete=django.db.models.deletion.CASCADE, related_name='%(app_label)s_%(class)s_set', to='accounts.group')),
            ],
            options={
                'verbose_name_plural': 'equipment',
                'db_table': 'green_energy_equipment',
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='EquipmentTransaction',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('quantity', models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)])),
                ('total_amount', models.DecimalField(decimal_places=2, max_digits=15)),
                ('status', models.CharField(choices=[('PENDING', 'Pending'), ('ACCEPTED', 'Accepted'), ('PROCESSING', 'Processing'), ('OUT_FOR_DELIVERY', 'Out for Delivery'), ('COMPLETED', 'Completed'), ('CANCELLED', 'Cancelled')], db_index=True, default='PENDING', max_length=20)),
                ('delivery_address', models.JSONField(default=dict)),
                ('tracking_number', models.CharField(blank=True, max_length=100)),
                ('delivery_pin', models.CharField(blank=True, max_length=6)),
                ('delivery_date', models.DateTimeField(blank=True, null=True)),
                ('estimated_delivery_date', models.DateTimeField(blank=True, null=True)),
                ('equipment', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='transactions', to='green_energy.equipment')),
                ('group', models.ForeignKey(help_text='The tenant group this object belongs to', on_delete=django.db.models.deletion.CASCADE, related_name='%(app_label)s_%(class)s_set', to='accounts.group')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='equipment_transactions', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'green_energy_equipment_transactions',
                'ordering': ['-created_at'],
            },
        ),
    ]
