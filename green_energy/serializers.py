from decimal import Decimal

from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import serializers

from core.validators import validate_plan_terms

from .models import (
    GreenEnergyPlan, GreenEnergyInvestment, Equipment, EquipmentTransaction
)


class GreenEnergyPlanSerializer(serializers.ModelSerializer):
    investment_count = serializers.SerializerMethodField()

    class Meta:
        model = GreenEnergyPlan
        fields = [
            'id', 'name', 'description', 'type', 'min_amount', 'max_amount',
            'return_rate', 'duration_months', 'image', 'is_active',
            'investment_count', 'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'investment_count', 'created_at', 'updated_at']

    def get_investment_count(self, obj):
        return obj.investments.count()

    def validate(self, attrs):
        def current(field):
            return attrs.get(field, getattr(self.instance, field, None))

        try:
            validate_plan_terms(
                current('min_amount'), current('max_amount'),
                current('return_rate'), current('duration_months')
            )
        except DjangoValidationError as e:
            raise serializers.ValidationError(e.message_dict)
        return attrs


class GreenEnergyInvestmentSerializer(serializers.ModelSerializer):
    plan_name = serializers.CharField(source='plan.name', read_only=True)
    user_email = serializers.EmailField(source='user.email', read_only=True)

    class Meta:
        model = GreenEnergyInvestment
        fields = [
            'id', 'user', 'user_email', 'plan', 'plan_name', 'amount', 'status',
            'start_date', 'end_date', 'expected_return', 'actual_return',
            'reinvest', 'reinvested_from', 'created_at', 'updated_at'
        ]
        read_only_fields = fields


class InvestSerializer(serializers.Serializer):
    plan_id = serializers.UUIDField()
    amount = serializers.DecimalField(max_digits=15, decimal_places=2, min_value=Decimal('0.01'))
    reinvest = serializers.BooleanField(default=False)


class MatureSerializer(serializers.Serializer):
    actual_return = serializers.DecimalField(
        max_digits=15, decimal_places=2, min_value=Decimal('0'), required=False, allow_null=True
    )


class EquipmentSerializer(serializers.ModelSerializer):
    type_display = serializers.CharField(source='get_type_display', read_only=True)

    class Meta:
        model = Equipment
        fields = [
            'id', 'name', 'description', 'type', 'type_display', 'price',
            'stock_quantity', 'status', 'features', 'specifications', 'images',
            'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'type_display', 'created_at', 'updated_at']


class DeliveryAddressSerializer(serializers.Serializer):
    street = serializers.CharField(max_length=255)
    city = serializers.CharField(max_length=100)
    state = serializers.CharField(max_length=100, required=False, allow_blank=True)
    postal_code = serializers.CharField(max_length=20, required=False, allow_blank=True)
    country = serializers.CharField(max_length=100)


class EquipmentTransactionSerializer(serializers.ModelSerializer):
    equipment_name = serializers.CharField(source='equipment.name', read_only=True)
    user_email = serializers.EmailField(source='user.email', read_only=True)
    delivery_pin = serializers.SerializerMethodField()

    class Meta:
        model = EquipmentTransaction
        fields = [
            'id', 'user', 'user_email', 'equipment', 'equipment_name', 'quantity',
            'total_amount', 'status', 'delivery_address', 'tracking_number',
            'delivery_pin', 'delivery_date', 'estimated_delivery_date',
            'created_at', 'updated_at'
        ]
        read_only_fields = fields

    def get_delivery_pin(self, obj):
        # Only the buyer sees the PIN
        request = self.context.get('request')
        if request is not None and request.user.pk == obj.user_id:
            return obj.delivery_pin
        return None


class EquipmentPurchaseSerializer(serializers.Serializer):
    quantity = serializers.IntegerField(min_value=1)
    delivery_address = DeliveryAddressSerializer()


class EquipmentStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=EquipmentTransaction.Status.choices)
    tracking_number = serializers.CharField(max_length=100, required=False, allow_blank=True)


class ConfirmDeliverySerializer(serializers.Serializer):
    pin = serializers.RegexField(r'^\d{6}$', error_messages={'invalid': 'The PIN must be 6 digits.'})


class GreenEnergyPortfolioSerializer(serializers.Serializer):
    investments = GreenEnergyInvestmentSerializer(many=True)
    equipment_transactions = EquipmentTransactionSerializer(many=True)
    total_invested = serializers.DecimalField(max_digits=15, decimal_places=2)
    total_equipment = serializers.DecimalField(max_digits=15, decimal_places=2)
    active_investments = serializers.IntegerField()
