from decimal import Decimal

from rest_framework import serializers

from .models import Property, RealEstateInvestment, PropertyTransaction


class PropertySerializer(serializers.ModelSerializer):
    status_display = serializers.CharField(source='get_status_display', read_only=True)

    class Meta:
        model = Property
        fields = [
            'id', 'name', 'description', 'price', 'location', 'map_url',
            'features', 'main_image', 'images', 'status', 'status_display',
            'min_investment', 'max_investment', 'expected_return',
            'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'status_display', 'created_at', 'updated_at']

    def validate_features(self, value):
        if not isinstance(value, list):
            raise serializers.ValidationError("Features must be a list")
        return value

    def validate_images(self, value):
        if not isinstance(value, list):
            raise serializers.ValidationError("Images must be a list")
        return value

    def validate(self, attrs):
        min_investment = attrs.get('min_investment', getattr(self.instance, 'min_investment', Decimal('0')))
        max_investment = attrs.get('max_investment', getattr(self.instance, 'max_investment', Decimal('0')))
        if max_investment and min_investment > max_investment:
            raise serializers.ValidationError({'max_investment': "Must be greater than the minimum investment"})
        return attrs


class PropertySummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Property
        fields = ['id', 'name', 'location', 'price', 'main_image', 'status']
        read_only_fields = fields


class RealEstateInvestmentSerializer(serializers.ModelSerializer):
    property_detail = PropertySummarySerializer(source='property', read_only=True)
    user_email = serializers.EmailField(source='user.email', read_only=True)

    class Meta:
        model = RealEstateInvestment
        fields = [
            'id', 'user', 'user_email', 'property', 'property_detail', 'amount', 'type',
            'status', 'start_date', 'end_date', 'expected_return', 'actual_return',
            'reinvest', 'created_at', 'updated_at'
        ]
        read_only_fields = fields


class InvestmentCreateSerializer(serializers.Serializer):
    type = serializers.ChoiceField(choices=RealEstateInvestment.Type.choices)
    amount = serializers.DecimalField(max_digits=15, decimal_places=2, min_value=Decimal('0.01'))
    reinvest = serializers.BooleanField(default=False)
    property_id = serializers.UUIDField(required=False, allow_null=True)


class InvestmentUpdateSerializer(serializers.Serializer):
    reinvest = serializers.BooleanField()


class PropertyTransactionSerializer(serializers.ModelSerializer):
    property_detail = PropertySummarySerializer(source='property', read_only=True)
    user_email = serializers.EmailField(source='user.email', read_only=True)
    remaining_installments = serializers.IntegerField(read_only=True)

    class Meta:
        model = PropertyTransaction
        fields = [
            'id', 'user', 'user_email', 'property', 'property_detail', 'amount', 'type',
            'installments', 'installment_amount', 'paid_installments',
            'remaining_installments', 'next_payment_due', 'status',
            'created_at', 'updated_at'
        ]
        read_only_fields = fields


class PurchaseSerializer(serializers.Serializer):
    type = serializers.ChoiceField(choices=PropertyTransaction.Type.choices)
    installments = serializers.IntegerField(required=False, min_value=2)

    def validate(self, attrs):
        if attrs['type'] == PropertyTransaction.Type.INSTALLMENT and not attrs.get('installments'):
            raise serializers.ValidationError({'installments': "Required for installment purchases"})
        return attrs


class StatusUpdateSerializer(serializers.Serializer):
    status = serializers.CharField()


class PortfolioSerializer(serializers.Serializer):
    investments = RealEstateInvestmentSerializer(many=True)
    property_transactions = PropertyTransactionSerializer(many=True)
    total_invested = serializers.DecimalField(max_digits=15, decimal_places=2)
    total_expected_returns = serializers.DecimalField(max_digits=15, decimal_places=2)
    active_investments = serializers.IntegerField()
    matured_investments = serializers.IntegerField()
