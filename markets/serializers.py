from decimal import Decimal

from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import serializers

from core.validators import validate_plan_terms

from .models import MarketInvestmentPlan, MarketInvestment


class MarketInvestmentPlanSerializer(serializers.ModelSerializer):

    class Meta:
        model = MarketInvestmentPlan
        fields = [
            'id', 'name', 'description', 'type', 'min_amount', 'max_amount',
            'return_rate', 'duration_months', 'is_active', 'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']

    def validate(self, attrs):
        terms = [
            attrs.get(field, getattr(self.instance, field, None))
            for field in ('min_amount', 'max_amount', 'return_rate', 'duration_months')
        ]
        try:
            validate_plan_terms(*terms)
        except DjangoValidationError as e:
            raise serializers.ValidationError(e.message_dict)
        return attrs


class MarketInvestmentSerializer(serializers.ModelSerializer):
    plan_name = serializers.CharField(source='plan.name', read_only=True)
    user_email = serializers.EmailField(source='user.email', read_only=True)

    class Meta:
        model = MarketInvestment
        fields = [
            'id', 'user', 'user_email', 'plan', 'plan_name', 'amount', 'status',
            'start_date', 'end_date', 'expected_return', 'actual_return',
            'created_at', 'updated_at'
        ]
        read_only_fields = fields


class MarketInvestSerializer(serializers.Serializer):
    plan_id = serializers.UUIDField()
    amount = serializers.DecimalField(max_digits=15, decimal_places=2, min_value=Decimal('0.01'))


class MarketMatureSerializer(serializers.Serializer):
    actual_return = serializers.DecimalField(
        max_digits=15, decimal_places=2, min_value=Decimal('0'), required=False, allow_null=True
    )


class MarketPortfolioSerializer(serializers.Serializer):
    investments = MarketInvestmentSerializer(many=True)
    total_invested = serializers.DecimalField(max_digits=15, decimal_places=2)
    expected_returns = serializers.DecimalField(max_digits=15, decimal_places=2)
    active_investments = serializers.IntegerField()
