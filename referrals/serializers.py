from decimal import Decimal

from rest_framework import serializers

from .models import Referral, ReferralSettings, ReferralCommission


class ReferralSerializer(serializers.ModelSerializer):
    referred_email = serializers.EmailField(source='referred.email', read_only=True)
    referred_name = serializers.CharField(source='referred.display_name', read_only=True)
    referred_joined = serializers.DateTimeField(source='referred.created_at', read_only=True)
    commission_total = serializers.DecimalField(max_digits=15, decimal_places=2, read_only=True, default=Decimal('0'))

    class Meta:
        model = Referral
        fields = [
            'id', 'referred', 'referred_email', 'referred_name', 'referred_joined',
            'status', 'commission_paid', 'commission_total', 'created_at'
        ]
        read_only_fields = fields


class ReferralSettingsSerializer(serializers.ModelSerializer):
    updated_by_email = serializers.EmailField(source='updated_by.email', read_only=True, default=None)

    class Meta:
        model = ReferralSettings
        fields = [
            'id', 'property_commission_rate', 'equipment_commission_rate',
            'market_commission_rate', 'green_energy_commission_rate',
            'updated_by_email', 'created_at'
        ]
        read_only_fields = ['id', 'updated_by_email', 'created_at']


class ReferralCommissionSerializer(serializers.ModelSerializer):
    referrer_email = serializers.EmailField(source='referrer.email', read_only=True)
    referred_email = serializers.EmailField(source='referred.email', read_only=True)
    transaction_type_display = serializers.CharField(source='get_transaction_type_display', read_only=True)

    class Meta:
        model = ReferralCommission
        fields = [
            'id', 'referral', 'referrer', 'referrer_email', 'referred', 'referred_email',
            'amount', 'rate', 'transaction_type', 'transaction_type_display',
            'investment_reference', 'status', 'paid_at', 'rejection_reason', 'created_at'
        ]
        read_only_fields = fields


class ReferralSummarySerializer(serializers.Serializer):
    referral_code = serializers.CharField()
    total_referrals = serializers.IntegerField()
    pending_commissions = serializers.DecimalField(max_digits=15, decimal_places=2)
    paid_commissions = serializers.DecimalField(max_digits=15, decimal_places=2)


class CommissionRejectSerializer(serializers.Serializer):
    reason = serializers.CharField()


class BulkApproveSerializer(serializers.Serializer):
    commission_ids = serializers.ListField(child=serializers.UUIDField(), allow_empty=False)


class ReferralSettingsUpdateSerializer(serializers.Serializer):
    property_commission_rate = serializers.DecimalField(
        max_digits=5, decimal_places=2, min_value=Decimal('0'), max_value=Decimal('100'), required=False
    )
    equipment_commission_rate = serializers.DecimalField(
        max_digits=5, decimal_places=2, min_value=Decimal('0'), max_value=Decimal('100'), required=False
    )
    market_commission_rate = serializers.DecimalField(
        max_digits=5, decimal_places=2, min_value=Decimal('0'), max_value=Decimal('100'), required=False
    )
    green_energy_commission_rate = serializers.DecimalField(
        max_digits=5, decimal_places=2, min_value=Decimal('0'), max_value=Decimal('100'), required=False
    )
