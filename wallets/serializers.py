from decimal import Decimal

from rest_framework import serializers

from .models import Wallet, WalletTransaction, WalletSettings


class WalletTransactionSerializer(serializers.ModelSerializer):
    """Serializer for ledger rows"""
    type_display = serializers.CharField(source='get_type_display', read_only=True)
    status_display = serializers.CharField(source='get_status_display', read_only=True)
    user_email = serializers.EmailField(source='wallet.user.email', read_only=True)

    class Meta:
        model = WalletTransaction
        fields = [
            'id', 'wallet', 'user_email', 'type', 'type_display', 'amount',
            'status', 'status_display', 'crypto_type', 'tx_hash',
            'wallet_address', 'description', 'reference', 'created_at', 'updated_at'
        ]
        read_only_fields = fields


class WalletSerializer(serializers.ModelSerializer):
    """Serializer for a wallet with its latest transactions"""
    user_email = serializers.EmailField(source='user.email', read_only=True)
    user_name = serializers.CharField(source='user.display_name', read_only=True)
    recent_transactions = serializers.SerializerMethodField()

    class Meta:
        model = Wallet
        fields = ['id', 'user', 'user_email', 'user_name', 'balance', 'recent_transactions', 'created_at', 'updated_at']
        read_only_fields = fields

    def get_recent_transactions(self, obj):
        return WalletTransactionSerializer(obj.transactions.all()[:10], many=True).data


class WalletListSerializer(serializers.ModelSerializer):
    user_email = serializers.EmailField(source='user.email', read_only=True)
    user_name = serializers.CharField(source='user.display_name', read_only=True)

    class Meta:
        model = Wallet
        fields = ['id', 'user', 'user_email', 'user_name', 'balance', 'updated_at']
        read_only_fields = fields


class AmountSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=15, decimal_places=2, min_value=Decimal('0.01'))


class DepositSerializer(AmountSerializer):
    crypto_type = serializers.CharField(max_length=20, required=False)
    tx_hash = serializers.CharField(max_length=255, required=False, allow_blank=True)


class WithdrawalSerializer(AmountSerializer):
    crypto_type = serializers.CharField(max_length=20, required=False)
    wallet_address = serializers.CharField(max_length=255)


class PayoutSerializer(WithdrawalSerializer):
    reason = serializers.CharField(required=False, allow_blank=True)


class RejectSerializer(serializers.Serializer):
    reason = serializers.CharField()


class AdjustWalletSerializer(AmountSerializer):
    user_id = serializers.UUIDField()
    reason = serializers.CharField()


class WalletStatsSerializer(serializers.Serializer):
    balance = serializers.DecimalField(max_digits=15, decimal_places=2)
    total_deposits = serializers.DecimalField(max_digits=15, decimal_places=2)
    total_withdrawals = serializers.DecimalField(max_digits=15, decimal_places=2)
    total_payouts = serializers.DecimalField(max_digits=15, decimal_places=2)
    total_returns = serializers.DecimalField(max_digits=15, decimal_places=2)
    pending_transactions = serializers.IntegerField()


class WalletSettingsSerializer(serializers.ModelSerializer):
    class Meta:
        model = WalletSettings
        fields = ['btc_wallet_address', 'usdt_wallet_address', 'usdt_wallet_type']
