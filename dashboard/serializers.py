from rest_framework import serializers

from wallets.serializers import WalletTransactionSerializer


class ProductTotalSerializer(serializers.Serializer):
    total_value = serializers.DecimalField(max_digits=15, decimal_places=2)
    count = serializers.IntegerField()


class UserStatsSerializer(serializers.Serializer):
    real_estate = ProductTotalSerializer()
    green_energy = ProductTotalSerializer()
    markets = ProductTotalSerializer()
    wallet_balance = serializers.DecimalField(max_digits=15, decimal_places=2)
    recent_activity = WalletTransactionSerializer(many=True)
