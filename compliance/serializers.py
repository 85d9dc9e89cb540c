"""
Serializers for KYC verification.
"""
from rest_framework import serializers

from .models import KYCVerification


class KYCVerificationSerializer(serializers.ModelSerializer):
    user_email = serializers.EmailField(source='user.email', read_only=True)
    status_display = serializers.CharField(source='get_status_display', read_only=True)
    reviewed_by_email = serializers.EmailField(source='reviewed_by.email', read_only=True, default=None)

    class Meta:
        model = KYCVerification
        fields = [
            'id', 'user', 'user_email', 'status', 'status_display',
            'full_name', 'date_of_birth', 'nationality', 'address',
            'document_type', 'document_number',
            'document_front_url', 'document_back_url', 'selfie_url',
            'rejection_reason', 'reviewed_by_email', 'reviewed_at',
            'created_at', 'updated_at'
        ]
        read_only_fields = [
            'id', 'user', 'user_email', 'status', 'status_display',
            'rejection_reason', 'reviewed_by_email', 'reviewed_at',
            'created_at', 'updated_at'
        ]


class KYCRejectSerializer(serializers.Serializer):
    reason = serializers.CharField()
