from rest_framework import serializers

from .models import User, Group


class GroupSerializer(serializers.ModelSerializer):
    """Serializer for group data"""
    member_count = serializers.SerializerMethodField()

    class Meta:
        model = Group
        fields = ['id', 'name', 'description', 'created_at', 'member_count']
        read_only_fields = fields

    def get_member_count(self, obj):
        return obj.members.count()


class UserSerializer(serializers.ModelSerializer):
    """Serializer for user data"""
    group_name = serializers.CharField(source='group.name', read_only=True, default=None)
    referred_by_email = serializers.EmailField(source='referred_by.email', read_only=True, default=None)

    class Meta:
        model = User
        fields = [
            'id', 'username', 'email', 'name', 'first_name', 'last_name', 'phone',
            'role', 'group', 'group_name', 'referral_code', 'referred_by_email',
            'is_active', 'created_at', 'last_login_at'
        ]
        read_only_fields = fields


class AdminUserSerializer(UserSerializer):
    """User data with moderation fields, for admins"""

    class Meta(UserSerializer.Meta):
        fields = UserSerializer.Meta.fields + ['is_banned', 'banned_at', 'ban_reason']
        read_only_fields = fields


class RegisterSerializer(serializers.Serializer):
    """Serializer for creating new investor accounts"""
    email = serializers.EmailField()
    username = serializers.CharField(max_length=150)
    password = serializers.CharField(write_only=True, min_length=8)
    name = serializers.CharField(max_length=150, required=False, allow_blank=True)
    referral_code = serializers.CharField(max_length=16, required=False, allow_blank=True)

    def validate_username(self, value):
        if User.objects.filter(username__iexact=value).exists():
            raise serializers.ValidationError("A user with this username already exists")
        return value


class LoginSerializer(serializers.Serializer):
    """Serializer for user login"""
    email = serializers.EmailField()
    password = serializers.CharField()


class LogoutSerializer(serializers.Serializer):
    refresh = serializers.CharField()


class ProfileUpdateSerializer(serializers.ModelSerializer):

    class Meta:
        model = User
        fields = ['name', 'phone', 'first_name', 'last_name']


class ChangePasswordSerializer(serializers.Serializer):
    current_password = serializers.CharField()
    new_password = serializers.CharField()
    confirm_password = serializers.CharField()


class BanSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True)


class ActivitySerializer(serializers.Serializer):
    kind = serializers.CharField()
    id = serializers.UUIDField()
    type = serializers.CharField()
    amount = serializers.DecimalField(max_digits=15, decimal_places=2)
    status = serializers.CharField()
    description = serializers.CharField()
    created_at = serializers.DateTimeField()
