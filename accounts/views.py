"""
Authentication, profile and user moderation views.
"""
from rest_framework import viewsets, status, permissions
from rest_framework.decorators import action, api_view, permission_classes, throttle_classes
from rest_framework.response import Response
from rest_framework.throttling import AnonRateThrottle

from core.mixins import ServiceErrorMixin, service_error_response
from core.services import ServiceError
from referrals.serializers import ReferralSerializer
from referrals.services import ReferralService

from .models import User
from .permissions import IsAdmin, IsNotBanned
from .serializers import (
    UserSerializer, AdminUserSerializer, RegisterSerializer, LoginSerializer,
    LogoutSerializer, ProfileUpdateSerializer, ChangePasswordSerializer,
    BanSerializer, ActivitySerializer
)
from .services import AccountService, TokenBlacklistService, UserAdminService


class AuthenticationThrottle(AnonRateThrottle):
    """Strict rate limiting for authentication endpoints"""
    scope = 'auth'


@api_view(['POST'])
@permission_classes([permissions.AllowAny])
@throttle_classes([AuthenticationThrottle])
def register_view(request):
    """
    Create an investor account.

    POST /api/auth/register/
    {
        "email": "user@example.com",
        "username": "user",
        "password": "password",
        "referral_code": "AB12CD34"  // Optional
    }
    """
    serializer = RegisterSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    try:
        user = AccountService().register(
            email=data['email'],
            username=data['username'],
            password=data['password'],
            name=data.get('name', ''),
            referral_code=data.get('referral_code') or None,
        )
    except ServiceError as e:
        return service_error_response(e)

    return Response({
        'user': UserSerializer(user).data,
        **AccountService.issue_tokens(user),
    }, status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes([permissions.AllowAny])
@throttle_classes([AuthenticationThrottle])
def login_view(request):
    """
    Exchange email and password for a JWT pair.

    POST /api/auth/login/
    {
        "email": "user@example.com",
        "password": "password"
    }
    """
    serializer = LoginSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        user, tokens = AccountService().login(
            serializer.validated_data['email'],
            serializer.validated_data['password'],
            request=request,
        )
    except ServiceError as e:
        return service_error_response(e)

    return Response({'user': UserSerializer(user).data, **tokens})


@api_view(['POST'])
@permission_classes([permissions.IsAuthenticated])
def logout_view(request):
    """Blacklist the given refresh token."""
    serializer = LogoutSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    if not TokenBlacklistService.blacklist_token(serializer.validated_data['refresh']):
        return Response({'error': 'Invalid refresh token'}, status=status.HTTP_400_BAD_REQUEST)
    return Response({'message': 'Successfully logged out'})


class UserViewSet(ServiceErrorMixin, viewsets.ReadOnlyModelViewSet):
    """
    Users of the admin's group.

    The ``me`` family of actions is open to every authenticated user.
    """
    serializer_class = AdminUserSerializer
    permission_classes = [IsAdmin]
    filterset_fields = ['role', 'is_banned', 'is_active']
    search_fields = ['email', 'username', 'name']
    ordering_fields = ['created_at', 'email']

    def get_queryset(self):
        return UserAdminService(user=self.request.user).visible_users().select_related('group', 'referred_by')

    @action(detail=False, methods=['get'], permission_classes=[permissions.IsAuthenticated, IsNotBanned])
    def me(self, request):
        """Get current user profile"""
        return Response(UserSerializer(request.user).data)

    @action(detail=False, methods=['patch'], permission_classes=[permissions.IsAuthenticated, IsNotBanned])
    def update_profile(self, request):
        """Update current user profile"""
        serializer = ProfileUpdateSerializer(request.user, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(UserSerializer(request.user).data)

    @action(detail=False, methods=['post'], permission_classes=[permissions.IsAuthenticated, IsNotBanned])
    def change_password(self, request):
        serializer = ChangePasswordSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            AccountService(user=request.user).change_password(**serializer.validated_data)
        except ServiceError as e:
            return self.service_error_response(e)
        return Response({'message': 'Password changed successfully'})

    @action(detail=False, methods=['get'], permission_classes=[permissions.IsAuthenticated, IsNotBanned])
    def referrals(self, request):
        """Users referred by the caller with their commission totals"""
        queryset = ReferralService(user=request.user).get_my_referrals()
        return Response(ReferralSerializer(queryset, many=True).data)

    @action(detail=True, methods=['post'])
    def ban(self, request, pk=None):
        serializer = BanSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            user = UserAdminService(user=request.user).ban(pk, serializer.validated_data.get('reason', ''))
        except ServiceError as e:
            return self.service_error_response(e)
        return Response(self.get_serializer(user).data)

    @action(detail=True, methods=['post'])
    def unban(self, request, pk=None):
        try:
            user = UserAdminService(user=request.user).unban(pk)
        except ServiceError as e:
            return self.service_error_response(e)
        return Response(self.get_serializer(user).data)

    @action(detail=True, methods=['get'])
    def activities(self, request, pk=None):
        try:
            entries = UserAdminService(user=request.user).activities(pk)
        except ServiceError as e:
            return self.service_error_response(e)
        return Response(ActivitySerializer(entries, many=True).data)
