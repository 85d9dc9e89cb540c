from rest_framework import permissions
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import IsAdmin, IsNotBanned
from core.mixins import ServiceErrorMixin
from core.services import ServiceError

from .serializers import UserStatsSerializer
from .services import DashboardService


class UserDashboardView(ServiceErrorMixin, APIView):
    """Investment totals and recent activity of the current user"""
    permission_classes = [permissions.IsAuthenticated, IsNotBanned]

    def get(self, request):
        try:
            stats = DashboardService(user=request.user).user_stats()
        except ServiceError as e:
            return self.service_error_response(e)
        return Response(UserStatsSerializer(stats).data)


class AdminDashboardView(ServiceErrorMixin, APIView):
    """Group-wide counters for admins"""
    permission_classes = [IsAdmin]

    def get(self, request):
        try:
            stats = DashboardService(user=request.user).admin_stats()
        except ServiceError as e:
            return self.service_error_response(e)
        return Response(stats)
