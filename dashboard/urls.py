from django.urls import path

from .views import UserDashboardView, AdminDashboardView

urlpatterns = [
    path('dashboard/', UserDashboardView.as_view(), name='dashboard'),
    path('admin/dashboard/', AdminDashboardView.as_view(), name='admin-dashboard'),
]
