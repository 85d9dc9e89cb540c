from django.contrib import admin
from django.urls import path, include
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),
    path('api/', include('accounts.urls')),
    path('api/', include('compliance.urls')),
    path('api/', include('notifications.urls')),
    path('api/', include('wallets.urls')),
    path('api/', include('referrals.urls')),
    path('api/', include('real_estate.urls')),
    path('api/', include('green_energy.urls')),
    path('api/', include('markets.urls')),
    path('api/', include('dashboard.urls')),
]
