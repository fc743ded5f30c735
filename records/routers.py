from django.urls import include, path

from records.views.auth import login_view, logout_view, profile_view, refresh_view
from records.views.health import health
from records.views.qr import access_logs_view, scan_qr_view

urlpatterns = [
    path('', include('django_prometheus.urls')),
    path('health', health, name='health'),
    path('api/v1/public/auth/login', login_view, name='login_view'),
    path('api/v1/auth/profile', profile_view, name='profile_view'),
    path('api/v1/auth/refresh', refresh_view, name='refresh_view'),
    path('api/v1/auth/logout', logout_view, name='logout_view'),
    path('api/v1/qr/scan', scan_qr_view, name='scan_qr_view'),
    path('api/v1/qr/access-logs', access_logs_view, name='access_logs_view'),
]
