"""
URL configuration for the farmdesk project.

Every app mounts its endpoints under /api/; the health check lives at the root.
"""
from django.contrib import admin
from django.urls import path, include
from farmdesk.core.views import health

admin.site.site_header = "FarmDesk Admin Panel"
admin.site.site_title = "FarmDesk Admin Portal"
admin.site.index_title = "Farm management administration"

urlpatterns = [
    path('admin/', admin.site.urls),
    path('health/', health, name='health'),
    path('api/', include('farmdesk.core.urls')),
    path('api/', include('farmdesk.farms.urls')),
    path('api/', include('farmdesk.animals.urls')),
    path('api/', include('farmdesk.crops.urls')),
    path('api/', include('farmdesk.inventory.urls')),
    path('api/', include('farmdesk.tasks.urls')),
    path('api/', include('farmdesk.financial.urls')),
    path('api/', include('farmdesk.planning.urls')),
]
