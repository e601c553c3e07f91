from django.contrib import admin
from django.urls import path, include

from shared.common.health import liveness_check, readiness_check

admin.site.site_header = 'Flow Management'
admin.site.site_title = 'Flow Management'

urlpatterns = [
    path('admin/', admin.site.urls),
    path('health/', liveness_check, name='health'),
    path('health/ready/', readiness_check, name='health-ready'),
    path('api/v1/', include('apps.core.urls')),
]
