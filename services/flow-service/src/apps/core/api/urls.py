# services/flow-service/src/apps/core/api/urls.py
"""
Flow Service API URLs
"""

from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import (
    DiscordTagViewSet,
    EventViewSet,
    FlightInformationRegionViewSet,
    FlowMeasureViewSet,
)

router = DefaultRouter()
router.register(r'flight-information-regions', FlightInformationRegionViewSet, basename='flight-information-region')
router.register(r'discord-tags', DiscordTagViewSet, basename='discord-tag')
router.register(r'events', EventViewSet, basename='event')
router.register(r'flow-measures', FlowMeasureViewSet, basename='flow-measure')

urlpatterns = [
    path('', include(router.urls)),
]
