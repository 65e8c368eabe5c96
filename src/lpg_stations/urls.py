"""URL configuration for lpg_stations app."""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from lpg_stations.views import StationViewSet

app_name = "lpg_stations"

router = DefaultRouter()
router.register(r"stations", StationViewSet, basename="station")

urlpatterns = [
    path("api/v1/", include(router.urls)),
]
