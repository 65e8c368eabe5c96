"""URL configuration for the accounts app."""

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from .views import ManagerViewSet, MeView

app_name = "accounts"

router = SimpleRouter()
router.register(r"managers", ManagerViewSet, basename="manager")

urlpatterns = [
    path("api/v1/auth/me/", MeView.as_view(), name="me"),
    path("api/v1/", include(router.urls)),
]
