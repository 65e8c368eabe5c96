"""API views for the station manager roster and the current user."""

from typing import Optional

from drf_spectacular.utils import extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from lpg_stations.exceptions import StationDomainError
from lpg_stations.permissions import IsAdminRole
from lpg_stations.views import domain_error_response

from . import services
from .models import User
from .serializers import (
    ManagerCreateSerializer,
    ManagerFilterSerializer,
    ManagerSerializer,
    ManagerUpdateSerializer,
    MeSerializer,
)


class ManagerViewSet(viewsets.GenericViewSet):  # type: ignore[misc]
    """Admin-only management of station manager accounts."""

    queryset = User.objects.filter(role=User.Role.STATION_MANAGER)
    serializer_class = ManagerSerializer
    permission_classes = [IsAdminRole]

    def handle_exception(self, exc: Exception) -> Response:
        if isinstance(exc, StationDomainError):
            return domain_error_response(exc)
        return super().handle_exception(exc)

    def _list(self, request: Request, force_active: bool = False) -> Response:
        filters = ManagerFilterSerializer(data=request.query_params.dict())
        filters.is_valid(raise_exception=True)
        is_active = True if force_active else filters.validated_data.get("is_active")
        managers = services.list_managers(
            is_active=is_active, search=filters.validated_data.get("search")
        )
        page = self.paginate_queryset(managers)
        if page is not None:
            return self.get_paginated_response(ManagerSerializer(page, many=True).data)
        return Response(ManagerSerializer(managers, many=True).data)

    @extend_schema(parameters=[ManagerFilterSerializer], tags=["Managers"])
    def list(self, request: Request) -> Response:
        return self._list(request)

    @extend_schema(parameters=[ManagerFilterSerializer], tags=["Managers"])
    @action(detail=False, methods=["get"])
    def active(self, request: Request) -> Response:
        return self._list(request, force_active=True)

    @extend_schema(request=ManagerCreateSerializer, responses={201: ManagerSerializer}, tags=["Managers"])
    def create(self, request: Request) -> Response:
        serializer = ManagerCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        manager = services.create_manager(**serializer.validated_data)
        return Response(
            {
                "message": "Station manager created successfully",
                "data": {"manager": ManagerSerializer(manager).data},
            },
            status=status.HTTP_201_CREATED,
        )

    @extend_schema(responses={200: ManagerSerializer}, tags=["Managers"])
    def retrieve(self, request: Request, pk: Optional[str] = None) -> Response:
        manager = services.get_manager(pk)
        return Response(
            {
                "message": "Station manager retrieved successfully",
                "data": {"manager": ManagerSerializer(manager).data},
            }
        )

    @extend_schema(request=ManagerUpdateSerializer, responses={200: ManagerSerializer}, tags=["Managers"])
    def update(self, request: Request, pk: Optional[str] = None, partial: bool = False) -> Response:
        manager = services.get_manager(pk)
        serializer = ManagerUpdateSerializer(manager, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        manager = services.update_manager(manager.pk, **serializer.validated_data)
        return Response(
            {
                "message": "Station manager updated successfully",
                "data": {"manager": ManagerSerializer(manager).data},
            }
        )

    @extend_schema(request=ManagerUpdateSerializer, responses={200: ManagerSerializer}, tags=["Managers"])
    def partial_update(self, request: Request, pk: Optional[str] = None) -> Response:
        return self.update(request, pk=pk, partial=True)

    @extend_schema(responses={200: ManagerSerializer}, tags=["Managers"])
    def destroy(self, request: Request, pk: Optional[str] = None) -> Response:
        manager = services.deactivate_manager(pk)
        return Response(
            {
                "message": "Station manager deactivated successfully",
                "data": {"manager": ManagerSerializer(manager).data},
            }
        )


class MeView(APIView):  # type: ignore[misc]
    """The authenticated user."""

    permission_classes = [IsAuthenticated]

    @extend_schema(responses={200: MeSerializer}, tags=["Auth"])
    def get(self, request: Request, format: Optional[str] = None) -> Response:
        return Response({"data": MeSerializer(request.user).data})
