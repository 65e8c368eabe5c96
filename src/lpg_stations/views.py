"""API views for LPG stations."""

import logging
from typing import Any, Optional

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.response import Response

from apps.core.pagination import PriceHistoryPagination
from lpg_stations.exceptions import StationDomainError
from lpg_stations.models import Station
from lpg_stations.permissions import CanManageStation, IsAdminRole
from lpg_stations.serializers import (
    AssignManagerSerializer,
    AvailabilityLogSerializer,
    AvailabilitySerializer,
    ManagerAssignmentSerializer,
    NearbyResponseSerializer,
    NearbySearchSerializer,
    PriceHistorySerializer,
    PriceUpdateSerializer,
    RemoveManagerSerializer,
    StationListFilterSerializer,
    StationSerializer,
    StationWriteSerializer,
    StatusSerializer,
)
from lpg_stations.services.assignments import AssignmentLedger
from lpg_stations.services.directory import StationDirectoryService
from lpg_stations.services.ranking import NONE_AVAILABLE_NOTE, NearbyOutcome

logger = logging.getLogger(__name__)


def domain_error_response(exc: StationDomainError) -> Response:
    """Translate a domain error into the `{"message", "error"}` body."""
    return Response(
        {"message": exc.message, "error": exc.error_code},
        status=exc.status_code,
    )


class StationViewSet(viewsets.GenericViewSet):  # type: ignore[misc]
    """
    Stations: public search and reads, admin CRUD and manager assignment,
    and availability/price/status updates for whoever manages the station.
    """

    queryset = Station.objects.all()
    serializer_class = StationSerializer

    public_actions = {"list", "retrieve", "nearby", "price_history"}
    station_manager_actions = {"availability", "price", "set_status", "availability_log"}

    def get_permissions(self) -> list[Any]:
        if self.action in self.public_actions:
            return [AllowAny()]
        if self.action in self.station_manager_actions:
            return [CanManageStation()]
        return [IsAdminRole()]

    def handle_exception(self, exc: Exception) -> Response:
        if isinstance(exc, StationDomainError):
            logger.warning(
                "Station request rejected: %s",
                exc.message,
                extra={"error": exc.error_code, "action": getattr(self, "action", None)},
            )
            return domain_error_response(exc)
        return super().handle_exception(exc)

    @property
    def directory(self) -> StationDirectoryService:
        return StationDirectoryService()

    @property
    def ledger(self) -> AssignmentLedger:
        return AssignmentLedger()

    def _actor(self, request: Request) -> Optional[Any]:
        return request.user if request.user.is_authenticated else None

    def _paginated(self, items: Any, serializer_class: Any) -> Response:
        page = self.paginate_queryset(items)
        if page is not None:
            return self.get_paginated_response(serializer_class(page, many=True).data)
        return Response(serializer_class(items, many=True).data)

    # Public

    @extend_schema(
        parameters=[StationListFilterSerializer],
        responses={200: StationSerializer(many=True)},
        description="List stations, optionally filtered by assignment, availability and location",
        tags=["Stations"],
    )
    def list(self, request: Request) -> Response:
        filters = StationListFilterSerializer(data=request.query_params.dict())
        filters.is_valid(raise_exception=True)
        stations = self.directory.list_stations(filters.validated_data)
        return self._paginated(stations, StationSerializer)

    @extend_schema(responses={200: StationSerializer}, tags=["Stations"])
    def retrieve(self, request: Request, pk: Optional[str] = None) -> Response:
        station = self.directory.get_station(pk)
        return Response({"data": StationSerializer(station).data})

    @extend_schema(
        request=NearbySearchSerializer,
        responses={200: NearbyResponseSerializer},
        description="Find stations near a point: available ones first, each tier nearest first",
        tags=["Stations"],
    )
    @action(detail=False, methods=["post"])
    def nearby(self, request: Request) -> Response:
        serializer = NearbySearchSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        params = serializer.validated_data

        result = self.directory.search_nearby(
            params["latitude"],
            params["longitude"],
            radius_km=params["radius"],
            available_only=params["available_only"],
        )

        body = {
            "message": result.message,
            "data": StationSerializer(result.stations, many=True).data,
            "available_count": result.available_count,
            "unavailable_count": result.unavailable_count,
            "radius_km": params["radius"],
        }
        if result.outcome == NearbyOutcome.NONE_AVAILABLE:
            body["note"] = NONE_AVAILABLE_NOTE
        return Response(body, status=status.HTTP_200_OK)

    @extend_schema(responses={200: PriceHistorySerializer(many=True)}, tags=["Stations"])
    @action(
        detail=True,
        methods=["get"],
        url_path="price-history",
        pagination_class=PriceHistoryPagination,
    )
    def price_history(self, request: Request, pk: Optional[str] = None) -> Response:
        history = self.directory.get_price_history(pk)
        return self._paginated(history, PriceHistorySerializer)

    # Admin CRUD

    @extend_schema(
        request=StationWriteSerializer,
        responses={201: StationSerializer},
        tags=["Stations"],
    )
    def create(self, request: Request) -> Response:
        serializer = StationWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        station = self.directory.create_station(
            serializer.validated_data, actor=self._actor(request)
        )
        return Response(
            {"message": "Station created successfully", "data": StationSerializer(station).data},
            status=status.HTTP_201_CREATED,
        )

    @extend_schema(
        request=StationWriteSerializer,
        responses={200: StationSerializer},
        tags=["Stations"],
    )
    def update(self, request: Request, pk: Optional[str] = None, partial: bool = False) -> Response:
        station = self.directory.get_station(pk)
        serializer = StationWriteSerializer(station, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        station = self.directory.update_station(
            station.pk, serializer.validated_data, actor=self._actor(request)
        )
        return Response(
            {"message": "Station updated successfully", "data": StationSerializer(station).data}
        )

    @extend_schema(
        request=StationWriteSerializer,
        responses={200: StationSerializer},
        tags=["Stations"],
    )
    def partial_update(self, request: Request, pk: Optional[str] = None) -> Response:
        return self.update(request, pk=pk, partial=True)

    @extend_schema(responses={204: None}, tags=["Stations"])
    def destroy(self, request: Request, pk: Optional[str] = None) -> Response:
        self.directory.delete_station(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    # Station manager operations

    @extend_schema(request=AvailabilitySerializer, responses={200: StationSerializer}, tags=["Station Management"])
    @action(detail=True, methods=["patch"])
    def availability(self, request: Request, pk: Optional[str] = None) -> Response:
        serializer = AvailabilitySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        station = self.directory.set_availability(
            pk, serializer.validated_data["is_available"], actor=self._actor(request)
        )
        return Response(
            {
                "message": "Station availability updated successfully",
                "data": StationSerializer(station).data,
            }
        )

    @extend_schema(request=PriceUpdateSerializer, responses={200: StationSerializer}, tags=["Station Management"])
    @action(detail=True, methods=["patch"])
    def price(self, request: Request, pk: Optional[str] = None) -> Response:
        serializer = PriceUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        station = self.directory.set_price(
            pk, serializer.validated_data["price_per_kg"], actor=self._actor(request)
        )
        return Response(
            {
                "message": "Station price updated successfully",
                "data": StationSerializer(station).data,
            }
        )

    @extend_schema(request=StatusSerializer, responses={200: StationSerializer}, tags=["Station Management"])
    @action(detail=True, methods=["patch"], url_path="status")
    def set_status(self, request: Request, pk: Optional[str] = None) -> Response:
        serializer = StatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        is_active = serializer.validated_data["is_active"]
        station = self.directory.set_active(pk, is_active, actor=self._actor(request))
        state = "activated" if is_active else "deactivated"
        return Response(
            {
                "message": f"Station {state} successfully",
                "data": StationSerializer(station).data,
            }
        )

    @extend_schema(responses={200: AvailabilityLogSerializer(many=True)}, tags=["Station Management"])
    @action(detail=True, methods=["get"], url_path="availability-log")
    def availability_log(self, request: Request, pk: Optional[str] = None) -> Response:
        log = self.directory.get_availability_log(pk)
        return self._paginated(log, AvailabilityLogSerializer)

    # Manager assignment (admin)

    @extend_schema(
        request=AssignManagerSerializer,
        responses={201: ManagerAssignmentSerializer},
        tags=["Manager Assignment"],
    )
    @action(detail=True, methods=["post"], url_path="assign-manager")
    def assign_manager(self, request: Request, pk: Optional[str] = None) -> Response:
        serializer = AssignManagerSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        assignment = self.ledger.assign(
            pk, serializer.validated_data["manager_id"], actor=request.user
        )
        return Response(
            {
                "message": "Manager assigned successfully",
                "data": {"assignment": ManagerAssignmentSerializer(assignment).data},
            },
            status=status.HTTP_201_CREATED,
        )

    @extend_schema(
        request=RemoveManagerSerializer,
        responses={200: ManagerAssignmentSerializer},
        tags=["Manager Assignment"],
    )
    @action(detail=True, methods=["delete"], url_path="remove-manager")
    def remove_manager(self, request: Request, pk: Optional[str] = None) -> Response:
        serializer = RemoveManagerSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        assignment = self.ledger.remove(
            pk, actor=request.user, reason=serializer.validated_data.get("removal_reason")
        )
        return Response(
            {
                "message": "Manager removed successfully",
                "data": {"assignment": ManagerAssignmentSerializer(assignment).data},
            }
        )

    @extend_schema(responses={200: ManagerAssignmentSerializer}, tags=["Manager Assignment"])
    @action(detail=True, methods=["get"])
    def manager(self, request: Request, pk: Optional[str] = None) -> Response:
        assignment = self.ledger.get_current_manager(pk)
        if assignment is None:
            return Response(
                {
                    "message": "No active manager assigned to this station",
                    "data": {"assignment": None},
                }
            )
        return Response(
            {
                "message": "Current manager retrieved successfully",
                "data": {"assignment": ManagerAssignmentSerializer(assignment).data},
            }
        )

    @extend_schema(
        parameters=[
            OpenApiParameter("manager_id", str, description="Only rows for this manager"),
        ],
        responses={200: ManagerAssignmentSerializer(many=True)},
        tags=["Manager Assignment"],
    )
    @action(detail=True, methods=["get"], url_path="manager-history")
    def manager_history(self, request: Request, pk: Optional[str] = None) -> Response:
        history = self.ledger.get_history(pk, manager_id=request.query_params.get("manager_id"))
        return self._paginated(history, ManagerAssignmentSerializer)
