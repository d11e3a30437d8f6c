from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter

from apps.common.pagination import StandardPagination
from .models import Property, Room
from .permissions import CanManageProperty, CanManageRoom
from .serializers import (
    PropertyInputSerializer,
    PropertySerializer,
    RoomInputSerializer,
    RoomFilterSerializer,
    RoomSerializer,
    OccupancySummarySerializer,
    PortfolioOccupancySerializer,
    PaymentQRSerializer,
)
from .services import (
    visible_properties,
    create_property,
    update_property,
    delete_property,
    visible_rooms,
    create_room,
    update_room,
    delete_room,
    get_property_occupancy,
    get_portfolio_occupancy,
    get_property_payment_qr,
    regenerate_property_payment_qr,
)

UUID_LOOKUP = r'[0-9a-fA-F-]{36}'


class PropertyViewSet(viewsets.ModelViewSet):
    """
    Properties of the current landlord (admins see every property).

    list: Own properties
    create: New property owned by the caller
    retrieve / update / partial_update / destroy: Owner or admin only
    occupancy: Occupancy and rent summary
    qr_code: UPI payment payload (GET reads, POST regenerates)
    """

    queryset = Property.objects.select_related('owner')
    serializer_class = PropertySerializer
    permission_classes = [IsAuthenticated, CanManageProperty]
    pagination_class = StandardPagination
    lookup_value_regex = UUID_LOOKUP

    def get_queryset(self):
        # Detail lookups search every property so a foreign one is 403, not 404
        if self.action == 'list':
            return visible_properties(self.request.user)
        return super().get_queryset()

    def get_serializer_class(self):
        if self.action in ['create', 'update', 'partial_update']:
            return PropertyInputSerializer
        return PropertySerializer

    def create(self, request, *args, **kwargs):
        serializer = PropertyInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        prop = create_property(caller=request.user, **serializer.validated_data)
        return Response(PropertySerializer(prop).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        serializer = PropertyInputSerializer(data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        prop = update_property(
            property_id=kwargs['pk'],
            caller=request.user,
            **serializer.validated_data
        )
        return Response(PropertySerializer(prop).data)

    def destroy(self, request, *args, **kwargs):
        delete_property(property_id=kwargs['pk'], caller=request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(responses={200: OccupancySummarySerializer})
    @action(detail=True, methods=['get'])
    def occupancy(self, request, pk=None):
        """
        Occupancy and rent summary of one property.

        GET /api/properties/{id}/occupancy/
        """
        summary = get_property_occupancy(property_id=pk, caller=request.user)
        return Response(OccupancySummarySerializer(summary).data)

    @extend_schema(responses={200: PortfolioOccupancySerializer})
    @action(detail=False, methods=['get'], url_path='occupancy', url_name='portfolio-occupancy')
    def portfolio_occupancy(self, request):
        """
        Summary across every property the caller can see.

        GET /api/properties/occupancy/
        """
        summary = get_portfolio_occupancy(caller=request.user)
        return Response(PortfolioOccupancySerializer(summary).data)

    @extend_schema(request=None, responses={200: PaymentQRSerializer})
    @action(detail=True, methods=['get', 'post'])
    def qr_code(self, request, pk=None):
        """
        UPI payment payload of the property.

        GET  /api/properties/{id}/qr_code/  - owner, admin or a tenant of the property
        POST /api/properties/{id}/qr_code/  - regenerate (owner or admin)
        """
        if request.method == 'POST':
            prop = regenerate_property_payment_qr(property_id=pk, caller=request.user)
        else:
            prop = get_property_payment_qr(property_id=pk, caller=request.user)
        return Response(PaymentQRSerializer(prop).data)


class RoomViewSet(viewsets.ModelViewSet):
    """
    Rooms in the current landlord's properties.

    list: Own rooms, filterable with ?property=<id> and ?is_available=
    create / update: is_available may be sent but must match occupancy
    destroy: Only vacant rooms
    """

    queryset = Room.objects.select_related('property', 'tenant')
    serializer_class = RoomSerializer
    permission_classes = [IsAuthenticated, CanManageRoom]
    pagination_class = StandardPagination
    lookup_value_regex = UUID_LOOKUP

    def get_queryset(self):
        if self.action != 'list':
            return super().get_queryset()

        filter_serializer = RoomFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        queryset = visible_rooms(self.request.user)
        if params.get('property'):
            queryset = queryset.filter(property_id=params['property'])
        if params.get('is_available') is not None:
            queryset = queryset.filter(is_available=params['is_available'])
        return queryset

    def get_serializer_class(self):
        if self.action in ['create', 'update', 'partial_update']:
            return RoomInputSerializer
        return RoomSerializer

    @extend_schema(parameters=[
        OpenApiParameter('property', str, description='Property ID'),
        OpenApiParameter('is_available', bool),
    ])
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)

    def create(self, request, *args, **kwargs):
        serializer = RoomInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        room = create_room(caller=request.user, **serializer.validated_data)
        return Response(RoomSerializer(room).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        serializer = RoomInputSerializer(data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        room = update_room(room_id=kwargs['pk'], caller=request.user, **serializer.validated_data)
        return Response(RoomSerializer(room).data)

    def destroy(self, request, *args, **kwargs):
        delete_room(room_id=kwargs['pk'], caller=request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)
