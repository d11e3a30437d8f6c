from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter

from apps.common.pagination import StandardPagination
from .models import Tenant
from .permissions import CanManageTenant
from .serializers import TenantInputSerializer, TenantFilterSerializer, TenantSerializer
from .services import (
    visible_tenants,
    get_own_tenancies,
    assign_tenant,
    update_tenant,
    release_tenant,
)


class TenantViewSet(viewsets.ModelViewSet):
    """
    Tenants managed by the current landlord.

    create: Assign a tenant to a vacant room
    update / partial_update: Edit details or move to another room
    destroy: Release the tenant and free the room
    me: Tenancies linked to the caller's email
    """

    queryset = Tenant.objects.select_related('room', 'room__property')
    serializer_class = TenantSerializer
    permission_classes = [IsAuthenticated, CanManageTenant]
    pagination_class = StandardPagination
    lookup_value_regex = r'[0-9a-fA-F-]{36}'

    def get_queryset(self):
        if self.action != 'list':
            return super().get_queryset()

        filter_serializer = TenantFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        queryset = visible_tenants(self.request.user)
        if params.get('property'):
            queryset = queryset.filter(room__property_id=params['property'])
        return queryset

    def get_serializer_class(self):
        if self.action in ['create', 'update', 'partial_update']:
            return TenantInputSerializer
        return TenantSerializer

    @extend_schema(parameters=[OpenApiParameter('property', str, description='Property ID')])
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)

    @extend_schema(request=TenantInputSerializer, responses={201: TenantSerializer})
    def create(self, request, *args, **kwargs):
        serializer = TenantInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        tenant = assign_tenant(caller=request.user, **serializer.validated_data)
        return Response(TenantSerializer(tenant).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=TenantInputSerializer, responses={200: TenantSerializer})
    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        serializer = TenantInputSerializer(data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        tenant = update_tenant(
            tenant_id=kwargs['pk'],
            caller=request.user,
            **serializer.validated_data
        )
        return Response(TenantSerializer(tenant).data)

    def destroy(self, request, *args, **kwargs):
        release_tenant(tenant_id=kwargs['pk'], caller=request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(responses={200: TenantSerializer(many=True)})
    @action(detail=False, methods=['get'])
    def me(self, request):
        """
        Tenancies of the logged-in tenant, matched by email.

        GET /api/tenants/me/
        """
        tenancies = get_own_tenancies(caller=request.user)
        return Response(TenantSerializer(tenancies, many=True).data)
