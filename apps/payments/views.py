from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter

from apps.common.pagination import StandardPagination
from .models import Payment
from .permissions import CanAccessPayment
from .serializers import (
    PaymentCreateSerializer,
    PaymentUpdateSerializer,
    PayRentInputSerializer,
    ForceStatusInputSerializer,
    PaymentFilterSerializer,
    PaymentSerializer,
)
from .services import (
    visible_payments,
    create_payment,
    pay_rent,
    submit_payment,
    approve_payment,
    decline_payment,
    force_payment_status,
    update_payment,
    delete_payment,
)


class PaymentViewSet(viewsets.ModelViewSet):
    """
    Rent and other payments.

    list: Payments the caller can see, filterable by tenant/status/type
    create: Record a payment (PENDING unless a status is given)
    update / partial_update: Edit a pending payment or move it along an allowed edge
    destroy: Admin or the tenant's landlord
    pay_rent: Tenant claims this month's rent as paid
    submit / approve / decline: Ordinary transitions
    force_status: Admin override
    """

    queryset = Payment.objects.select_related(
        'tenant', 'tenant__room', 'tenant__room__property', 'reviewed_by'
    )
    serializer_class = PaymentSerializer
    permission_classes = [IsAuthenticated, CanAccessPayment]
    pagination_class = StandardPagination
    lookup_value_regex = r'[0-9a-fA-F-]{36}'

    def get_queryset(self):
        if self.action != 'list':
            return super().get_queryset()

        filter_serializer = PaymentFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        queryset = visible_payments(self.request.user)
        if params.get('tenant'):
            queryset = queryset.filter(tenant_id=params['tenant'])
        if params.get('status'):
            queryset = queryset.filter(status=params['status'])
        if params.get('payment_type'):
            queryset = queryset.filter(payment_type=params['payment_type'])
        return queryset

    def get_serializer_class(self):
        if self.action == 'create':
            return PaymentCreateSerializer
        if self.action in ['update', 'partial_update']:
            return PaymentUpdateSerializer
        return PaymentSerializer

    @extend_schema(parameters=[
        OpenApiParameter('tenant', str, description='Tenant ID'),
        OpenApiParameter('status', str),
        OpenApiParameter('payment_type', str),
    ])
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)

    @extend_schema(request=PaymentCreateSerializer, responses={201: PaymentSerializer})
    def create(self, request, *args, **kwargs):
        serializer = PaymentCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        payment = create_payment(caller=request.user, **serializer.validated_data)
        return Response(PaymentSerializer(payment).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=PaymentUpdateSerializer, responses={200: PaymentSerializer})
    def update(self, request, *args, **kwargs):
        kwargs.pop('partial', None)
        serializer = PaymentUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        payment = update_payment(
            payment_id=kwargs['pk'],
            caller=request.user,
            **serializer.validated_data
        )
        return Response(PaymentSerializer(payment).data)

    def destroy(self, request, *args, **kwargs):
        delete_payment(payment_id=kwargs['pk'], caller=request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(request=PayRentInputSerializer, responses={201: PaymentSerializer})
    @action(detail=False, methods=['post'])
    def pay_rent(self, request):
        """
        Claim the current rent as paid; the landlord then approves it.

        POST /api/payments/pay_rent/
        Body: {"tenant_id": "...", "note": "optional"}
        """
        input_serializer = PayRentInputSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)
        payment = pay_rent(caller=request.user, **input_serializer.validated_data)
        return Response(PaymentSerializer(payment).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=None, responses={200: PaymentSerializer})
    @action(detail=True, methods=['post'])
    def submit(self, request, pk=None):
        """POST /api/payments/{id}/submit/  PENDING -> WAITING_APPROVAL"""
        payment = submit_payment(payment_id=pk, caller=request.user)
        return Response(PaymentSerializer(payment).data)

    @extend_schema(request=None, responses={200: PaymentSerializer})
    @action(detail=True, methods=['post'])
    def approve(self, request, pk=None):
        """POST /api/payments/{id}/approve/  WAITING_APPROVAL -> PAID"""
        payment = approve_payment(payment_id=pk, caller=request.user)
        return Response(PaymentSerializer(payment).data)

    @extend_schema(request=None, responses={200: PaymentSerializer})
    @action(detail=True, methods=['post'])
    def decline(self, request, pk=None):
        """POST /api/payments/{id}/decline/  WAITING_APPROVAL -> FAILED"""
        payment = decline_payment(payment_id=pk, caller=request.user)
        return Response(PaymentSerializer(payment).data)

    @extend_schema(request=ForceStatusInputSerializer, responses={200: PaymentSerializer})
    @action(detail=True, methods=['post'])
    def force_status(self, request, pk=None):
        """
        Admin override of the status.

        POST /api/payments/{id}/force_status/
        Body: {"status": "REFUNDED", "note": "optional"}
        """
        input_serializer = ForceStatusInputSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)
        payment = force_payment_status(
            payment_id=pk,
            caller=request.user,
            **input_serializer.validated_data
        )
        return Response(PaymentSerializer(payment).data)
