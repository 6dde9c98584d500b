import logging

from django.conf import settings
from django.core.exceptions import ValidationError
from drf_yasg import openapi
from drf_yasg.utils import swagger_auto_schema
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from core.exceptions import ServiceError
from core.permissions import HasRole
from dispatch.models import DispatchRecord
from dispatch.serializers import DispatchAssignRequestSerializer, DispatchRecordSerializer
from dispatch.services.orchestrator import assign_dispatch

logger = logging.getLogger(__name__)


class CanDispatch(HasRole):
    message = 'Only e-commerce or admin users can assign drivers.'

    def get_allowed_roles(self, view):
        return settings.DISPATCH_ROLES


def _joined_record(pk):
    return (
        DispatchRecord.objects
        .select_related('order', 'driver', 'driver__employee', 'shop', 'assignment')
        .get(pk=pk)
    )


class DispatchAssignView(APIView):
    """
    Assign a driver and origin shop to an e-commerce order, or list the
    dispatch log.
    """
    permission_classes = [CanDispatch]

    @swagger_auto_schema(
        manual_parameters=[
            openapi.Parameter('orderId', openapi.IN_QUERY, type=openapi.TYPE_STRING,
                              description="Only dispatches of this order"),
        ],
        responses={
            200: openapi.Response(
                "Dispatch log, newest first.",
                openapi.Schema(
                    type=openapi.TYPE_OBJECT,
                    properties={
                        'dispatches': openapi.Schema(
                            type=openapi.TYPE_ARRAY,
                            items=openapi.Schema(type=openapi.TYPE_OBJECT),
                        ),
                    },
                ),
            ),
        },
        operation_id="dispatch_list",
        tags=['Dispatch'],
    )
    def get(self, request, format=None):
        records = DispatchRecord.objects.select_related(
            'order', 'driver', 'driver__employee', 'shop', 'assignment'
        ).order_by('-created_at', '-id')
        order_id = request.query_params.get('orderId') or request.query_params.get('order_id')
        if order_id:
            if order_id.isdigit():
                records = records.filter(order_id=int(order_id))
            else:
                records = records.filter(order__order_number=order_id)
        return Response({'dispatches': DispatchRecordSerializer(records, many=True).data})

    @swagger_auto_schema(
        request_body=DispatchAssignRequestSerializer,
        responses={
            200: openapi.Response("Driver assigned.", DispatchRecordSerializer),
            400: openapi.Response("Missing fields, driver at capacity, or order not dispatchable."),
            401: openapi.Response("Not authenticated."),
            403: openapi.Response("Role not allowed to dispatch."),
            404: openapi.Response("Order, driver or shop not found."),
            500: openapi.Response("Dispatch could not be saved."),
        },
        operation_id="dispatch_assign",
        operation_description="""Assigns a driver to an order shipped from a shop. Creates the driver
        assignment and dispatch record, moves the order to in_transit, marks the driver busy,
        reduces shop stock and notifies the driver.""",
        tags=['Dispatch'],
    )
    def post(self, request, format=None):
        serializer = DispatchAssignRequestSerializer(data=request.data)
        if not serializer.is_valid():
            logger.warning(f"Dispatch request validation error: {serializer.errors}")
            return Response(
                {'error': 'Invalid dispatch details', 'details': serializer.errors},
                status=status.HTTP_400_BAD_REQUEST,
            )
        data = serializer.validated_data

        try:
            outcome = assign_dispatch(
                order_id=data.get('orderId'),
                driver_id=data.get('driverId'),
                shop_id=data.get('shopId'),
                tracking_number=data.get('trackingNumber'),
                estimated_delivery_time=data.get('estimatedDeliveryTime'),
                transport_cost=data.get('transportCost'),
                notes=data.get('notes') or '',
                requested_by=request.user.get_username(),
            )
        except ServiceError as e:
            return Response(e.as_payload(), status=e.status_code)
        except ValidationError as e:
            return Response({'error': e.message, 'details': {'order_status': e.messages}},
                            status=status.HTTP_400_BAD_REQUEST)
        except Exception as e:
            logger.exception("Unexpected dispatch failure")
            return Response({'error': 'Failed to assign driver', 'details': {'reason': str(e)}},
                            status=status.HTTP_500_INTERNAL_SERVER_ERROR)

        record = outcome.record
        try:
            dispatch = DispatchRecordSerializer(_joined_record(record.pk)).data
        except Exception:
            logger.exception(f"Dispatch {record.pk} saved but could not be reloaded")
            dispatch = {
                'id': record.pk,
                'tracking_number': record.tracking_number,
                'status': record.status,
            }

        return Response({
            'success': True,
            'dispatch': dispatch,
            'message': 'Driver assigned successfully',
            'inventory_shortfalls': [s.as_dict() for s in outcome.inventory_shortfalls],
        }, status=status.HTTP_200_OK)
