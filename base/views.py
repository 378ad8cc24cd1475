from django.utils import timezone

from drf_spectacular.utils import extend_schema, inline_serializer
from rest_framework import permissions, serializers
from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.response import Response


@extend_schema(
    tags=["Health"],
    operation_id="health_check",
    summary="Health Check",
    responses={
        200: inline_serializer(
            name="HealthResponse",
            fields={
                "status": serializers.CharField(),
                "message": serializers.CharField(),
                "timestamp": serializers.DateTimeField(),
            },
        )
    },
)
@api_view(["GET"])
@authentication_classes([])
@permission_classes([permissions.AllowAny])
def health_check(request):
    return Response(
        {
            "status": "OK",
            "message": "TaskDesk API is running",
            "timestamp": timezone.now(),
        }
    )
