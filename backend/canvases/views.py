# canvases/views.py
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status
from rest_framework.exceptions import NotFound
import logging

from businesses.models import Business
from users.permissions import IsAuthenticatedOrRedirect
from .models import BusinessModelCanvas, ValuePropositionCanvas
from .serializers import BusinessModelCanvasSerializer, ValuePropositionCanvasSerializer

logger = logging.getLogger(__name__)

CANVAS_KINDS = {
    "bmc": (BusinessModelCanvas, BusinessModelCanvasSerializer),
    "vpc": (ValuePropositionCanvas, ValuePropositionCanvasSerializer),
}


class CanvasView(APIView):
    """
    The owner's Business Model Canvas (``bmc``) or Value Proposition Canvas (``vpc``).
    GET: Stored canvas, or an empty one before the first save.
    PUT: Upsert keyed by the owner's business.
    """
    permission_classes = [IsAuthenticatedOrRedirect]

    def get_canvas_type(self, kind):
        if kind not in CANVAS_KINDS:
            raise NotFound("Canvas type not found")
        return CANVAS_KINDS[kind]

    def get_business(self, request):
        business = Business.objects.filter(owner=request.user).first()
        if not business:
            raise NotFound("Business not found")
        return business

    def get(self, request, kind):
        model, serializer_class = self.get_canvas_type(kind)
        business = self.get_business(request)

        canvas = model.objects.filter(business=business).first() or model(business=business)
        return Response(serializer_class(canvas).data)

    def put(self, request, kind):
        model, serializer_class = self.get_canvas_type(kind)
        business = self.get_business(request)

        serializer = serializer_class(data=request.data)
        serializer.is_valid(raise_exception=True)

        # update_or_create saves through the model, which refreshes updated_at
        canvas, created = model.objects.update_or_create(business=business, defaults=serializer.validated_data)
        logger.info(f"{'Created' if created else 'Updated'} {kind} canvas for business {business.pk}")

        return Response(
            serializer_class(canvas).data,
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )
