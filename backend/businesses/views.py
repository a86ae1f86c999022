from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import AllowAny
from rest_framework import status
from rest_framework.exceptions import NotFound
from django.db import IntegrityError, transaction
from django.db.models import F
from drf_spectacular.utils import extend_schema, OpenApiParameter
import logging

from config.constants import ADMIN_ROLE, DASHBOARD_TABS, INDUSTRY_CHOICES, MANAGE_ROUTE
from users.models import Profile
from users.permissions import IsAuthenticatedOrRedirect
from users.serializers import ProfileSerializer, UserTableRowSerializer
from .filters import filter_businesses, list_industries
from .models import Business
from .serializers import BusinessSerializer, DashboardBusinessSerializer

logger = logging.getLogger(__name__)


class BusinessListView(APIView):
    """
    Public directory. Always loads the full collection newest first, then
    applies the text and industry filters in memory.
    """
    permission_classes = [AllowAny]

    @extend_schema(parameters=[
        OpenApiParameter("search", str, description="Case-insensitive match on name, description or industry"),
        OpenApiParameter("industry", str, description="Exact industry"),
    ])
    def get(self, request):
        businesses = list(Business.objects.all())
        filtered = filter_businesses(
            businesses,
            search_term=request.query_params.get("search", ""),
            industry=request.query_params.get("industry", ""),
        )
        serializer = BusinessSerializer(filtered, many=True, context={'request': request})
        return Response({
            "businesses": serializer.data,
            "industries": list_industries(businesses),
            "count": len(filtered),
        })


class BusinessProfileView(APIView):
    """Public detail page for one business. Each view bumps the visitor counter."""
    permission_classes = [AllowAny]

    def get(self, request, pk):
        updated = Business.objects.filter(pk=pk).update(visitor_count=F("visitor_count") + 1)
        if not updated:
            raise NotFound("Business not found")

        business = Business.objects.get(pk=pk)
        serializer = BusinessSerializer(business, context={'request': request})
        return Response(serializer.data)


class BusinessManageView(APIView):
    """
    API view for the owner's own business.
    GET: Retrieve the authenticated user's business (null until created).
    POST: Create the business, once.
    PUT/PATCH: Update the business details.
    """
    permission_classes = [IsAuthenticatedOrRedirect]

    def get(self, request):
        """Retrieve business details for the authenticated user."""
        business = Business.objects.filter(owner=request.user).first()
        return Response({
            "business": BusinessSerializer(business, context={'request': request}).data if business else None,
            "industries": INDUSTRY_CHOICES,
        })

    def post(self, request):
        """Create the user's business. A user can only ever own one."""
        if Business.objects.filter(owner=request.user).exists():
            return Response({"error": "You already have a business."}, status=status.HTTP_409_CONFLICT)

        serializer = BusinessSerializer(data=request.data, context={'request': request})
        serializer.is_valid(raise_exception=True)
        try:
            with transaction.atomic():
                business = serializer.save(owner=request.user)
        except IntegrityError:
            # Lost a race against another create from the same account
            logger.warning(f"Duplicate business create for user {request.user.pk}")
            return Response({"error": "You already have a business."}, status=status.HTTP_409_CONFLICT)

        logger.info(f"User {request.user.pk} created business {business.pk}")
        business = Business.objects.get(pk=business.pk)
        return Response(BusinessSerializer(business, context={'request': request}).data, status=status.HTTP_201_CREATED)

    def put(self, request):
        """Update business details fully."""
        return self._update_business(request)

    def patch(self, request):
        """Update business details partially."""
        return self._update_business(request, partial=True)

    def _update_business(self, request, partial=False):
        """Helper method for update operations."""
        business = Business.objects.filter(owner=request.user).first()
        if not business:
            raise NotFound("Business not found")

        serializer = BusinessSerializer(business, data=request.data, partial=partial, context={'request': request})
        serializer.is_valid(raise_exception=True)
        serializer.save()
        logger.info(f"User {request.user.pk} updated business {business.pk}")
        return Response(serializer.data)


class DashboardView(APIView):
    """
    Role-dependent dashboard.
    Admins get aggregate counts, every business with its owner's name and,
    on the users tab, the user-management table. Students only ever see
    their own business.
    """
    permission_classes = [IsAuthenticatedOrRedirect]

    @extend_schema(parameters=[OpenApiParameter("tab", str, enum=DASHBOARD_TABS)])
    def get(self, request):
        profile = request.user.get_profile()
        if profile is None:
            raise NotFound("Profile not found")

        if profile.role == ADMIN_ROLE:
            return Response(self._admin_dashboard(request, profile))
        return Response(self._student_dashboard(request, profile))

    def _admin_dashboard(self, request, profile):
        tab = request.query_params.get("tab")
        active_tab = tab if tab in DASHBOARD_TABS else DASHBOARD_TABS[0]

        businesses = list(Business.objects.select_related("owner__profile"))
        profiles = Profile.objects.select_related("user").order_by("-created_at")

        data = {
            "profile": ProfileSerializer(profile).data,
            "role": profile.role,
            "tabs": DASHBOARD_TABS,
            "active_tab": active_tab,
            "stats": {
                "total_businesses": len(businesses),
                "total_users": profiles.count(),
                "featured_businesses": sum(1 for business in businesses if business.featured),
            },
            "businesses": DashboardBusinessSerializer(businesses, many=True, context={'request': request}).data,
        }
        if active_tab == "users":
            data["users"] = UserTableRowSerializer(profiles, many=True, context={'request': request}).data
        return data

    def _student_dashboard(self, request, profile):
        business = Business.objects.filter(owner=request.user).first()
        return {
            "profile": ProfileSerializer(profile).data,
            "role": profile.role,
            "business": BusinessSerializer(business, context={'request': request}).data if business else None,
            "manage_url": MANAGE_ROUTE,
            "can_create_business": business is None,
        }
