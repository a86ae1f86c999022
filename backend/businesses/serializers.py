# backend/businesses/serializers.py
from django.conf import settings
from rest_framework import serializers

from config.constants import INDUSTRY_CHOICES
from .embed import youtube_embed_url
from .models import Business

class BusinessSerializer(serializers.ModelSerializer):
    """Serializer for the Business model with field validation"""
    industry = serializers.ChoiceField(choices=INDUSTRY_CHOICES)
    owner = serializers.PrimaryKeyRelatedField(read_only=True)
    embed_url = serializers.SerializerMethodField()

    class Meta:
        model = Business
        fields = [
            'id', 'name', 'description', 'industry',
            'website_url', 'email', 'phone', 'youtube_video_url', 'embed_url',
            'featured', 'rating', 'total_ratings', 'visitor_count',
            'owner', 'created_at',
        ]
        read_only_fields = ['id', 'featured', 'rating', 'total_ratings', 'visitor_count', 'owner', 'created_at']

    def get_embed_url(self, obj):
        return youtube_embed_url(obj.youtube_video_url, settings.SITE_ORIGIN)

    def validate_name(self, value):
        """Validate that business name is at least 3 characters long."""
        if len(value.strip()) < 3:
            raise serializers.ValidationError("Business name must be at least 3 characters.")
        return value.strip()

    def validate_description(self, value):
        if not value.strip():
            raise serializers.ValidationError("Description is required.")
        return value


class DashboardBusinessSerializer(BusinessSerializer):
    """Business row for the admin dashboard, joined with its owner's display name."""
    owner_name = serializers.SerializerMethodField()

    class Meta(BusinessSerializer.Meta):
        fields = BusinessSerializer.Meta.fields + ['owner_name']

    def get_owner_name(self, obj):
        profile = obj.owner.get_profile()
        return profile.full_name if profile else None
