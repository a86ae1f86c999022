# backend/businesses/models.py
from django.db import models
from users.models import User

class Business(models.Model):
    """
    Business listing owned by a student. Each owner has at most one business;
    the database enforces it through the one-to-one owner link.
    """
    name = models.CharField(max_length=100)
    description = models.TextField()
    industry = models.CharField(max_length=50)
    website_url = models.URLField(max_length=255, blank=True, null=True)
    email = models.EmailField(blank=True, null=True)
    phone = models.CharField(max_length=32, blank=True, null=True)
    youtube_video_url = models.URLField(max_length=255, blank=True, null=True)  # Raw link, turned into an embed URL on read
    featured = models.BooleanField(default=False)
    rating = models.FloatField(default=0)
    total_ratings = models.PositiveIntegerField(default=0)
    visitor_count = models.PositiveIntegerField(default=0)
    owner = models.OneToOneField(User, on_delete=models.CASCADE, related_name="business")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "businesses"
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return self.name or "Unnamed Business"
