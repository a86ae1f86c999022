# canvases/models.py
from django.db import models
from businesses.models import Business


class Canvas(models.Model):
    """
    Planning document attached to one business. Every content field is an
    ordered list of short text entries stored as a JSON array.
    """
    LIST_FIELDS = ()

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class BusinessModelCanvas(Canvas):
    LIST_FIELDS = (
        "key_partners",
        "key_activities",
        "key_resources",
        "value_propositions",
        "customer_relationships",
        "channels",
        "customer_segments",
        "cost_structure",
        "revenue_streams",
    )

    business = models.OneToOneField(Business, on_delete=models.CASCADE, related_name="business_model_canvas")
    key_partners = models.JSONField(default=list, blank=True)
    key_activities = models.JSONField(default=list, blank=True)
    key_resources = models.JSONField(default=list, blank=True)
    value_propositions = models.JSONField(default=list, blank=True)
    customer_relationships = models.JSONField(default=list, blank=True)
    channels = models.JSONField(default=list, blank=True)
    customer_segments = models.JSONField(default=list, blank=True)
    cost_structure = models.JSONField(default=list, blank=True)
    revenue_streams = models.JSONField(default=list, blank=True)

    class Meta:
        db_table = "business_model_canvas"

    def __str__(self):
        return f"Business Model Canvas - {self.business.name}"


class ValuePropositionCanvas(Canvas):
    LIST_FIELDS = (
        "customer_jobs",
        "pains",
        "gains",
        "products_services",
        "pain_relievers",
        "gain_creators",
    )

    business = models.OneToOneField(Business, on_delete=models.CASCADE, related_name="value_proposition_canvas")
    customer_jobs = models.JSONField(default=list, blank=True)
    pains = models.JSONField(default=list, blank=True)
    gains = models.JSONField(default=list, blank=True)
    products_services = models.JSONField(default=list, blank=True)
    pain_relievers = models.JSONField(default=list, blank=True)
    gain_creators = models.JSONField(default=list, blank=True)

    class Meta:
        db_table = "value_proposition_canvas"

    def __str__(self):
        return f"Value Proposition Canvas - {self.business.name}"
