# canvases/serializers.py
from rest_framework import serializers

from .models import BusinessModelCanvas, ValuePropositionCanvas
from .text import text_to_lines, lines_to_text, has_line_break


class CanvasLinesField(serializers.Field):
    """
    A canvas field: an ordered list of short entries.

    Accepts either a list of strings or the editor's newline-delimited text.
    Empty entries are dropped either way; list entries may not contain line
    breaks.
    """
    default_error_messages = {
        'invalid': 'Expected a list of strings or a block of text.',
        'line_break': 'Entries cannot contain line breaks.',
    }

    def to_internal_value(self, data):
        if isinstance(data, str):
            return text_to_lines(data)
        if not isinstance(data, (list, tuple)):
            self.fail('invalid')

        lines = []
        for entry in data:
            if not isinstance(entry, str):
                self.fail('invalid')
            if has_line_break(entry):
                self.fail('line_break')
            if entry:
                lines.append(entry)
        return lines

    def to_representation(self, value):
        return list(value or [])


class CanvasSerializer(serializers.ModelSerializer):
    """Base serializer; adds a ``text`` view of every list field for the editor."""

    def to_representation(self, instance):
        data = super().to_representation(instance)
        data['text'] = {field: lines_to_text(data[field]) for field in self.Meta.model.LIST_FIELDS}
        return data


class BusinessModelCanvasSerializer(CanvasSerializer):
    key_partners = CanvasLinesField(required=False)
    key_activities = CanvasLinesField(required=False)
    key_resources = CanvasLinesField(required=False)
    value_propositions = CanvasLinesField(required=False)
    customer_relationships = CanvasLinesField(required=False)
    channels = CanvasLinesField(required=False)
    customer_segments = CanvasLinesField(required=False)
    cost_structure = CanvasLinesField(required=False)
    revenue_streams = CanvasLinesField(required=False)

    class Meta:
        model = BusinessModelCanvas
        fields = ['id', 'business', *BusinessModelCanvas.LIST_FIELDS, 'created_at', 'updated_at']
        read_only_fields = ['id', 'business', 'created_at', 'updated_at']


class ValuePropositionCanvasSerializer(CanvasSerializer):
    customer_jobs = CanvasLinesField(required=False)
    pains = CanvasLinesField(required=False)
    gains = CanvasLinesField(required=False)
    products_services = CanvasLinesField(required=False)
    pain_relievers = CanvasLinesField(required=False)
    gain_creators = CanvasLinesField(required=False)

    class Meta:
        model = ValuePropositionCanvas
        fields = ['id', 'business', *ValuePropositionCanvas.LIST_FIELDS, 'created_at', 'updated_at']
        read_only_fields = ['id', 'business', 'created_at', 'updated_at']
