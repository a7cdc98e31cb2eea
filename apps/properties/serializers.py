from rest_framework import serializers
from .models import Property


class PropertySerializer(serializers.ModelSerializer):
    """Property details with the size of its ledger."""

    transaction_count = serializers.SerializerMethodField()

    class Meta:
        model = Property
        fields = ['id', 'name', 'transaction_count', 'created_at', 'updated_at']
        read_only_fields = ['id', 'created_at', 'updated_at']

    def get_transaction_count(self, obj) -> int:
        counts = self.context.get('transaction_counts')
        if counts is None:
            return obj.transactions.count()
        return counts.get(obj.id, 0)


class PropertyInputSerializer(serializers.Serializer):
    """Validate the name for create and rename."""

    name = serializers.CharField(max_length=200)

    def validate_name(self, value):
        if not value.strip():
            raise serializers.ValidationError('Name is required')
        return value.strip()
