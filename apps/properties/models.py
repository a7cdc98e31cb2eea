from django.db import models
import uuid


class Property(models.Model):
    """Named real-estate unit owning a set of transactions."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'properties'
        verbose_name_plural = 'properties'
        ordering = ['created_at', 'name']

    def __str__(self):
        return self.name
