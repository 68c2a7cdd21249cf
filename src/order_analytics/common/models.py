"""Common database models for the application.

Holds the TimestampMixin that gives models created_at and updated_at fields,
and the KSUID (K-Sortable Unique IDentifier) generator used for public ids."""

from tortoise import fields, models
from ksuid import ksuid


def generate_ksuid():
    """Generate a K-Sortable Unique IDentifier (KSUID).

    KSUIDs are timestamp prefixed, URL-safe and sort chronologically, which
    makes them suitable as public identifiers exposed through the API.

    Returns:
        str: A string representation of the generated KSUID.
    """
    return str(ksuid.Ksuid())


class TimestampMixin(models.Model):
    created_at = fields.DatetimeField(auto_now_add=True, db_index=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        abstract = True
