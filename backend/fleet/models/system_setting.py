"""
System settings model for fleet app.

Key/value store for company-wide settings such as fuel benchmarks.
"""

from django.db import models


class SystemSetting(models.Model):
    """A single JSON setting addressed by key."""

    BENCHMARKS_KEY = 'benchmarks'

    key = models.CharField(
        max_length=100,
        primary_key=True,
        help_text="Setting key"
    )
    value = models.JSONField(
        default=dict,
        help_text="Setting value"
    )
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'fleet_system_setting'
        verbose_name = 'System Setting'
        verbose_name_plural = 'System Settings'

    def __str__(self):
        return self.key
