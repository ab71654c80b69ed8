"""
Daily odometer registry model for fuel app.
"""

import uuid
from django.db import models


class DailyOdoEntry(models.Model):
    """
    Opening and closing odometer of a truck for one day.

    Maintained from completed fuel logs; one row per (truck, date).
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    truck = models.ForeignKey(
        'fleet.Truck',
        on_delete=models.CASCADE,
        related_name='daily_odo_entries'
    )
    date = models.DateField()
    opening_odometer = models.PositiveIntegerField(default=0)
    closing_odometer = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = 'fuel_daily_odo'
        ordering = ['-date']
        verbose_name = 'Daily Odometer Entry'
        verbose_name_plural = 'Daily Odometer Entries'
        constraints = [
            models.UniqueConstraint(fields=['truck', 'date'], name='unique_truck_daily_odo'),
        ]

    def __str__(self):
        return f"{self.truck_id} {self.date}: {self.opening_odometer}-{self.closing_odometer}"

    @property
    def distance_km(self):
        return max(0, self.closing_odometer - self.opening_odometer)
