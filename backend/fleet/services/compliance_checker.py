"""
Document Compliance Checker Service.

Evaluates statutory document expiry dates (RC, fitness, insurance, PUCC,
road tax, permit) for fleet trucks and produces per-truck compliance
reports and a fleet-wide expiry alert list.

Single Responsibility: Document expiry classification only.
"""

import logging
from datetime import date
from typing import Dict, List, Optional
from django.utils import timezone

logger = logging.getLogger(__name__)


class ComplianceCheckerService:
    """
    Service for classifying truck document expiries.

    A document is CRITICAL when it expires within CRITICAL_DAYS (expired
    documents included), WARNING within WARNING_DAYS, otherwise GOOD.
    Missing dates are NOT_CONFIGURED.
    """

    CRITICAL_DAYS = 7
    WARNING_DAYS = 14

    STATUS_GOOD = 'GOOD'
    STATUS_WARNING = 'WARNING'
    STATUS_CRITICAL = 'CRITICAL'
    STATUS_NOT_CONFIGURED = 'NOT_CONFIGURED'

    # Worst first, used to pick the overall truck status
    SEVERITY = [STATUS_CRITICAL, STATUS_WARNING, STATUS_NOT_CONFIGURED, STATUS_GOOD]

    def __init__(self, today: Optional[date] = None):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.today = today or timezone.localdate()

    def classify_expiry(self, expiry_date: Optional[date]) -> Dict:
        """
        Classify a single expiry date.

        Args:
            expiry_date: Document expiry date or None

        Returns:
            Dict with status and days_remaining (None when not configured)
        """
        if not expiry_date:
            return {'status': self.STATUS_NOT_CONFIGURED, 'days_remaining': None}

        days_remaining = (expiry_date - self.today).days
        if days_remaining <= self.CRITICAL_DAYS:
            status = self.STATUS_CRITICAL
        elif days_remaining <= self.WARNING_DAYS:
            status = self.STATUS_WARNING
        else:
            status = self.STATUS_GOOD

        return {'status': status, 'days_remaining': days_remaining}

    def check_truck(self, truck) -> Dict:
        """
        Build the compliance report for one truck.

        Args:
            truck: Truck instance

        Returns:
            Dict with truck identity, per-document results and overall status
        """
        documents = []
        for label, expiry_date in truck.get_document_expiries():
            result = self.classify_expiry(expiry_date)
            documents.append({
                'document': label,
                'expiry_date': expiry_date.isoformat() if expiry_date else None,
                **result,
            })

        statuses = {doc['status'] for doc in documents}
        overall = next(
            (status for status in self.SEVERITY if status in statuses),
            self.STATUS_GOOD
        )

        return {
            'truck_id': str(truck.id),
            'plate_number': truck.plate_number,
            'overall_status': overall,
            'documents': documents,
        }

    def expiry_alerts(self, trucks) -> List[Dict]:
        """
        List every CRITICAL or WARNING document across the fleet.

        Args:
            trucks: Iterable of Truck instances

        Returns:
            Alerts sorted by days remaining, soonest first
        """
        alerts = []
        for truck in trucks:
            for label, expiry_date in truck.get_document_expiries():
                result = self.classify_expiry(expiry_date)
                if result['status'] in (self.STATUS_CRITICAL, self.STATUS_WARNING):
                    alerts.append({
                        'truck_id': str(truck.id),
                        'plate_number': truck.plate_number,
                        'document': label,
                        'expiry_date': expiry_date.isoformat(),
                        'status': result['status'],
                        'days_remaining': result['days_remaining'],
                    })

        alerts.sort(key=lambda alert: (alert['days_remaining'], alert['plate_number']))
        self.logger.info(f"Found {len(alerts)} document expiry alerts")
        return alerts
