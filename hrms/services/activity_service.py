"""
Activity Service
Employee timeline entries
"""
from datetime import datetime
from typing import List, Optional
from hrms import db
from hrms.models.employee import Employee
from hrms.models.employee_activity import EmployeeActivity, ACTIVITY_TYPES
from hrms.services.errors import NotFoundError, ServiceError


class ActivityService:

    def add_employee_activity(self, employee_id: int, activity_type: str, description: str,
                              when: Optional[datetime] = None, commit: bool = True) -> EmployeeActivity:
        """
        Append an entry to an employee's timeline

        Leave and concurrency services call this with commit=False so the entry
        lands in the same transaction as the change it describes.
        """
        if activity_type not in ACTIVITY_TYPES:
            raise ServiceError(f'Invalid activity type: {activity_type}')

        employee = db.session.get(Employee, employee_id)
        if not employee:
            raise NotFoundError('Employee not found')

        activity = EmployeeActivity(
            employee_id=employee_id,
            type=activity_type,
            description=description,
            date=when or datetime.utcnow(),
        )
        db.session.add(activity)
        if commit:
            db.session.commit()
        return activity

    def get_employee_activities(self, employee_id: int) -> List[EmployeeActivity]:
        return EmployeeActivity.query.filter_by(employee_id=employee_id, is_active=True) \
            .order_by(EmployeeActivity.date.desc(), EmployeeActivity.id.desc()).all()

    def delete_employee_activity(self, activity_id: int) -> EmployeeActivity:
        activity = db.session.get(EmployeeActivity, activity_id)
        if not activity or not activity.is_active:
            raise NotFoundError('Activity not found')
        activity.is_active = False
        db.session.commit()
        return activity


# Singleton instance
activity_service = ActivityService()
