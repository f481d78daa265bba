"""
Performance Service
"""
from typing import List, Optional, Dict
from sqlalchemy import func
from hrms import db
from hrms.models.employee import Employee
from hrms.models.section import Section
from hrms.models.performance_review import PerformanceReview
from hrms.services.errors import NotFoundError


class PerformanceService:

    def create_performance(self, data: dict, reviewer_id: Optional[int] = None) -> PerformanceReview:
        employee = db.session.get(Employee, data['employee_id'])
        if not employee or not employee.is_active:
            raise NotFoundError('Employee not found')

        review = PerformanceReview(
            employee_id=employee.id,
            reviewer_id=reviewer_id,
            review_date=data['review_date'],
            score=data['score'],
            review=data.get('review'),
            strengths=data.get('strengths'),
            areas_for_improvement=data.get('areas_for_improvement'),
            comments=data.get('comments'),
        )
        db.session.add(review)
        db.session.commit()
        return review

    def get_performance_by_id(self, review_id: int) -> PerformanceReview:
        review = db.session.get(PerformanceReview, review_id)
        if not review:
            raise NotFoundError('Performance review not found')
        return review

    def get_performance_by_employee(self, employee_id: int) -> List[PerformanceReview]:
        return PerformanceReview.query.filter_by(employee_id=employee_id) \
            .order_by(PerformanceReview.review_date.desc(), PerformanceReview.id.desc()).all()

    def get_all_performances(self) -> List[Dict]:
        reviews = PerformanceReview.query.order_by(PerformanceReview.review_date.desc()).all()
        return [r.to_dict(include_employee=True) for r in reviews]

    def update_performance(self, review_id: int, data: dict) -> PerformanceReview:
        review = self.get_performance_by_id(review_id)
        for field in ('review_date', 'score', 'review', 'strengths', 'areas_for_improvement', 'comments'):
            if data.get(field) is not None:
                setattr(review, field, data[field])
        db.session.commit()
        return review

    def delete_performance(self, review_id: int) -> None:
        review = self.get_performance_by_id(review_id)
        db.session.delete(review)
        db.session.commit()

    def get_section_performance_summary(self, section_id: Optional[int] = None) -> List[Dict]:
        """Average score and review count per section"""
        query = db.session.query(
            Section.id,
            Section.section_name,
            func.avg(PerformanceReview.score),
            func.count(PerformanceReview.id),
        ).select_from(PerformanceReview) \
            .join(Employee, PerformanceReview.employee_id == Employee.id) \
            .join(Section, Employee.section_id == Section.id)

        if section_id:
            query = query.filter(Section.id == section_id)

        rows = query.group_by(Section.id, Section.section_name).order_by(Section.section_name).all()
        return [
            {
                'section_id': sid,
                'section_name': name,
                'average_score': round(float(avg), 2) if avg is not None else None,
                'review_count': count,
            }
            for sid, name, avg, count in rows
        ]


# Singleton instance
performance_service = PerformanceService()
