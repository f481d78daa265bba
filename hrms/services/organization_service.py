"""
Organization Service
Ministries, sections (departments) and positions
"""
from typing import List, Optional
from datetime import datetime
from flask import current_app
from hrms import db
from hrms.models.ministry import Ministry
from hrms.models.section import Section
from hrms.models.position import Position
from hrms.models.employee import Employee
from hrms.services.errors import ConflictError, NotFoundError


class OrganizationService:
    """Service for the organisation structure"""

    # ===== MINISTRIES =====

    def create_ministry(self, data: dict) -> Ministry:
        ministry = Ministry(ministry_name=data['ministry_name'], description=data.get('description'))
        db.session.add(ministry)
        db.session.commit()
        return ministry

    def get_ministry_by_id(self, ministry_id: int) -> Ministry:
        ministry = db.session.get(Ministry, ministry_id)
        if not ministry:
            raise NotFoundError('Ministry not found')
        return ministry

    def get_all_ministries(self) -> List[Ministry]:
        return Ministry.query.order_by(Ministry.ministry_name).all()

    def update_ministry(self, ministry_id: int, data: dict) -> Ministry:
        ministry = self.get_ministry_by_id(ministry_id)
        for field in ('ministry_name', 'description'):
            if field in data and data[field] is not None:
                setattr(ministry, field, data[field])
        db.session.commit()
        return ministry

    def delete_ministry(self, ministry_id: int) -> None:
        """Hard delete; sections keep existing without a ministry"""
        ministry = self.get_ministry_by_id(ministry_id)
        for section in ministry.sections:
            section.ministry_id = None
        db.session.delete(ministry)
        db.session.commit()

    # ===== SECTIONS =====

    def create_section(self, data: dict) -> Section:
        if data.get('ministry_id'):
            self.get_ministry_by_id(data['ministry_id'])

        section = Section(
            section_name=data['section_name'],
            description=data.get('description'),
            ministry_id=data.get('ministry_id'),
        )
        db.session.add(section)
        db.session.commit()
        current_app.logger.info(f'Section {section.id} created: {section.section_name}')
        return section

    def get_section_by_id(self, section_id: int, include_inactive: bool = False) -> Section:
        section = db.session.get(Section, section_id)
        if not section or (not section.is_active and not include_inactive):
            raise NotFoundError('Section not found')
        return section

    def get_all_sections(self, include_inactive: bool = False) -> List[Section]:
        query = Section.query
        if not include_inactive:
            query = query.filter_by(is_active=True)
        return query.order_by(Section.section_name).all()

    def update_section(self, section_id: int, data: dict) -> Section:
        section = self.get_section_by_id(section_id, include_inactive=True)

        if data.get('ministry_id'):
            self.get_ministry_by_id(data['ministry_id'])

        for field in ('section_name', 'description', 'ministry_id', 'is_active'):
            if field in data and data[field] is not None:
                setattr(section, field, data[field])
        if data.get('is_active'):
            section.deleted_at = None

        db.session.commit()
        return section

    def delete_section(self, section_id: int) -> Section:
        """
        Soft delete a section

        Raises:
            ConflictError: If active employees are still assigned to it
        """
        section = self.get_section_by_id(section_id)

        active_employees = section.employees.filter(Employee.is_active.is_(True)).count()
        if active_employees:
            raise ConflictError(
                f'Cannot delete section with {active_employees} active employee(s). Reassign them first.'
            )

        section.is_active = False
        section.deleted_at = datetime.utcnow()
        db.session.commit()
        return section

    def get_section_with_employees(self, section_id: int) -> dict:
        section = self.get_section_by_id(section_id)
        employees = section.employees.filter(Employee.is_active.is_(True)) \
            .order_by(Employee.last_name, Employee.first_name).all()

        data = section.to_dict()
        data['employees'] = [e.to_dict() for e in employees]
        data['positions'] = [p.to_dict() for p in section.positions.filter_by(is_active=True).all()]
        return data

    def update_section_employee_count(self, section_id: int) -> int:
        """Recount active employees into the denormalised employee_count"""
        section = self.get_section_by_id(section_id, include_inactive=True)
        section.employee_count = section.employees.filter(Employee.is_active.is_(True)).count()
        db.session.commit()
        return section.employee_count

    # ===== POSITIONS =====

    def create_position(self, data: dict) -> Position:
        self.get_section_by_id(data['section_id'])

        position = Position(
            position_title=data['position_title'],
            section_id=data['section_id'],
            salary_grade=data.get('salary_grade'),
            description=data.get('description'),
        )
        db.session.add(position)
        db.session.commit()
        return position

    def get_position_by_id(self, position_id: int, include_inactive: bool = False) -> Position:
        position = db.session.get(Position, position_id)
        if not position or (not position.is_active and not include_inactive):
            raise NotFoundError('Position not found')
        return position

    def get_all_positions(self, include_inactive: bool = False, section_id: Optional[int] = None) -> List[Position]:
        query = Position.query
        if not include_inactive:
            query = query.filter_by(is_active=True)
        if section_id:
            query = query.filter_by(section_id=section_id)
        return query.order_by(Position.position_title).all()

    def update_position(self, position_id: int, data: dict) -> Position:
        position = self.get_position_by_id(position_id, include_inactive=True)

        if data.get('section_id'):
            self.get_section_by_id(data['section_id'])

        for field in ('position_title', 'section_id', 'salary_grade', 'description', 'is_active'):
            if field in data and data[field] is not None:
                setattr(position, field, data[field])
        if data.get('is_active'):
            position.deleted_at = None

        db.session.commit()
        return position

    def delete_position(self, position_id: int) -> Position:
        position = self.get_position_by_id(position_id)
        position.is_active = False
        position.deleted_at = datetime.utcnow()
        db.session.commit()
        return position

    def get_position_with_section(self, position_id: int) -> dict:
        position = self.get_position_by_id(position_id)
        data = position.to_dict()
        data['section'] = position.section.to_dict() if position.section else None
        return data

    def update_position_section(self, position_id: int, section_id: int) -> Position:
        """Move a position to another section"""
        position = self.get_position_by_id(position_id)
        self.get_section_by_id(section_id)
        position.section_id = section_id
        db.session.commit()
        return position


# Singleton instance
organization_service = OrganizationService()
