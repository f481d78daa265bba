"""
User Service
Account administration: create, look up, update and remove users
"""
from typing import List, Optional
from datetime import datetime
from flask import current_app
from sqlalchemy import or_
from hrms import db
from hrms.models.user import User, ROLES
from hrms.models.audit_log import AuditLog
from hrms.services.errors import ConflictError, NotFoundError, PermissionDenied, ServiceError
from hrms.utils.input_validators import validate_password_strength, sanitize_sql_like_pattern, clean_search_query


SEARCH_FIELDS = ('name', 'email', 'role')


class UserService:
    """Service for user account operations"""

    def create_user(self, data: dict) -> User:
        """
        Create a user account

        Args:
            data: Validated UserCreateSchema / SignUpSchema payload

        Returns:
            The new User

        Raises:
            ConflictError: If the email is already registered
        """
        email = data['email'].lower()
        if self.get_user_by_email(email):
            raise ConflictError('Email already registered')

        is_valid, error = validate_password_strength(data['password'])
        if not is_valid:
            raise ServiceError(error)

        user = User(
            email=email,
            first_name=data.get('first_name'),
            last_name=data.get('last_name'),
            phone_number=data.get('phone_number'),
            role=data.get('role') or 'employee',
            is_active=data.get('is_active', True),
        )
        user.set_password(data['password'])
        if data.get('email_verified'):
            user.email_verified_at = datetime.utcnow()

        db.session.add(user)
        db.session.commit()
        current_app.logger.info(f'User {user.id} created with role {user.role}')
        return user

    def get_user_by_email(self, email: str) -> Optional[User]:
        if not email:
            return None
        return User.query.filter(db.func.lower(User.email) == email.strip().lower()).first()

    def get_user_by_id(self, user_id: int) -> User:
        user = db.session.get(User, user_id)
        if not user:
            raise NotFoundError('User not found')
        return user

    def get_all_users(self) -> List[User]:
        return User.query.order_by(User.created_at.desc()).all()

    def update_user(self, user_id: int, data: dict) -> User:
        """Partial update; a password in the payload is re-hashed"""
        user = self.get_user_by_id(user_id)

        if data.get('password'):
            is_valid, error = validate_password_strength(data['password'])
            if not is_valid:
                raise ServiceError(error)

        for field in ('first_name', 'last_name', 'phone_number', 'role', 'is_active'):
            if field in data and data[field] is not None:
                setattr(user, field, data[field])

        if data.get('password'):
            user.set_password(data['password'])

        db.session.commit()
        return user

    def delete_user(self, user_id: int, acting_user: User) -> None:
        """Delete a user; admins cannot remove their own account"""
        user = self.get_user_by_id(user_id)
        if acting_user and user.id == acting_user.id:
            raise PermissionDenied('You cannot delete your own account')

        db.session.delete(user)
        db.session.commit()
        current_app.logger.info(f'User {user_id} deleted by {acting_user.id if acting_user else "system"}')

    def search_users(self, query: str, field: str = 'name') -> List[User]:
        """
        Search users by name, email or role

        Args:
            query: Search text
            field: One of 'name', 'email', 'role'

        Returns:
            List of matching users, newest first
        """
        if field not in SEARCH_FIELDS:
            raise ServiceError(f"Invalid search field. Use one of: {', '.join(SEARCH_FIELDS)}")

        query = clean_search_query(query)
        if not query:
            return self.get_all_users()

        pattern = f'%{sanitize_sql_like_pattern(query)}%'
        q = User.query
        if field == 'name':
            q = q.filter(or_(
                User.first_name.ilike(pattern, escape='\\'),
                User.last_name.ilike(pattern, escape='\\'),
            ))
        elif field == 'email':
            q = q.filter(User.email.ilike(pattern, escape='\\'))
        else:
            q = q.filter(User.role == query.lower())

        return q.order_by(User.created_at.desc()).all()

    def get_user_role(self, user_id: int) -> str:
        user = self.get_user_by_id(user_id)
        return user.role if user.role in ROLES else 'employee'

    def get_audit_log(self, event_type: Optional[str] = None, user_id: Optional[int] = None,
                      limit: int = 100) -> List[AuditLog]:
        """Most recent audit entries, optionally narrowed by event type or actor"""
        query = AuditLog.query
        if event_type:
            query = query.filter_by(event_type=event_type)
        if user_id:
            query = query.filter_by(user_id=user_id)
        return query.order_by(AuditLog.created_at.desc(), AuditLog.id.desc()).limit(min(limit, 500)).all()


# Singleton instance
user_service = UserService()
