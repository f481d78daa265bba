"""
Document Service
Employee document bundles backed by Cloudinary uploads
"""
from datetime import datetime
from typing import List, Optional, Dict
from flask import current_app
from hrms import db
from hrms.models.employee import Employee
from hrms.models.employee_document import EmployeeDocument
from hrms.models.audit_log import AuditLog
from hrms.services import cloudinary_service
from hrms.services.errors import NotFoundError, ServiceError


SINGLE_FILE_SLOTS = ('national_id_document', 'passport_photo', 'police_clearance',
                     'medical_certificate', 'driver_license')
REQUIRED_DOCUMENTS = {
    'passport_photo': 'Passport Photo',
    'academic_certificates': 'Academic Certificates',
}


class DocumentService:
    """Service for employee document bundles"""

    def upload_files(self, files) -> Dict:
        """
        Upload multipart files to Cloudinary

        Args:
            files: werkzeug MultiDict of uploads keyed by slot name

        Returns:
            Dict of slot -> secure URL (academic_certificates -> list of URLs)
        """
        urls = {}
        max_size = current_app.config.get('MAX_FILE_SIZE')

        for slot in SINGLE_FILE_SLOTS + ('academic_certificates',):
            for storage in files.getlist(slot):
                if not storage or not storage.filename:
                    continue
                if not cloudinary_service.is_allowed_document(storage.filename):
                    raise ServiceError(f'File type not allowed for {storage.filename}')
                if max_size and storage.content_length and storage.content_length > max_size:
                    raise ServiceError(f'{storage.filename} is too large')

                try:
                    result = cloudinary_service.upload_file(storage)
                except Exception as e:
                    raise ServiceError(f'Failed to upload {storage.filename}', status_code=502) from e

                if slot == 'academic_certificates':
                    urls.setdefault(slot, []).append(result['secure_url'])
                else:
                    urls[slot] = result['secure_url']
        return urls

    def get_employee(self, employee_id: int) -> Employee:
        employee = db.session.get(Employee, employee_id)
        if not employee or not employee.is_active:
            raise NotFoundError('Employee not found')
        return employee

    def create_employee_document(self, data: dict, uploaded_by: Optional[int] = None) -> EmployeeDocument:
        """
        Store the document bundle for an employee

        An existing active bundle is updated in place, so each employee has
        at most one active bundle.
        """
        employee = self.get_employee(data['employee_id'])

        document = EmployeeDocument.query.filter_by(employee_id=employee.id, is_active=True).first()
        created = document is None
        if created:
            document = EmployeeDocument(employee_id=employee.id)
            db.session.add(document)

        document.national_id = data['national_id']
        document.passport_photo = data['passport_photo']
        document.academic_certificates = list(data['academic_certificates'])
        for slot in ('national_id_document', 'police_clearance', 'medical_certificate', 'driver_license'):
            if data.get(slot):
                setattr(document, slot, data[slot])

        AuditLog.log_event('documents_uploaded' if created else 'documents_replaced', user_id=uploaded_by,
                           resource_type='employee', resource_id=employee.id)
        db.session.commit()
        current_app.logger.info(f"Document bundle {'created' if created else 'updated'} for employee {employee.id}")
        return document

    def get_employee_document_by_id(self, document_id: int) -> EmployeeDocument:
        document = db.session.get(EmployeeDocument, document_id)
        if not document or not document.is_active:
            raise NotFoundError('Document not found')
        return document

    def get_employee_documents(self, employee_id: int) -> List[EmployeeDocument]:
        return EmployeeDocument.query.filter_by(employee_id=employee_id, is_active=True) \
            .order_by(EmployeeDocument.uploaded_at.desc()).all()

    def update_employee_document(self, document_id: int, data: dict) -> EmployeeDocument:
        document = self.get_employee_document_by_id(document_id)
        for field in ('national_id',) + SINGLE_FILE_SLOTS:
            if data.get(field) is not None:
                setattr(document, field, data[field])
        if data.get('academic_certificates'):
            document.academic_certificates = list(data['academic_certificates'])

        db.session.commit()
        return document

    def delete_employee_document(self, document_id: int) -> EmployeeDocument:
        document = self.get_employee_document_by_id(document_id)
        document.is_active = False
        document.deleted_at = datetime.utcnow()
        db.session.commit()
        return document

    def get_all_employee_documents(self, employee_id: Optional[int] = None,
                                   include_inactive: bool = False) -> List[Dict]:
        query = EmployeeDocument.query
        if employee_id:
            query = query.filter_by(employee_id=employee_id)
        if not include_inactive:
            query = query.filter_by(is_active=True)
        documents = query.order_by(EmployeeDocument.uploaded_at.desc()).all()
        return [d.to_dict(include_employee=True) for d in documents]

    def get_all_documents(self) -> List[Dict]:
        return self.get_all_employee_documents(include_inactive=True)

    def get_active_document_types_for_employee(self, employee_id: int) -> List[str]:
        types = []
        for document in self.get_employee_documents(employee_id):
            for label in document.active_document_types():
                if label not in types:
                    types.append(label)
        return types

    def validate_employee_documents(self, employee_id: int) -> Dict:
        """
        Check the active bundle holds the required documents

        Returns:
            {is_valid, missing, message}
        """
        document = EmployeeDocument.query.filter_by(employee_id=employee_id, is_active=True).first()
        if not document:
            missing = list(REQUIRED_DOCUMENTS.values())
        else:
            missing = [label for slot, label in REQUIRED_DOCUMENTS.items() if not getattr(document, slot)]

        if missing:
            return {
                'is_valid': False,
                'missing': missing,
                'message': f"Missing required documents: {', '.join(missing)}",
            }
        return {'is_valid': True, 'missing': [], 'message': 'All required documents are present'}


# Singleton instance
document_service = DocumentService()
