from flask import request, jsonify
from flask_login import login_required, current_user
from hrms.blueprints.documents import documents_bp
from hrms.schemas import EmployeeDocumentSchema, EmployeeDocumentUpdateSchema
from hrms.services.document_service import document_service
from hrms.utils.query_params import get_bool_arg
from hrms.utils.security_decorators import require_role


@documents_bp.before_request
@login_required
@require_role('admin')
def check_access():
    """Employee documents are admin only"""
    pass


def _document_payload(schema):
    """
    Validate the document payload from JSON or a multipart form

    Multipart fields are checked first with each attached filename standing
    in for its URL, so a bad request never reaches Cloudinary. The files are
    then uploaded and their URLs merged over any URL fields sent alongside.
    """
    if not request.files:
        return schema.model_validate(request.get_json(silent=True) or {})

    data = {key: value for key, value in request.form.items() if key != 'academic_certificates'}
    certificates = [url for url in request.form.getlist('academic_certificates') if url]

    staged = dict(data)
    staged.update({slot: storage.filename for slot, storage in request.files.items() if storage.filename})
    staged_certificates = certificates + [
        storage.filename for storage in request.files.getlist('academic_certificates') if storage.filename
    ]
    if staged_certificates:
        staged['academic_certificates'] = staged_certificates
    else:
        staged.pop('academic_certificates', None)
    checked = schema.model_validate(staged)
    if getattr(checked, 'employee_id', None):
        document_service.get_employee(checked.employee_id)

    uploaded = document_service.upload_files(request.files)
    certificates.extend(uploaded.pop('academic_certificates', []))
    data.update(uploaded)
    if certificates:
        data['academic_certificates'] = certificates
    return schema.model_validate(data)


@documents_bp.route('', methods=['POST'])
def create_document():
    payload = _document_payload(EmployeeDocumentSchema)
    document = document_service.create_employee_document(payload.model_dump(), uploaded_by=current_user.id)
    return jsonify({'success': True, 'document': document.to_dict(include_employee=True)}), 201


@documents_bp.route('', methods=['GET'])
def list_documents():
    documents = document_service.get_all_employee_documents(
        employee_id=request.args.get('employee_id', type=int),
        include_inactive=get_bool_arg('include_inactive')
    )
    return jsonify({'success': True, 'documents': documents})


@documents_bp.route('/all', methods=['GET'])
def all_documents():
    """Every bundle ever stored, deleted ones included"""
    return jsonify({'success': True, 'documents': document_service.get_all_documents()})


@documents_bp.route('/<int:document_id>', methods=['GET'])
def get_document(document_id):
    document = document_service.get_employee_document_by_id(document_id)
    return jsonify({'success': True, 'document': document.to_dict(include_employee=True)})


@documents_bp.route('/<int:document_id>', methods=['PATCH', 'PUT'])
def update_document(document_id):
    document_service.get_employee_document_by_id(document_id)
    payload = _document_payload(EmployeeDocumentUpdateSchema)
    document = document_service.update_employee_document(document_id, payload.model_dump(exclude_unset=True))
    return jsonify({'success': True, 'document': document.to_dict(include_employee=True)})


@documents_bp.route('/<int:document_id>', methods=['DELETE'])
def delete_document(document_id):
    document_service.delete_employee_document(document_id)
    return jsonify({'success': True})


@documents_bp.route('/employee/<int:employee_id>', methods=['GET'])
def employee_documents(employee_id):
    documents = document_service.get_employee_documents(employee_id)
    return jsonify({'success': True, 'documents': [d.to_dict() for d in documents]})


@documents_bp.route('/employee/<int:employee_id>/types', methods=['GET'])
def employee_document_types(employee_id):
    types = document_service.get_active_document_types_for_employee(employee_id)
    return jsonify({'success': True, 'document_types': types})


@documents_bp.route('/employee/<int:employee_id>/validate', methods=['GET'])
def validate_employee_documents(employee_id):
    return jsonify({'success': True, **document_service.validate_employee_documents(employee_id)})
