"""
Tests for employee document bundles
"""
from io import BytesIO
import pytest
from hrms.services import cloudinary_service
from hrms.models.audit_log import AuditLog


@pytest.fixture
def fake_upload(monkeypatch):
    """Replace the Cloudinary upload with a recorder"""
    uploaded = []

    def upload(storage, folder=None):
        uploaded.append(storage.filename)
        return {'secure_url': f'https://res.cloudinary.com/demo/{storage.filename}'}

    monkeypatch.setattr(cloudinary_service, 'upload_file', upload)
    return uploaded


def bundle(employee_id, **overrides):
    data = {
        'employee_id': employee_id,
        'national_id': '12345678',
        'passport_photo': 'https://files.example.com/photo.jpg',
        'academic_certificates': ['https://files.example.com/degree.pdf'],
    }
    data.update(overrides)
    return data


class TestDocumentBundles:
    """Test suite for JSON document bundles"""

    def test_create_from_urls(self, client, admin_user, make_employee):
        """Test a bundle can be stored from URLs"""
        employee = make_employee()
        client.login(admin_user)

        response = client.post('/employee-documents', json=bundle(employee.id))

        assert response.status_code == 201
        document = response.get_json()['document']
        assert document['employee_name'] == 'Jane Doe'
        assert document['academic_certificates'] == ['https://files.example.com/degree.pdf']

        event = AuditLog.query.filter_by(event_type='documents_uploaded').one()
        assert event.user_id == admin_user.id

    def test_certificate_required(self, client, admin_user, make_employee):
        """Test at least one academic certificate is required"""
        employee = make_employee()
        client.login(admin_user)

        response = client.post('/employee-documents', json=bundle(employee.id, academic_certificates=[]))

        assert response.status_code == 400

    def test_passport_photo_required(self, client, admin_user, make_employee):
        """Test the passport photo is required"""
        employee = make_employee()
        client.login(admin_user)
        data = bundle(employee.id)
        del data['passport_photo']

        response = client.post('/employee-documents', json=data)

        assert response.status_code == 400

    def test_second_bundle_updates_first(self, client, admin_user, make_employee):
        """Test each employee keeps a single active bundle"""
        employee = make_employee()
        client.login(admin_user)

        first = client.post('/employee-documents', json=bundle(employee.id)).get_json()['document']
        second = client.post('/employee-documents', json=bundle(
            employee.id, national_id='87654321', driver_license='https://files.example.com/dl.pdf'
        )).get_json()['document']

        assert second['id'] == first['id']
        assert second['national_id'] == '87654321'
        assert len(client.get(f'/employee-documents/employee/{employee.id}').get_json()['documents']) == 1

    def test_unknown_employee(self, client, admin_user):
        """Test the employee must exist"""
        client.login(admin_user)

        assert client.post('/employee-documents', json=bundle(999)).status_code == 404

    def test_update_and_delete(self, client, admin_user, make_employee):
        """Test a bundle can be edited and soft deleted"""
        employee = make_employee()
        client.login(admin_user)
        document_id = client.post('/employee-documents', json=bundle(employee.id)).get_json()['document']['id']

        response = client.patch(f'/employee-documents/{document_id}', json={
            'police_clearance': 'https://files.example.com/police.pdf',
        })
        assert response.get_json()['document']['police_clearance'] == 'https://files.example.com/police.pdf'

        assert client.delete(f'/employee-documents/{document_id}').status_code == 200
        assert client.get(f'/employee-documents/{document_id}').status_code == 404
        assert client.get('/employee-documents').get_json()['documents'] == []
        assert len(client.get('/employee-documents/all').get_json()['documents']) == 1

    def test_document_types_and_validation(self, client, admin_user, make_employee):
        """Test the types present and the required-documents check"""
        employee = make_employee()
        client.login(admin_user)

        missing = client.get(f'/employee-documents/employee/{employee.id}/validate').get_json()
        assert missing['is_valid'] is False
        assert missing['missing'] == ['Passport Photo', 'Academic Certificates']

        client.post('/employee-documents', json=bundle(employee.id))

        valid = client.get(f'/employee-documents/employee/{employee.id}/validate').get_json()
        assert valid['is_valid'] is True

        types = client.get(f'/employee-documents/employee/{employee.id}/types').get_json()['document_types']
        assert 'Passport Photo' in types
        assert 'Academic Certificates' in types
        assert 'Driver License' not in types

    def test_documents_are_admin_only(self, client, employee_user):
        """Test employees cannot read document bundles"""
        user, employee = employee_user
        client.login(user)

        assert client.get(f'/employee-documents/employee/{employee.id}').status_code == 403


class TestDocumentUploads:
    """Test suite for multipart uploads"""

    def test_multipart_upload(self, client, admin_user, make_employee, fake_upload):
        """Test uploaded files are stored as their Cloudinary URLs"""
        employee = make_employee()
        client.login(admin_user)

        response = client.post('/employee-documents', data={
            'employee_id': str(employee.id),
            'national_id': '12345678',
            'passport_photo': (BytesIO(b'jpeg-bytes'), 'photo.jpg'),
            'academic_certificates': [
                (BytesIO(b'pdf-one'), 'degree.pdf'),
                (BytesIO(b'pdf-two'), 'diploma.pdf'),
            ],
        }, content_type='multipart/form-data')

        assert response.status_code == 201
        document = response.get_json()['document']
        assert document['passport_photo'] == 'https://res.cloudinary.com/demo/photo.jpg'
        assert document['academic_certificates'] == [
            'https://res.cloudinary.com/demo/degree.pdf',
            'https://res.cloudinary.com/demo/diploma.pdf',
        ]
        assert sorted(fake_upload) == ['degree.pdf', 'diploma.pdf', 'photo.jpg']

    def test_upload_merges_with_urls(self, client, admin_user, make_employee, fake_upload):
        """Test certificate URLs sent as fields are kept next to uploaded ones"""
        employee = make_employee()
        client.login(admin_user)

        response = client.post('/employee-documents', data={
            'employee_id': str(employee.id),
            'national_id': '12345678',
            'passport_photo': 'https://files.example.com/photo.jpg',
            'academic_certificates': 'https://files.example.com/old.pdf',
            'medical_certificate': (BytesIO(b'pdf'), 'medical.pdf'),
        }, content_type='multipart/form-data')

        assert response.status_code == 201
        document = response.get_json()['document']
        assert document['academic_certificates'] == ['https://files.example.com/old.pdf']
        assert document['medical_certificate'] == 'https://res.cloudinary.com/demo/medical.pdf'

    def test_disallowed_extension(self, client, admin_user, make_employee, fake_upload):
        """Test executables are refused before upload"""
        employee = make_employee()
        client.login(admin_user)

        response = client.post('/employee-documents', data={
            'employee_id': str(employee.id),
            'national_id': '12345678',
            'passport_photo': (BytesIO(b'MZ'), 'photo.exe'),
            'academic_certificates': 'https://files.example.com/degree.pdf',
        }, content_type='multipart/form-data')

        assert response.status_code == 400
        assert 'File type not allowed' in response.get_json()['error']
        assert fake_upload == []

    def test_unknown_employee_uploads_nothing(self, client, admin_user, fake_upload):
        """Test files for a missing employee never reach Cloudinary"""
        client.login(admin_user)

        response = client.post('/employee-documents', data={
            'employee_id': '999',
            'national_id': '12345678',
            'passport_photo': (BytesIO(b'jpeg-bytes'), 'photo.jpg'),
            'academic_certificates': (BytesIO(b'pdf'), 'degree.pdf'),
        }, content_type='multipart/form-data')

        assert response.status_code == 404
        assert fake_upload == []

    def test_invalid_form_uploads_nothing(self, client, admin_user, make_employee, fake_upload):
        """Test a form missing its national ID is refused before upload"""
        employee = make_employee()
        client.login(admin_user)

        response = client.post('/employee-documents', data={
            'employee_id': str(employee.id),
            'passport_photo': (BytesIO(b'jpeg-bytes'), 'photo.jpg'),
            'academic_certificates': (BytesIO(b'pdf'), 'degree.pdf'),
        }, content_type='multipart/form-data')

        assert response.status_code == 400
        assert fake_upload == []

    def test_upload_failure(self, client, admin_user, make_employee, monkeypatch):
        """Test a storage failure is reported as a bad gateway"""
        def broken_upload(storage, folder=None):
            raise RuntimeError('Cloudinary unavailable')

        monkeypatch.setattr(cloudinary_service, 'upload_file', broken_upload)
        employee = make_employee()
        client.login(admin_user)

        response = client.post('/employee-documents', data={
            'employee_id': str(employee.id),
            'national_id': '12345678',
            'passport_photo': (BytesIO(b'jpeg'), 'photo.jpg'),
            'academic_certificates': 'https://files.example.com/degree.pdf',
        }, content_type='multipart/form-data')

        assert response.status_code == 502
        assert response.get_json()['error'] == 'Failed to upload photo.jpg'
