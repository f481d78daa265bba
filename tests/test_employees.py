"""
Tests for employee records, details, activities and profiles
"""
from hrms.models.employee import Employee
from hrms.models.audit_log import AuditLog
from hrms.models.section import Section
from hrms.services.employee_service import employee_service


def employee_payload(position, **overrides):
    payload = {
        'first_name': 'Grace',
        'last_name': 'Wanjiru',
        'gender': 'female',
        'email': 'grace@example.com',
        'phone': '555-0111',
        'section_id': position.section_id,
        'position_id': position.id,
        'hire_date': '2021-03-01',
        'date_of_birth': '1992-08-14',
        'salary': 64000,
        'physical_address': '12 Garden Lane',
        'nationality': 'Kenyan',
    }
    payload.update(overrides)
    return payload


class TestEmployeeRecords:
    """Test suite for employee CRUD"""

    def test_create_generates_employment_number(self, client, admin_user, make_position):
        """Test a missing employment number is generated in sequence"""
        position = make_position()
        client.login(admin_user)

        first = client.post('/employees', json=employee_payload(position))
        second = client.post('/employees', json=employee_payload(position, email='two@example.com'))

        assert first.status_code == 201
        assert first.get_json()['employee']['employment_number'] == 'EMP-001'
        assert second.get_json()['employee']['employment_number'] == 'EMP-002'

    def test_create_updates_section_headcount(self, client, admin_user, make_position, db_session):
        """Test the section's stored headcount includes the new employee"""
        position = make_position()
        client.login(admin_user)

        client.post('/employees', json=employee_payload(position))

        assert db_session.get(Section, position.section_id).employee_count == 1

    def test_duplicate_employment_number(self, client, admin_user, make_employee):
        """Test employment numbers are unique"""
        existing = make_employee()
        client.login(admin_user)

        response = client.post('/employees', json=employee_payload(
            existing.position, employment_number=existing.employment_number))

        assert response.status_code == 409

    def test_missing_required_fields(self, client, admin_user):
        """Test required fields are reported"""
        client.login(admin_user)

        response = client.post('/employees', json={'first_name': 'Grace'})

        assert response.status_code == 400
        fields = {d['field'] for d in response.get_json()['details']}
        assert {'last_name', 'gender', 'email', 'section_id', 'position_id', 'hire_date'} <= fields

    def test_invalid_gender(self, client, admin_user, make_position):
        """Test gender must be one of the allowed values"""
        client.login(admin_user)

        response = client.post('/employees', json=employee_payload(make_position(), gender='unknown'))

        assert response.status_code == 400

    def test_date_of_birth_in_future(self, client, admin_user, make_position):
        """Test the date of birth must be in the past"""
        client.login(admin_user)

        response = client.post('/employees', json=employee_payload(make_position(), date_of_birth='2999-01-01'))

        assert response.status_code == 400

    def test_search_employees(self, client, admin_user, make_employee):
        """Test free-text search over names"""
        make_employee(first_name='Peter', last_name='Mwangi')
        make_employee(first_name='Lucy', last_name='Achieng')
        client.login(admin_user)

        found = client.get('/employees?q=achi').get_json()['employees']

        assert [e['first_name'] for e in found] == ['Lucy']

    def test_search_treats_wildcards_literally(self, client, admin_user, make_employee):
        """Test LIKE wildcards in the query do not match everything"""
        make_employee()
        client.login(admin_user)

        assert client.get('/employees?q=%25').get_json()['employees'] == []

    def test_update_employee(self, client, admin_user, make_employee, db_session):
        """Test a partial update leaves other fields alone"""
        employee = make_employee()
        client.login(admin_user)

        response = client.patch(f'/employees/{employee.id}', json={'phone': '555-0999'})

        assert response.status_code == 200
        refreshed = db_session.get(Employee, employee.id)
        assert refreshed.phone == '555-0999'
        assert refreshed.first_name == 'Jane'

    def test_cannot_manage_self(self, client, admin_user, make_employee):
        """Test an employee cannot be their own manager"""
        employee = make_employee()
        client.login(admin_user)

        response = client.patch(f'/employees/{employee.id}', json={'manager_id': employee.id})

        assert response.status_code == 400

    def test_soft_delete(self, client, admin_user, make_employee, db_session):
        """Test deleting hides the record but keeps it"""
        employee = make_employee()
        client.login(admin_user)

        assert client.delete(f'/employees/{employee.id}').status_code == 200

        assert db_session.get(Employee, employee.id).is_active is False
        assert client.get(f'/employees/{employee.id}').status_code == 404
        assert client.get(f'/employees/{employee.id}?include_inactive=true').status_code == 200
        assert client.get('/employees').get_json()['employees'] == []

    def test_by_section(self, client, admin_user, make_employee):
        """Test listing the employees of one section"""
        employee = make_employee()
        make_employee()
        client.login(admin_user)

        found = client.get(f'/employees/by-section/{employee.section_id}').get_json()['employees']

        assert [e['id'] for e in found] == [employee.id]


class TestTermination:
    """Test suite for terminations"""

    def test_terminate(self, client, admin_user, make_employee):
        """Test termination records the date and reason and is audited"""
        employee = make_employee()
        client.login(admin_user)

        response = client.post(f'/employees/{employee.id}/terminate', json={
            'termination_date': '2024-06-30',
            'termination_reason': 'Contract ended',
        })

        assert response.status_code == 200
        data = response.get_json()['employee']
        assert data['status'] == 'terminated'
        assert data['termination_date'] == '2024-06-30'

        event = AuditLog.query.filter_by(event_type='employee_terminated').first()
        assert event.resource_id == employee.id
        assert event.user_id == admin_user.id

    def test_termination_before_hire_date(self, client, admin_user, make_employee):
        """Test termination cannot precede the hire date"""
        employee = make_employee()
        client.login(admin_user)

        response = client.post(f'/employees/{employee.id}/terminate', json={
            'termination_date': '2019-01-01',
            'termination_reason': 'Error',
        })

        assert response.status_code == 400
        assert 'before hire date' in response.get_json()['error']

    def test_terminate_twice(self, client, admin_user, make_employee):
        """Test an already terminated employee cannot be terminated again"""
        employee = make_employee()
        client.login(admin_user)
        body = {'termination_date': '2024-06-30', 'termination_reason': 'Contract ended'}

        client.post(f'/employees/{employee.id}/terminate', json=body)
        response = client.post(f'/employees/{employee.id}/terminate', json=body)

        assert response.status_code == 400


class TestUserLinking:
    """Test suite for linking accounts to employees"""

    def test_link_user(self, client, admin_user, make_user, make_employee):
        """Test an account can be linked and looked up"""
        user = make_user()
        employee = make_employee()
        client.login(admin_user)

        response = client.post(f'/employees/{employee.id}/link-user', json={'user_id': user.id})
        assert response.status_code == 200

        found = client.get(f'/employees/by-user/{user.id}').get_json()['employee']
        assert found['id'] == employee.id

    def test_user_linked_twice(self, client, admin_user, make_user, make_employee):
        """Test one account cannot back two employees"""
        user = make_user()
        make_employee(user=user)
        other = make_employee()
        client.login(admin_user)

        response = client.post(f'/employees/{other.id}/link-user', json={'user_id': user.id})

        assert response.status_code == 409


class TestEmployeeDetails:
    """Test suite for extended details"""

    def test_create_and_merge_details(self, client, admin_user, make_employee):
        """Test section updates merge into stored values"""
        employee = make_employee()
        client.login(admin_user)

        response = client.post(f'/employees/{employee.id}/details', json={
            'address': {'country': 'Kenya', 'city_state': 'Nairobi'},
        })
        assert response.status_code == 201

        response = client.patch(f'/employees/{employee.id}/details/address', json={'postal_code': '00100'})
        assert response.status_code == 200
        address = response.get_json()['details']['address']
        assert address == {'country': 'Kenya', 'city_state': 'Nairobi', 'postal_code': '00100'}

    def test_details_created_once(self, client, admin_user, make_employee):
        """Test a second create conflicts"""
        employee = make_employee()
        client.login(admin_user)

        client.post(f'/employees/{employee.id}/details', json={})
        response = client.post(f'/employees/{employee.id}/details', json={})

        assert response.status_code == 409

    def test_update_several_sections(self, client, admin_user, make_employee):
        """Test a full update touches only the sections sent"""
        employee = make_employee()
        client.login(admin_user)
        client.post(f'/employees/{employee.id}/details', json={'address': {'country': 'Kenya'}})

        response = client.put(f'/employees/{employee.id}/details', json={
            'banking_info': {'bank_name': 'Equity', 'account_type': 'savings'},
        })

        details = response.get_json()['details']
        assert details['address'] == {'country': 'Kenya'}
        assert details['banking_info'] == {'bank_name': 'Equity', 'account_type': 'savings'}

    def test_unknown_section(self, client, admin_user, make_employee):
        """Test an unknown details section is 404"""
        employee = make_employee()
        client.login(admin_user)
        client.post(f'/employees/{employee.id}/details', json={})

        response = client.patch(f'/employees/{employee.id}/details/hobbies', json={})

        assert response.status_code == 404

    def test_invalid_account_type(self, client, admin_user, make_employee):
        """Test banking account type is restricted"""
        employee = make_employee()
        client.login(admin_user)

        response = client.post(f'/employees/{employee.id}/details', json={
            'banking_info': {'account_type': 'crypto'},
        })

        assert response.status_code == 400

    def test_delete_details(self, client, admin_user, make_employee):
        """Test details can be removed"""
        employee = make_employee()
        client.login(admin_user)
        client.post(f'/employees/{employee.id}/details', json={})

        assert client.delete(f'/employees/{employee.id}/details').status_code == 200
        assert client.get(f'/employees/{employee.id}/details').status_code == 404


class TestActivitiesAndProfile:
    """Test suite for the activity timeline and profile view"""

    def test_add_and_remove_activity(self, client, admin_user, make_employee):
        """Test timeline entries can be added and hidden"""
        employee = make_employee()
        client.login(admin_user)

        response = client.post(f'/employees/{employee.id}/activities', json={
            'type': 'leave', 'description': 'Annual leave planned',
        })
        assert response.status_code == 201
        activity_id = response.get_json()['activity']['id']

        assert len(client.get(f'/employees/{employee.id}/activities').get_json()['activities']) == 1
        assert client.delete(f'/employees/activities/{activity_id}').status_code == 200
        assert client.get(f'/employees/{employee.id}/activities').get_json()['activities'] == []

    def test_invalid_activity_type(self, client, admin_user, make_employee):
        """Test only leave and concurrency activities are accepted"""
        employee = make_employee()
        client.login(admin_user)

        response = client.post(f'/employees/{employee.id}/activities', json={
            'type': 'party', 'description': 'Office party',
        })

        assert response.status_code == 400

    def test_complete_profile(self, client, admin_user, make_employee):
        """Test the profile bundles record, details and leave summary"""
        employee = make_employee()
        client.login(admin_user)
        client.post(f'/employees/{employee.id}/details', json={'address': {'country': 'Kenya'}})

        profile = client.get(f'/employees/{employee.id}/profile').get_json()['profile']

        assert profile['employee']['id'] == employee.id
        assert profile['details']['address'] == {'country': 'Kenya'}
        assert profile['documents'] == []
        assert profile['leave_summary']['pending'] == 0
        assert profile['is_on_leave'] is False

    def test_my_record(self, client, employee_user):
        """Test an employee can read their own record"""
        user, employee = employee_user
        client.login(user)

        assert client.get('/employees/me').get_json()['employee']['id'] == employee.id
        assert client.get('/employees/me/profile').status_code == 200

    def test_my_record_without_employee(self, client, make_user):
        """Test users without a linked record get 404"""
        client.login(make_user())

        assert client.get('/employees/me').status_code == 404

    def test_employee_cannot_list_employees(self, client, employee_user):
        """Test the employee list is admin only"""
        user, _ = employee_user
        client.login(user)

        assert client.get('/employees').status_code == 403


class TestDetailSectionHelpers:
    """Test suite for the service-level details helpers"""

    def test_section_helpers(self, client, admin_user, make_employee):
        """Test the per-section helpers merge into their own section"""
        employee = make_employee()
        client.login(admin_user)
        client.post(f'/employees/{employee.id}/details', json={})

        employee_service.update_emergency_contact(employee.id, {'name': 'John Doe', 'phone': '555-0142'})
        details = employee_service.update_additional_info(employee.id, {'marital_status': 'married'})

        assert details.emergency_contact == {'name': 'John Doe', 'phone': '555-0142'}
        assert details.additional_info == {'marital_status': 'married'}
        assert details.address in (None, {})
