"""
Tests for ministries, sections and positions
"""
from hrms.models.section import Section
from hrms.models.position import Position


class TestMinistries:
    """Test suite for ministries"""

    def test_create_and_list(self, client, admin_user):
        """Test a ministry can be created and listed"""
        client.login(admin_user)

        response = client.post('/ministries', json={'ministry_name': 'Health'})
        assert response.status_code == 201

        ministries = client.get('/ministries').get_json()['ministries']
        assert [m['ministry_name'] for m in ministries] == ['Health']

    def test_delete_ministry_keeps_sections(self, client, admin_user, db_session):
        """Test deleting a ministry detaches its sections instead of removing them"""
        client.login(admin_user)
        ministry_id = client.post('/ministries', json={'ministry_name': 'Health'}).get_json()['ministry']['id']
        section_id = client.post('/sections', json={'section_name': 'Nursing', 'ministry_id': ministry_id}) \
            .get_json()['section']['id']

        assert client.get(f'/ministries/{ministry_id}').get_json()['ministry']['sections'][0]['id'] == section_id

        assert client.delete(f'/ministries/{ministry_id}').status_code == 200
        section = db_session.get(Section, section_id)
        assert section is not None
        assert section.ministry_id is None


class TestSections:
    """Test suite for sections"""

    def test_section_requires_existing_ministry(self, client, admin_user):
        """Test an unknown ministry id is rejected"""
        client.login(admin_user)

        response = client.post('/sections', json={'section_name': 'Audit', 'ministry_id': 42})

        assert response.status_code == 404

    def test_section_detail_lists_employees(self, client, admin_user, make_employee):
        """Test the section view includes its active employees and positions"""
        employee = make_employee()
        client.login(admin_user)

        data = client.get(f'/sections/{employee.section_id}').get_json()['section']

        assert [e['id'] for e in data['employees']] == [employee.id]
        assert len(data['positions']) == 1

    def test_cannot_delete_section_with_employees(self, client, admin_user, make_employee):
        """Test sections with active staff cannot be removed"""
        employee = make_employee()
        client.login(admin_user)

        response = client.delete(f'/sections/{employee.section_id}')

        assert response.status_code == 409
        assert 'Reassign them first' in response.get_json()['error']

    def test_soft_delete_empty_section(self, client, admin_user, make_section, db_session):
        """Test an empty section is deactivated and hidden from listings"""
        section = make_section('Archive')
        client.login(admin_user)

        assert client.delete(f'/sections/{section.id}').status_code == 200

        assert db_session.get(Section, section.id).is_active is False
        assert client.get('/sections').get_json()['sections'] == []
        assert len(client.get('/sections?include_inactive=true').get_json()['sections']) == 1
        assert client.get(f'/sections/{section.id}').status_code == 404

    def test_reactivate_section(self, client, admin_user, make_section, db_session):
        """Test an inactive section can be switched back on"""
        section = make_section('Archive')
        client.login(admin_user)
        client.delete(f'/sections/{section.id}')

        response = client.patch(f'/sections/{section.id}', json={'is_active': True})

        assert response.status_code == 200
        assert db_session.get(Section, section.id).is_active is True

    def test_refresh_employee_count(self, client, admin_user, make_employee, db_session):
        """Test the stored headcount follows active employees"""
        employee = make_employee()
        section = db_session.get(Section, employee.section_id)
        section.employee_count = 0
        db_session.commit()
        client.login(admin_user)

        response = client.post(f'/sections/{employee.section_id}/employee-count')

        assert response.get_json()['employee_count'] == 1


class TestPositions:
    """Test suite for positions"""

    def test_position_requires_section(self, client, admin_user):
        """Test a position must name a section"""
        client.login(admin_user)

        response = client.post('/positions', json={'position_title': 'Clerk'})

        assert response.status_code == 400
        assert response.get_json()['details'][0]['field'] == 'section_id'

    def test_position_with_unknown_section(self, client, admin_user):
        """Test the section must exist"""
        client.login(admin_user)

        response = client.post('/positions', json={'position_title': 'Clerk', 'section_id': 99})

        assert response.status_code == 404

    def test_filter_positions_by_section(self, client, admin_user, make_section, make_position):
        """Test positions can be filtered by section"""
        finance = make_section('Finance')
        legal = make_section('Legal')
        make_position('Accountant', finance)
        make_position('Counsel', legal)
        client.login(admin_user)

        positions = client.get(f'/positions?section_id={legal.id}').get_json()['positions']

        assert [p['position_title'] for p in positions] == ['Counsel']

    def test_move_position_to_section(self, client, admin_user, make_section, make_position, db_session):
        """Test a position can be reassigned to another section"""
        position = make_position('Clerk')
        target = make_section('Registry')
        client.login(admin_user)

        response = client.put(f'/positions/{position.id}/section', json={'section_id': target.id})

        assert response.status_code == 200
        assert db_session.get(Position, position.id).section_id == target.id

        detail = client.get(f'/positions/{position.id}').get_json()['position']
        assert detail['section']['section_name'] == 'Registry'

    def test_move_position_needs_section_id(self, client, admin_user, make_position):
        """Test the section id is required when moving a position"""
        position = make_position('Clerk')
        client.login(admin_user)

        response = client.put(f'/positions/{position.id}/section', json={})

        assert response.status_code == 400
