"""
Tests for account administration
"""
from hrms.models.user import User
from conftest import PASSWORD


NEW_USER = {
    'first_name': 'Olive',
    'last_name': 'Otieno',
    'phone_number': '555-0142',
    'email': 'olive@example.com',
    'password': 'Welcome123',
    'role': 'manager',
}


class TestUserAdministration:
    """Test suite for the admin-only users API"""

    def test_admin_creates_verified_user(self, client, admin_user, db_session):
        """Test accounts created by an admin can sign in straight away"""
        client.login(admin_user)

        response = client.post('/users', json=NEW_USER)

        assert response.status_code == 201
        data = response.get_json()['user']
        assert data['role'] == 'manager'
        assert data['email_verified'] is True

    def test_list_and_search_users(self, client, admin_user, make_user):
        """Test listing and searching by name"""
        make_user(first_name='Brenda', last_name='Kamau')
        client.login(admin_user)

        all_users = client.get('/users').get_json()['users']
        assert len(all_users) == 2

        found = client.get('/users?q=bren').get_json()['users']
        assert [u['first_name'] for u in found] == ['Brenda']

    def test_search_by_role(self, client, admin_user, make_user):
        """Test searching by role matches the role exactly"""
        make_user(role='manager')
        client.login(admin_user)

        found = client.get('/users?q=manager&field=role').get_json()['users']
        assert len(found) == 1
        assert found[0]['role'] == 'manager'

    def test_invalid_search_field(self, client, admin_user):
        """Test unknown search fields are rejected"""
        client.login(admin_user)

        response = client.get('/users?q=x&field=salary')

        assert response.status_code == 400

    def test_get_by_email_and_role(self, client, admin_user, make_user):
        """Test lookup by email and role endpoint"""
        user = make_user(role='manager', email='lookup@example.com')
        client.login(admin_user)

        response = client.get('/users/by-email?email=LOOKUP@example.com')
        assert response.get_json()['user']['id'] == user.id

        assert client.get(f'/users/{user.id}/role').get_json()['role'] == 'manager'
        assert client.get('/users/by-email?email=none@example.com').status_code == 404

    def test_update_user_rehashes_password(self, client, admin_user, make_user, db_session):
        """Test a password in an update is hashed"""
        user = make_user()
        client.login(admin_user)

        response = client.patch(f'/users/{user.id}', json={'role': 'manager', 'password': 'Changed123'})

        assert response.status_code == 200
        refreshed = db_session.get(User, user.id)
        assert refreshed.role == 'manager'
        assert refreshed.check_password('Changed123')

    def test_weak_password_update_changes_nothing(self, client, admin_user, make_user, db_session):
        """Test a rejected password leaves the other fields untouched"""
        user = make_user()
        client.login(admin_user)

        response = client.patch(f'/users/{user.id}', json={'role': 'manager', 'password': 'alllowercase'})

        assert response.status_code == 400
        db_session.expire_all()
        refreshed = db_session.get(User, user.id)
        assert refreshed.role == 'employee'
        assert refreshed.check_password(PASSWORD)

    def test_delete_user(self, client, admin_user, make_user, db_session):
        """Test an admin can remove another account"""
        user = make_user()
        client.login(admin_user)

        response = client.delete(f'/users/{user.id}')

        assert response.status_code == 200
        assert db_session.get(User, user.id) is None

    def test_admin_cannot_delete_self(self, client, admin_user):
        """Test admins cannot remove their own account"""
        client.login(admin_user)

        response = client.delete(f'/users/{admin_user.id}')

        assert response.status_code == 403

    def test_missing_user_returns_404(self, client, admin_user):
        """Test unknown ids give 404"""
        client.login(admin_user)

        assert client.get('/users/9999').status_code == 404

    def test_manager_cannot_administer_users(self, client, manager_user):
        """Test account administration is admin only"""
        client.login(manager_user)

        assert client.post('/users', json=NEW_USER).status_code == 403

    def test_audit_log(self, client, admin_user, manager_user):
        """Test admins can read recent audit entries filtered by type and actor"""
        client.post('/auth/login', json={'email': 'manager@example.com', 'password': 'WrongPass123'})
        client.login(admin_user)

        entries = client.get(f'/users/audit-log?event_type=login_attempt&user_id={manager_user.id}') \
            .get_json()['entries']

        assert len(entries) == 1
        assert entries[0]['event_status'] == 'failure'
        assert entries[0]['details'] == {'email': 'manager@example.com'}
        assert client.get('/users/audit-log?event_type=employee_terminated').get_json()['entries'] == []
