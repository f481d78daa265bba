"""
Tests for authentication and authorization
"""
from hrms.models.user import User
from hrms.models.audit_log import AuditLog
from conftest import PASSWORD


SIGNUP = {
    'first_name': 'New',
    'last_name': 'User',
    'phone_number': '555-0199',
    'email': 'newuser@example.com',
    'password': 'SecurePass123',
}


class TestSignup:
    """Test suite for account registration"""

    def test_signup_creates_unverified_user(self, client, db_session):
        """Test sign-up stores an unverified account with a verification token"""
        response = client.post('/auth/signup', json=SIGNUP)

        assert response.status_code == 201
        assert response.get_json()['success'] is True

        user = User.query.filter_by(email='newuser@example.com').first()
        assert user is not None
        assert user.role == 'employee'
        assert user.email_verified is False
        assert user.verification_token
        assert user.check_password('SecurePass123')

    def test_signup_email_is_normalised(self, client, db_session):
        """Test the stored email is lower-cased"""
        response = client.post('/auth/signup', json={**SIGNUP, 'email': 'Mixed.Case@Example.com'})

        assert response.status_code == 201
        assert User.query.filter_by(email='mixed.case@example.com').first() is not None

    def test_duplicate_email_rejected(self, client, db_session):
        """Test the same email cannot register twice"""
        client.post('/auth/signup', json=SIGNUP)
        response = client.post('/auth/signup', json=SIGNUP)

        assert response.status_code == 409
        assert response.get_json()['success'] is False

    def test_weak_password_rejected(self, client, db_session):
        """Test that passwords without a digit or uppercase letter are rejected"""
        response = client.post('/auth/signup', json={**SIGNUP, 'password': 'alllowercase'})

        assert response.status_code == 400
        assert 'Password must contain' in response.get_json()['error']
        assert User.query.count() == 0

    def test_missing_fields_reported(self, client, db_session):
        """Test validation errors name the missing fields"""
        response = client.post('/auth/signup', json={'email': 'x@example.com'})

        assert response.status_code == 400
        data = response.get_json()
        assert data['error'] == 'Validation error'
        fields = {d['field'] for d in data['details']}
        assert {'first_name', 'last_name', 'phone_number', 'password'} <= fields

    def test_name_with_digits_rejected(self, client, db_session):
        """Test names must start with a letter and hold no digits"""
        response = client.post('/auth/signup', json={**SIGNUP, 'first_name': '2Pac'})

        assert response.status_code == 400


class TestLogin:
    """Test suite for credential checks and lockout"""

    def test_user_login(self, client, make_user):
        """Test user can login with correct credentials"""
        make_user(email='test@example.com')

        response = client.post('/auth/login', json={'email': 'test@example.com', 'password': PASSWORD})

        assert response.status_code == 200
        assert response.get_json()['user']['email'] == 'test@example.com'

        me = client.get('/auth/me')
        assert me.status_code == 200
        assert me.get_json()['user']['employee_id'] is None

    def test_user_login_wrong_password(self, client, make_user):
        """Test login fails with wrong password"""
        make_user(email='test@example.com')

        response = client.post('/auth/login', json={'email': 'test@example.com', 'password': 'WrongPass123'})

        assert response.status_code == 401
        assert response.get_json()['error'] == 'Invalid email or password'

    def test_unknown_email_gets_same_error(self, client, db_session):
        """Test an unknown email is indistinguishable from a wrong password"""
        response = client.post('/auth/login', json={'email': 'ghost@example.com', 'password': 'WrongPass123'})

        assert response.status_code == 401
        assert response.get_json()['error'] == 'Invalid email or password'

    def test_unverified_account_cannot_login(self, client, make_user):
        """Test accounts must confirm their email first"""
        make_user(email='pending@example.com', verified=False)

        response = client.post('/auth/login', json={'email': 'pending@example.com', 'password': PASSWORD})

        assert response.status_code == 403
        assert 'verify your email' in response.get_json()['error']

    def test_deactivated_account_cannot_login(self, client, make_user, db_session):
        """Test inactive accounts are refused"""
        user = make_user(email='gone@example.com')
        user.is_active = False
        db_session.commit()

        response = client.post('/auth/login', json={'email': 'gone@example.com', 'password': PASSWORD})

        assert response.status_code == 403
        assert 'deactivated' in response.get_json()['error']

    def test_account_lockout_after_failed_attempts(self, client, make_user, db_session):
        """Test account locks after multiple failed login attempts"""
        user = make_user(email='test@example.com')

        statuses = []
        for _ in range(5):
            response = client.post('/auth/login', json={'email': 'test@example.com', 'password': 'WrongPass123'})
            statuses.append(response.status_code)

        assert statuses == [401, 401, 401, 401, 403]
        assert db_session.get(User, user.id).is_account_locked()

        # Even the right password is refused while locked
        response = client.post('/auth/login', json={'email': 'test@example.com', 'password': PASSWORD})
        assert response.status_code == 403
        assert 'temporarily locked' in response.get_json()['error']

    def test_only_wrong_passwords_count_toward_lockout(self, client, make_user, db_session):
        """Test refusals for an unverified account do not lock it"""
        user = make_user(email='pending@example.com', verified=False)

        for _ in range(4):
            response = client.post('/auth/login', json={'email': 'pending@example.com', 'password': PASSWORD})
            assert response.status_code == 403

        response = client.post('/auth/login', json={'email': 'pending@example.com', 'password': 'WrongPass123'})

        assert response.status_code == 401
        assert not db_session.get(User, user.id).is_account_locked()

    def test_login_attempts_are_audited(self, client, make_user):
        """Test each attempt leaves an audit entry"""
        make_user(email='test@example.com')

        client.post('/auth/login', json={'email': 'test@example.com', 'password': 'WrongPass123'})
        client.post('/auth/login', json={'email': 'test@example.com', 'password': PASSWORD})

        attempts = AuditLog.query.filter_by(event_type='login_attempt').all()
        assert sorted(a.event_status for a in attempts) == ['failure', 'success']

    def test_logout(self, client, make_user):
        """Test logout ends the session"""
        user = make_user()
        client.login(user)

        assert client.post('/auth/logout').status_code == 200
        assert client.get('/auth/me').status_code == 401


class TestVerificationAndReset:
    """Test suite for email verification and password reset"""

    def test_verify_then_login(self, client, db_session):
        """Test verifying the emailed token unlocks sign-in"""
        client.post('/auth/signup', json=SIGNUP)
        user = User.query.filter_by(email='newuser@example.com').first()

        response = client.post('/auth/verify-email', json={'token': user.verification_token})
        assert response.status_code == 200

        response = client.post('/auth/login', json={'email': 'newuser@example.com', 'password': 'SecurePass123'})
        assert response.status_code == 200

    def test_invalid_verification_token(self, client, db_session):
        """Test an unknown token is rejected"""
        response = client.post('/auth/verify-email', json={'token': 'not-a-token'})

        assert response.status_code == 400

    def test_reset_request_does_not_reveal_accounts(self, client, db_session):
        """Test unknown and known emails get the same answer"""
        response = client.post('/auth/reset-password', json={'email': 'nobody@example.com'})

        assert response.status_code == 200
        assert response.get_json()['success'] is True

    def test_password_reset_flow(self, client, make_user, db_session):
        """Test a reset token sets a new password and clears a lockout"""
        user = make_user(email='reset@example.com')
        user.lock_account(30)
        db_session.commit()

        client.post('/auth/reset-password', json={'email': 'reset@example.com'})
        token = db_session.get(User, user.id).reset_token
        assert token

        response = client.post('/auth/new-password', json={'token': token, 'password': 'BrandNew456'})
        assert response.status_code == 200

        refreshed = db_session.get(User, user.id)
        assert refreshed.check_password('BrandNew456')
        assert refreshed.reset_token is None
        assert not refreshed.is_account_locked()

    def test_reset_token_single_use(self, client, make_user, db_session):
        """Test a consumed reset token cannot be reused"""
        user = make_user(email='reset@example.com')
        client.post('/auth/reset-password', json={'email': 'reset@example.com'})
        token = db_session.get(User, user.id).reset_token

        client.post('/auth/new-password', json={'token': token, 'password': 'BrandNew456'})
        response = client.post('/auth/new-password', json={'token': token, 'password': 'Another789x'})

        assert response.status_code == 400


class TestAuthorization:
    """Test suite for role checks"""

    def test_unauthenticated_request_gets_401(self, client, db_session):
        """Test protected endpoints require a session"""
        response = client.get('/users')

        assert response.status_code == 401
        assert response.get_json()['error'] == 'Authentication required'

    def test_employee_cannot_reach_admin_endpoints(self, client, make_user):
        """Test role checks refuse non-admins"""
        client.login(make_user(role='employee'))

        assert client.get('/users').status_code == 403
        assert client.get('/sections').status_code == 403
        assert client.get('/payrolls').status_code == 403

    def test_health_check(self, client, db_session):
        """Test the health endpoint reports a connected database"""
        response = client.get('/health')

        assert response.status_code == 200
        assert response.get_json()['database'] == 'connected'
