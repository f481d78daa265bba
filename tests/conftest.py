"""
Pytest configuration and fixtures for HRMS tests
"""
from datetime import date, datetime
import pytest
from flask import g
from hrms import create_app, db
from hrms.models.user import User
from hrms.models.section import Section
from hrms.models.position import Position
from hrms.models.employee import Employee


PASSWORD = 'Secure123pass'


@pytest.fixture
def app():
    """Create a test application with a fresh in-memory database"""
    app = create_app('testing')

    # Establish an application context
    ctx = app.app_context()
    ctx.push()
    db.create_all()

    yield app

    db.session.remove()
    db.drop_all()
    ctx.pop()


@pytest.fixture
def db_session(app):
    """Provide the database session for tests"""
    return db.session


@pytest.fixture
def client(app):
    """Create a test client with login helper"""
    client = app.test_client()

    def login(user):
        """Log in a user for testing"""
        with client.session_transaction() as sess:
            sess['_user_id'] = str(user.id)  # Flask-Login uses _user_id
            sess['_fresh'] = True
        # The test app context outlives requests, so drop the cached user
        g.pop('_login_user', None)

    client.login = login
    return client


@pytest.fixture
def runner(app):
    """Create a test CLI runner"""
    return app.test_cli_runner()


@pytest.fixture
def make_user(db_session):
    """Factory for users; verified by default"""
    counter = {'n': 0}

    def _make(role='employee', email=None, verified=True, first_name='Test', last_name='User'):
        counter['n'] += 1
        user = User(
            email=email or f'user{counter["n"]}@example.com',
            first_name=first_name,
            last_name=last_name,
            role=role,
        )
        user.set_password(PASSWORD)
        if verified:
            user.email_verified_at = datetime.utcnow()
        db_session.add(user)
        db_session.commit()
        return user

    return _make


@pytest.fixture
def admin_user(make_user):
    return make_user(role='admin', email='admin@example.com', first_name='Ada', last_name='Admin')


@pytest.fixture
def manager_user(make_user):
    return make_user(role='manager', email='manager@example.com', first_name='Mona', last_name='Manager')


@pytest.fixture
def make_section(db_session):
    def _make(name='Finance'):
        section = Section(section_name=name)
        db_session.add(section)
        db_session.commit()
        return section

    return _make


@pytest.fixture
def make_position(db_session, make_section):
    def _make(title='Accountant', section=None):
        section = section or make_section()
        position = Position(position_title=title, section_id=section.id)
        db_session.add(position)
        db_session.commit()
        return position

    return _make


@pytest.fixture
def make_employee(db_session, make_position):
    """Factory for employees; a position (and section) is created when none is given"""
    counter = {'n': 0}

    def _make(user=None, position=None, first_name='Jane', last_name='Doe', hire_date=None, **extra):
        counter['n'] += 1
        position = position or make_position()
        employee = Employee(
            employment_number=f'EMP-{counter["n"]:03d}',
            first_name=first_name,
            last_name=last_name,
            gender='female',
            email=f'employee{counter["n"]}@example.com',
            phone='555-0100',
            section_id=position.section_id,
            position_id=position.id,
            hire_date=hire_date or date(2020, 1, 6),
            date_of_birth=date(1990, 5, 17),
            salary=50000,
            nationality='Kenyan',
            physical_address='1 Main Street',
            user_id=user.id if user else None,
            **extra
        )
        db_session.add(employee)
        db_session.commit()
        return employee

    return _make


@pytest.fixture
def employee_user(make_user, make_employee):
    """A verified employee-role user linked to an employee record"""
    user = make_user(role='employee', email='staff@example.com', first_name='Sam', last_name='Staff')
    employee = make_employee(user=user, first_name='Sam', last_name='Staff')
    return user, employee
