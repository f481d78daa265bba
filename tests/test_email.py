"""
Tests for SendGrid notifications
"""
from datetime import date
import pytest
from hrms.models.leave_request import LeaveRequest
from hrms.services import email_service as email_module
from hrms.services.email_service import email_service


class FakeResponse:
    def __init__(self, status_code):
        self.status_code = status_code


@pytest.fixture
def sent(app, monkeypatch):
    """Configure an API key and capture outgoing messages"""
    app.config['SENDGRID_API_KEY'] = 'SG.test'
    messages = []

    class FakeClient:
        def __init__(self, api_key):
            assert api_key == 'SG.test'

        def send(self, message):
            messages.append(message.get())
            return FakeResponse(202)

    monkeypatch.setattr(email_module, 'SendGridAPIClient', FakeClient)
    return messages


def recipients(message):
    return [to['email'] for p in message['personalizations'] for to in p['to']]


def text_of(message):
    return ' '.join(c['value'] for c in message['content'])


class TestEmailService:
    """Test suite for outgoing email"""

    def test_skipped_without_api_key(self, app, make_user):
        """Test sending is a no-op when SendGrid is not configured"""
        user = make_user()

        assert email_service.send_verification_email(user, 'abc') is False

    def test_verification_email(self, app, sent, make_user):
        """Test the verification link is sent to the user"""
        app.config['FRONTEND_URL'] = 'https://hr.example.com/'
        user = make_user(email='new@example.com')

        assert email_service.send_verification_email(user, 'tok123') is True

        assert recipients(sent[0]) == ['new@example.com']
        assert sent[0]['subject'] == 'Confirm your email address'
        assert 'https://hr.example.com/auth/new-verification?token=tok123' in text_of(sent[0])

    def test_leave_rejection_includes_reason(self, app, sent, make_employee, db_session):
        """Test the rejection reason reaches the employee"""
        employee = make_employee()
        leave = LeaveRequest(
            employee_id=employee.id,
            leave_type='annual',
            start_date=date(2030, 3, 4),
            end_date=date(2030, 3, 8),
            days=5,
            status='rejected',
            rejection_reason='Quarter-end close',
        )
        db_session.add(leave)
        db_session.commit()

        assert email_service.send_leave_decision_email(leave) is True

        assert recipients(sent[0]) == [employee.email]
        assert sent[0]['subject'] == 'Leave request rejected'
        assert 'Reason: Quarter-end close' in text_of(sent[0])

    def test_failed_send_returns_false(self, app, monkeypatch, make_user):
        """Test SendGrid errors are logged and reported as False"""
        app.config['SENDGRID_API_KEY'] = 'SG.test'

        class BrokenClient:
            def __init__(self, api_key):
                pass

            def send(self, message):
                raise RuntimeError('network down')

        monkeypatch.setattr(email_module, 'SendGridAPIClient', BrokenClient)

        assert email_service.send_password_reset_email(make_user(), 'tok') is False

    def test_leave_approval_notifies_employee(self, client, sent, employee_user, manager_user):
        """Test approving a request sends the decision email"""
        user, employee = employee_user
        client.login(user)
        leave_id = client.post('/leaves', json={
            'leave_type': 'annual',
            'start_date': '2030-03-04',
            'end_date': '2030-03-05',
            'reason': 'Family visit upcountry',
        }).get_json()['leave_request']['id']

        client.login(manager_user)
        client.post(f'/leaves/{leave_id}/approve', json={'comments': 'Enjoy'})

        decision = [m for m in sent if m['subject'] == 'Leave request approved']
        assert recipients(decision[0]) == [employee.email]
        assert 'Comments: Enjoy' in text_of(decision[0])

    def test_concurrency_review_notifies_employee(self, client, sent, employee_user, manager_user):
        """Test a review decision and its notes are emailed to the declarant"""
        user, employee = employee_user
        client.login(user)
        form_id = client.post('/concurrency', json={
            'declaration': {'is_truthful': True, 'agreed_to_terms': True, 'signature': 'S. Staff'},
        }).get_json()['form']['id']
        client.post(f'/concurrency/{form_id}/submit')

        client.login(manager_user)
        client.post(f'/concurrency/{form_id}/review',
                    json={'decision': 'requires_revision', 'reviewer_notes': 'Add hours per week'})

        review = [m for m in sent if m['subject'] == 'Concurrency declaration requires revision']
        assert recipients(review[0]) == [employee.email]
        assert 'Reviewer notes: Add hours per week' in text_of(review[0])
