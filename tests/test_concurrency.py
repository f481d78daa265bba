"""
Tests for concurrency (conflict of interest) declarations
"""
from hrms.models.employee_activity import EmployeeActivity


SIGNED = {'is_truthful': True, 'agreed_to_terms': True, 'signature': 'S. Staff'}


def draft_form(client, **sections):
    response = client.post('/concurrency', json=sections)
    assert response.status_code == 201
    return response.get_json()['form']


def submitted_form(client):
    form = draft_form(client, declaration=SIGNED)
    response = client.post(f"/concurrency/{form['id']}/submit")
    assert response.status_code == 200
    return response.get_json()['form']


class TestDeclarations:
    """Test suite for drafting and submitting declarations"""

    def test_draft_fills_personal_info(self, client, employee_user):
        """Test a new draft copies the employee's own details"""
        user, employee = employee_user
        client.login(user)

        form = draft_form(client)

        assert form['status'] == 'draft'
        assert form['employee_id'] == employee.id
        assert form['personal_info']['full_name'] == 'Sam Staff'
        assert form['personal_info']['employee_id'] == employee.employment_number

    def test_outside_employment_needs_employer(self, client, employee_user):
        """Test declaring outside employment requires employer names"""
        user, _ = employee_user
        client.login(user)

        response = client.post('/concurrency', json={'outside_employment': {'has_outside_employment': True}})

        assert response.status_code == 400
        assert 'Employer names are required' in response.get_json()['details'][0]['message']

    def test_conflict_needs_details(self, client, employee_user):
        """Test declaring a conflict requires a description"""
        user, _ = employee_user
        client.login(user)

        response = client.post('/concurrency', json={'conflict_of_interest': {'has_conflict': True}})

        assert response.status_code == 400

    def test_gifts_need_details(self, client, employee_user):
        """Test declaring gifts requires a description"""
        user, _ = employee_user
        client.login(user)

        response = client.post('/concurrency', json={'gifts_benefits': {'received_gifts': True, 'gift_value': 50}})

        assert response.status_code == 400

    def test_submit_requires_signed_declaration(self, client, employee_user):
        """Test an unsigned declaration cannot be submitted"""
        user, _ = employee_user
        client.login(user)
        form = draft_form(client)

        response = client.post(f"/concurrency/{form['id']}/submit")

        assert response.status_code == 400
        error = response.get_json()['error']
        assert 'You must confirm the declaration is truthful' in error
        assert 'You must agree to the terms' in error
        assert 'Signature is required' in error

    def test_submit(self, client, employee_user):
        """Test a signed draft is submitted and logged"""
        user, employee = employee_user
        client.login(user)

        form = submitted_form(client)

        assert form['status'] == 'submitted'
        assert form['submission_date'] is not None
        activity = EmployeeActivity.query.filter_by(employee_id=employee.id).one()
        assert activity.description == 'Submitted concurrency declaration'

    def test_edit_draft(self, client, employee_user):
        """Test a draft can be edited section by section"""
        user, _ = employee_user
        client.login(user)
        form = draft_form(client)

        response = client.patch(f"/concurrency/{form['id']}", json={
            'outside_employment': {'has_outside_employment': True, 'employer_names': 'Night school', 'hours_per_week': 6},
        })

        assert response.status_code == 200
        outside = response.get_json()['form']['outside_employment']
        assert outside['employer_names'] == 'Night school'
        assert outside['hours_per_week'] == 6

    def test_cannot_edit_after_submit(self, client, employee_user):
        """Test submitted forms are locked"""
        user, _ = employee_user
        client.login(user)
        form = submitted_form(client)

        response = client.patch(f"/concurrency/{form['id']}", json={'personal_info': {'position': 'Lead'}})

        assert response.status_code == 400

    def test_other_employees_form_is_private(self, client, employee_user, make_user, make_employee):
        """Test employees only see their own declarations"""
        user, _ = employee_user
        client.login(user)
        form = draft_form(client)

        other = make_user()
        make_employee(user=other)
        client.login(other)

        assert client.get(f"/concurrency/{form['id']}").status_code == 403
        assert client.delete(f"/concurrency/{form['id']}").status_code == 403

    def test_delete_draft(self, client, employee_user):
        """Test a deleted form disappears"""
        user, _ = employee_user
        client.login(user)
        form = draft_form(client)

        assert client.delete(f"/concurrency/{form['id']}").status_code == 200
        assert client.get(f"/concurrency/{form['id']}").status_code == 404

    def test_my_forms_with_stats(self, client, employee_user):
        """Test the employee view includes counts per status"""
        user, _ = employee_user
        client.login(user)
        draft_form(client)
        submitted_form(client)

        data = client.get('/concurrency/me').get_json()

        assert len(data['forms']) == 2
        assert data['stats']['draft'] == 1
        assert data['stats']['submitted'] == 1
        assert data['stats']['total'] == 2


class TestDeclarationReview:
    """Test suite for reviewing declarations"""

    def test_approve(self, client, employee_user, manager_user):
        """Test a reviewer can approve a submitted form"""
        user, _ = employee_user
        client.login(user)
        form = submitted_form(client)

        client.login(manager_user)
        response = client.post(f"/concurrency/{form['id']}/review", json={'decision': 'approved'})

        assert response.status_code == 200
        data = response.get_json()['form']
        assert data['status'] == 'approved'
        assert data['reviewed_by'] == 'Mona Manager'
        assert data['review_date'] is not None

    def test_reject_requires_notes(self, client, employee_user, manager_user):
        """Test rejection and revision requests need reviewer notes"""
        user, _ = employee_user
        client.login(user)
        form = submitted_form(client)
        client.login(manager_user)

        assert client.post(f"/concurrency/{form['id']}/review", json={'decision': 'rejected'}).status_code == 400
        assert client.post(f"/concurrency/{form['id']}/review",
                           json={'decision': 'requires_revision'}).status_code == 400

    def test_revision_round_trip(self, client, employee_user, manager_user):
        """Test a form sent back can be edited and resubmitted"""
        user, _ = employee_user
        client.login(user)
        form = submitted_form(client)

        client.login(manager_user)
        client.post(f"/concurrency/{form['id']}/review",
                    json={'decision': 'requires_revision', 'reviewer_notes': 'Add hours per week'})

        client.login(user)
        assert client.patch(f"/concurrency/{form['id']}", json={
            'outside_employment': {'has_outside_employment': True, 'employer_names': 'Tutoring', 'hours_per_week': 4},
        }).status_code == 200
        response = client.post(f"/concurrency/{form['id']}/submit")

        assert response.get_json()['form']['status'] == 'submitted'

    def test_draft_cannot_be_reviewed(self, client, employee_user, manager_user):
        """Test only submitted forms are reviewed"""
        user, _ = employee_user
        client.login(user)
        form = draft_form(client)
        client.login(manager_user)

        response = client.post(f"/concurrency/{form['id']}/review", json={'decision': 'approved'})

        assert response.status_code == 400

    def test_employee_cannot_review(self, client, employee_user):
        """Test employees cannot review their own forms"""
        user, _ = employee_user
        client.login(user)
        form = submitted_form(client)

        response = client.post(f"/concurrency/{form['id']}/review", json={'decision': 'approved'})

        assert response.status_code == 403

    def test_list_by_status(self, client, employee_user, manager_user):
        """Test reviewers filter forms by status"""
        user, _ = employee_user
        client.login(user)
        draft_form(client)
        submitted_form(client)
        client.login(manager_user)

        forms = client.get('/concurrency?status=submitted').get_json()['forms']

        assert len(forms) == 1
        assert forms[0]['employee_name'] == 'Sam Staff'
        assert client.get('/concurrency/stats').get_json()['stats']['total'] == 2

    def test_reviewer_drafts_for_employee(self, client, manager_user, make_employee):
        """Test reviewers may open a form for an employee"""
        employee = make_employee()
        client.login(manager_user)

        form = draft_form(client, employee_id=employee.id)

        assert form['employee_id'] == employee.id
