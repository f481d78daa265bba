"""
Tests for job postings, candidates and interviews
"""


def create_job(client, publish=True, **overrides):
    body = {
        'title': 'Payroll Officer',
        'location': 'Nairobi',
        'employment_type': 'full-time',
        'salary_range_min': 40000,
        'salary_range_max': 55000,
    }
    body.update(overrides)
    job = client.post('/recruitment/jobs', json=body).get_json()['job']
    if publish:
        job = client.post(f"/recruitment/jobs/{job['id']}/publish").get_json()['job']
    return job


def create_candidate(client, job, **overrides):
    body = {
        'first_name': 'Brian',
        'last_name': 'Otieno',
        'email': 'brian@example.com',
        'position': job['title'],
        'job_posting_id': job['id'],
    }
    body.update(overrides)
    return client.post('/recruitment/candidates', json=body)


def schedule_interview(client, candidate_id, **overrides):
    body = {
        'candidate_id': candidate_id,
        'interview_type': 'panel',
        'scheduled_date': '2025-04-10T10:00:00',
        'interviewers': ['Ada Admin'],
    }
    body.update(overrides)
    return client.post('/recruitment/interviews', json=body)


class TestJobPostings:
    """Test suite for the job posting lifecycle"""

    def test_new_posting_is_draft(self, client, admin_user):
        """Test postings start as drafts"""
        client.login(admin_user)

        job = create_job(client, publish=False)

        assert job['status'] == 'draft'
        assert job['published_at'] is None

    def test_publish_and_close(self, client, admin_user):
        """Test a draft is published then closed"""
        client.login(admin_user)
        job = create_job(client)

        assert job['status'] == 'published'
        assert job['published_at'] is not None

        response = client.post(f"/recruitment/jobs/{job['id']}/close")
        assert response.get_json()['job']['status'] == 'closed'

    def test_publish_twice(self, client, admin_user):
        """Test only drafts can be published"""
        client.login(admin_user)
        job = create_job(client)

        response = client.post(f"/recruitment/jobs/{job['id']}/publish")

        assert response.status_code == 400

    def test_close_draft(self, client, admin_user):
        """Test only published postings can be closed"""
        client.login(admin_user)
        job = create_job(client, publish=False)

        assert client.post(f"/recruitment/jobs/{job['id']}/close").status_code == 400

    def test_closed_posting_is_read_only(self, client, admin_user):
        """Test closed postings cannot be edited"""
        client.login(admin_user)
        job = create_job(client)
        client.post(f"/recruitment/jobs/{job['id']}/close")

        response = client.patch(f"/recruitment/jobs/{job['id']}", json={'title': 'Senior Payroll Officer'})

        assert response.status_code == 400

    def test_salary_range_order(self, client, admin_user):
        """Test the maximum salary cannot be below the minimum"""
        client.login(admin_user)

        response = client.post('/recruitment/jobs', json={
            'title': 'Clerk', 'salary_range_min': 50000, 'salary_range_max': 30000,
        })

        assert response.status_code == 400

    def test_filter_by_status(self, client, admin_user):
        """Test postings can be listed by status"""
        client.login(admin_user)
        create_job(client, publish=False, title='Driver')
        create_job(client, title='Cashier')

        jobs = client.get('/recruitment/jobs?status=published').get_json()['jobs']

        assert [j['title'] for j in jobs] == ['Cashier']

    def test_recruitment_is_admin_only(self, client, manager_user):
        """Test managers cannot use recruitment"""
        client.login(manager_user)

        assert client.get('/recruitment/jobs').status_code == 403


class TestCandidates:
    """Test suite for candidates"""

    def test_apply_to_published_posting(self, client, admin_user):
        """Test candidates apply to published postings"""
        client.login(admin_user)
        job = create_job(client)

        response = create_candidate(client, job)

        assert response.status_code == 201
        assert response.get_json()['candidate']['status'] == 'applied'
        assert client.get(f"/recruitment/jobs/{job['id']}").get_json()['job']['candidate_count'] == 1

    def test_apply_to_draft_posting(self, client, admin_user):
        """Test drafts do not accept candidates"""
        client.login(admin_user)
        job = create_job(client, publish=False)

        response = create_candidate(client, job)

        assert response.status_code == 400
        assert response.get_json()['error'] == 'Candidates can only apply to published postings'

    def test_invalid_email(self, client, admin_user):
        """Test the candidate email is validated"""
        client.login(admin_user)
        job = create_job(client)

        assert create_candidate(client, job, email='not-an-email').status_code == 400

    def test_status_change_is_noted(self, client, admin_user):
        """Test status changes are appended to the notes history"""
        client.login(admin_user)
        candidate = create_candidate(client, create_job(client)).get_json()['candidate']

        response = client.post(f"/recruitment/candidates/{candidate['id']}/status", json={
            'status': 'screening', 'reason': 'CV shortlisted',
        })

        notes = response.get_json()['candidate']['notes']
        assert notes[-1]['note'] == 'Status changed from applied to screening: CV shortlisted'
        assert notes[-1]['updated_by'] == 'Ada Admin'

    def test_final_status_is_locked(self, client, admin_user):
        """Test hired and rejected candidates cannot change status"""
        client.login(admin_user)
        candidate = create_candidate(client, create_job(client)).get_json()['candidate']
        client.post(f"/recruitment/candidates/{candidate['id']}/status", json={'status': 'rejected'})

        response = client.post(f"/recruitment/candidates/{candidate['id']}/status", json={'status': 'screening'})

        assert response.status_code == 400
        assert schedule_interview(client, candidate['id']).status_code == 400

    def test_filter_by_posting(self, client, admin_user):
        """Test candidates can be listed per posting"""
        client.login(admin_user)
        first = create_job(client, title='Cashier')
        second = create_job(client, title='Driver')
        create_candidate(client, first)
        create_candidate(client, second, email='other@example.com')

        candidates = client.get(f"/recruitment/candidates?job_posting_id={first['id']}").get_json()['candidates']

        assert [c['position'] for c in candidates] == ['Cashier']


class TestInterviews:
    """Test suite for interviews"""

    def test_interview_moves_candidate_forward(self, client, admin_user):
        """Test scheduling an interview marks the candidate as interviewing"""
        client.login(admin_user)
        candidate = create_candidate(client, create_job(client)).get_json()['candidate']

        response = schedule_interview(client, candidate['id'])

        assert response.status_code == 201
        assert response.get_json()['interview']['candidate_name'] == 'Brian Otieno'
        detail = client.get(f"/recruitment/candidates/{candidate['id']}").get_json()['candidate']
        assert detail['status'] == 'interviewing'
        assert len(detail['interviews']) == 1

    def test_score_requires_completed_interview(self, client, admin_user):
        """Test only completed interviews take a score"""
        client.login(admin_user)
        candidate = create_candidate(client, create_job(client)).get_json()['candidate']
        interview = schedule_interview(client, candidate['id']).get_json()['interview']

        response = client.patch(f"/recruitment/interviews/{interview['id']}", json={'score': 80})
        assert response.status_code == 400
        assert response.get_json()['error'] == 'Only completed interviews can be scored'

        response = client.patch(f"/recruitment/interviews/{interview['id']}", json={
            'status': 'completed', 'score': 80, 'feedback': 'Strong on reconciliations',
        })
        assert response.status_code == 200
        assert response.get_json()['interview']['score'] == 80

    def test_cancelled_interview_is_locked(self, client, admin_user):
        """Test cancelled interviews can only be rescheduled"""
        client.login(admin_user)
        candidate = create_candidate(client, create_job(client)).get_json()['candidate']
        interview = schedule_interview(client, candidate['id']).get_json()['interview']
        client.patch(f"/recruitment/interviews/{interview['id']}", json={'status': 'cancelled'})

        response = client.patch(f"/recruitment/interviews/{interview['id']}", json={'location': 'Room 4'})

        assert response.status_code == 400
