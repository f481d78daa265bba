import os
from dotenv import load_dotenv

# Load environment variables before config is imported
load_dotenv()

from hrms import create_app, db  # noqa: E402

# Create application
app = create_app(os.getenv('FLASK_ENV', 'development'))


@app.shell_context_processor
def make_shell_context():
    """Make database and models available in Flask shell"""
    from hrms.models.user import User
    from hrms.models.employee import Employee
    from hrms.models.leave_request import LeaveRequest
    from hrms.models.time_entry import TimeEntry

    return {
        'db': db,
        'User': User,
        'Employee': Employee,
        'LeaveRequest': LeaveRequest,
        'TimeEntry': TimeEntry,
    }


if __name__ == '__main__':
    port = int(os.getenv('PORT', 5000))
    # Only enable debug mode in development
    debug_mode = os.getenv('FLASK_ENV') == 'development'
    app.run(host='0.0.0.0', port=port, debug=debug_mode)
