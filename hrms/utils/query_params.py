"""
Helpers for reading typed values from the query string
"""
from datetime import date
from dateutil import parser
from flask import request, abort


def get_date_arg(name, default=None, required=False):
    """
    Parse a date query parameter (any format dateutil understands)

    Aborts with 400 when the value is present but unparseable, or missing
    while required.
    """
    value = request.args.get(name)
    if not value:
        if required:
            abort(400, description=f"Query parameter '{name}' is required")
        return default

    try:
        return parser.parse(value).date()
    except (ValueError, OverflowError):
        abort(400, description=f"Invalid date for '{name}': {value}")


def get_bool_arg(name, default=False):
    value = request.args.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def get_year_arg(name='year'):
    year = request.args.get(name, type=int)
    return year or date.today().year
