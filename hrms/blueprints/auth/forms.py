from flask_wtf import FlaskForm
from wtforms import StringField, PasswordField, BooleanField
from wtforms.validators import DataRequired, Email, Length


class LoginForm(FlaskForm):
    """Login form (accepts form or JSON bodies)"""
    email = StringField('Email', validators=[DataRequired(), Email(message='Invalid email address'), Length(max=255)])
    password = PasswordField('Password', validators=[DataRequired(message='Password is required')])
    remember_me = BooleanField('Remember Me')
