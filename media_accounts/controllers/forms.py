"""Input forms for the account controllers."""

from typing import Any, Optional

from werkzeug.datastructures import MultiDict
from wtforms import StringField, PasswordField, Form
from wtforms.validators import DataRequired, Email, Length, Optional as \
    optional, Regexp, URL

from .. import domain

# Clients send camelCase; form fields are snake_case.
WIRE_NAMES = {
    'fullName': 'full_name',
    'coverImage': 'cover_image',
    'oldPassword': 'old_password',
    'newPassword': 'new_password',
    'refreshToken': 'refresh_token',
}

USERNAME_PATTERN = r'^[A-Za-z0-9_.\-]+$'


def normalize(params: Optional[Any]) -> MultiDict:
    """Build form data from a request body, mapping wire names."""
    data = MultiDict()
    if not params:
        return data
    items = params.items(multi=True) if isinstance(params, MultiDict) \
        else params.items()
    for key, value in items:
        if value is None:
            continue
        data.add(WIRE_NAMES.get(key, key), str(value))
    return data


class LoginForm(Form):
    """Log in with username or e-mail, and password."""

    username = StringField('Username', validators=[optional()])
    email = StringField('Email', validators=[optional()])
    password = PasswordField('Password', validators=[DataRequired()])

    def validate(self, extra_validators: Any = None) -> bool:
        """Require at least one of username and e-mail."""
        valid = super(LoginForm, self).validate(
            extra_validators=extra_validators
        )
        if not (self.username.data or '').strip() \
                and not (self.email.data or '').strip():
            self.username.errors = list(self.username.errors) + [
                'Username or email is required'
            ]
            return False
        return valid


class RegistrationForm(Form):
    """Create a new account."""

    username = StringField(
        'Username',
        validators=[DataRequired(), Length(min=3, max=64),
                    Regexp(USERNAME_PATTERN,
                           message='Letters, digits, "_", "." and "-" only')]
    )
    email = StringField('Email',
                        validators=[DataRequired(), Length(max=255), Email()])
    full_name = StringField('Full name',
                            validators=[DataRequired(), Length(max=255)])
    password = PasswordField('Password',
                             validators=[DataRequired(), Length(max=255)])
    avatar = StringField('Avatar URL',
                         validators=[optional(), Length(max=1024), URL()])
    cover_image = StringField('Cover image URL',
                              validators=[optional(), Length(max=1024),
                                          URL()])

    def to_domain(self) -> domain.Account:
        """Generate an (unsaved) :class:`.domain.Account` from this form."""
        return domain.Account(
            username=self.username.data.strip().lower(),
            email=self.email.data.strip().lower(),
            full_name=self.full_name.data.strip(),
            avatar_url=(self.avatar.data or '').strip(),
            cover_image_url=(self.cover_image.data or '').strip()
        )


class PasswordChangeForm(Form):
    """Change the password of the authenticated account."""

    old_password = PasswordField('Old password', validators=[DataRequired()])
    new_password = PasswordField('New password',
                                 validators=[DataRequired(), Length(max=255)])


class AccountDetailsForm(Form):
    """Update display name and e-mail of the authenticated account."""

    full_name = StringField('Full name',
                            validators=[DataRequired(), Length(max=255)])
    email = StringField('Email',
                        validators=[DataRequired(), Length(max=255), Email()])


class RefreshForm(Form):
    """Body fallback for clients that can't send the refresh cookie."""

    refresh_token = StringField('Refresh token', validators=[optional()])
