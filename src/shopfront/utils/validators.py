import re
from datetime import date
from typing import Optional, Union

from shopfront.core.exceptions import ValidationError
from shopfront.utils.date_utils import DateUtils


class ValidationUtils:
    """
    Signup policy checks.

    Each validator raises ValidationError with a human-readable message on
    the first rule that fails and returns the normalized value otherwise.
    """

    PATTERNS = {
        'phone_number': re.compile(r'\+[0-9]{1,3}-[0-9]{10}'),  # e.g. +123-1234512345
        'lowercase': re.compile(r'[a-z]'),
        'uppercase': re.compile(r'[A-Z]'),
        'digit': re.compile(r'\d'),
    }

    MIN_PASSWORD_LENGTH = 8
    MAX_PASSWORD_BYTES = 72  # bcrypt only consumes the first 72 bytes
    MIN_AGE_YEARS = 14
    MAX_AGE_YEARS = 150

    @classmethod
    def validate_phone_number(cls, phone: str) -> str:
        if not isinstance(phone, str) or not cls.PATTERNS['phone_number'].fullmatch(phone):
            raise ValidationError(f"Invalid phoneNumber: {phone}")
        return phone

    @classmethod
    def validate_password(cls, password: str) -> str:
        if len(password) < cls.MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must be at least {cls.MIN_PASSWORD_LENGTH} characters long."
            )
        if len(password.encode("utf-8")) > cls.MAX_PASSWORD_BYTES:
            raise ValidationError(
                f"Password must be at most {cls.MAX_PASSWORD_BYTES} bytes long."
            )
        if not cls.PATTERNS['lowercase'].search(password):
            raise ValidationError("Password must contain at least one lowercase letter.")
        if not cls.PATTERNS['uppercase'].search(password):
            raise ValidationError("Password must contain at least one uppercase letter.")
        if not cls.PATTERNS['digit'].search(password):
            raise ValidationError("Password must contain at least one digit.")
        return password

    @classmethod
    def validate_date_of_birth(
        cls,
        dob: Union[str, date],
        today: Optional[date] = None
    ) -> date:
        """Parse the date of birth and check the derived age is within policy"""
        try:
            birth_date = DateUtils.parse_date(dob)
        except ValueError:
            raise ValidationError(f"Invalid DOB: {dob}")

        age = DateUtils.age_in_years(birth_date, today)
        if age < cls.MIN_AGE_YEARS:
            raise ValidationError(f"User must be at least {cls.MIN_AGE_YEARS} years old")
        if age > cls.MAX_AGE_YEARS:
            raise ValidationError(f"User cannot be older than {cls.MAX_AGE_YEARS} years")
        return birth_date
