from datetime import date

import pytest

from shopfront.core.exceptions import ValidationError
from shopfront.utils.date_utils import DateUtils
from shopfront.utils.validators import ValidationUtils

TODAY = date(2026, 10, 19)


@pytest.mark.parametrize("phone", ["+1-2345678901", "+123-1234512345", "+44-0000000000"])
def test_valid_phone_numbers(phone):
    assert ValidationUtils.validate_phone_number(phone) == phone


@pytest.mark.parametrize("phone", [
    "12345", "+1-234567890", "+1234-2345678901", "1-2345678901", "+1 2345678901", "",
    "+1-2345678901\n", "+1-\u0662\u0663\u0664\u0665\u0666\u0667\u0668\u0669\u0660\u0661",
])
def test_invalid_phone_numbers(phone):
    with pytest.raises(ValidationError) as exc:
        ValidationUtils.validate_phone_number(phone)
    assert exc.value.status_code == 400


def test_password_accepts_mixed_case_with_digit():
    assert ValidationUtils.validate_password("Abcdefg1") == "Abcdefg1"


@pytest.mark.parametrize("password, message", [
    ("abc", "at least 8 characters"),
    ("abcdefg1", "uppercase"),
    ("ABCDEFG1", "lowercase"),
    ("Abcdefgh", "digit"),
    ("Aa1" + "x" * 70, "at most 72 bytes"),
])
def test_password_rules(password, message):
    with pytest.raises(ValidationError) as exc:
        ValidationUtils.validate_password(password)
    assert message in exc.value.message


@pytest.mark.parametrize("dob", ["2012-10-19", "1876-10-19", "1875-10-20", "1990-01-01T00:00:00Z"])
def test_age_within_bounds_is_accepted(dob):
    ValidationUtils.validate_date_of_birth(dob, today=TODAY)


@pytest.mark.parametrize("dob", ["2012-10-20", "1875-10-19", "2030-01-01"])
def test_age_outside_bounds_is_rejected(dob):
    with pytest.raises(ValidationError):
        ValidationUtils.validate_date_of_birth(dob, today=TODAY)


@pytest.mark.parametrize("dob", ["not-a-date", "", "2001-13-45"])
def test_unparseable_dob_is_rejected(dob):
    with pytest.raises(ValidationError) as exc:
        ValidationUtils.validate_date_of_birth(dob, today=TODAY)
    assert "Invalid DOB" in exc.value.message


def test_age_counts_full_years_only():
    assert DateUtils.age_in_years(date(2000, 10, 20), on=TODAY) == 25
    assert DateUtils.age_in_years(date(2000, 10, 19), on=TODAY) == 26
