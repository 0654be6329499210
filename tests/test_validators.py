"""Tests for utils/validators.py: the user rule table."""

import pytest
from conftest import make_image, PNG_BYTES, JPG_BYTES, GIF_BYTES, WEBP_BYTES
from core.exceptions import ValidationError
from models.user import User
from repositories.user_repository import UserRepository
from schemas.user_schema import UserForm
from utils.validators import build_user_rules, run_rules, validate_user_input


def _errors(db, ignore_id=None, image=None, **fields):
    values = {"name": "Alice", "email": "a@x.com", "mobile": "1234567890", "address": "1 Main St"}
    values.update(fields)
    values["profile_image"] = image
    return run_rules(values, build_user_rules(db, ignore_id))


class TestFieldRules:
    def test_valid_input_has_no_errors(self, db):
        assert _errors(db) == {}

    def test_all_fields_reported_together(self, db):
        errors = _errors(db, name="", email="", mobile="", address="")
        assert set(errors) == {"name", "email", "mobile", "address"}
        assert errors["name"] == ["The name field is required."]
        assert errors["address"] == ["The address field is required."]

    def test_required_failure_skips_remaining_rules(self, db):
        errors = _errors(db, mobile="")
        assert errors["mobile"] == ["The mobile field is required."]

    @pytest.mark.parametrize("name", ["Alice1", "Mary Jane", "O'Brien", "Al-ice"])
    def test_name_must_be_letters_only(self, db, name):
        errors = _errors(db, name=name)
        assert errors["name"] == ["The name field must only contain letters."]

    def test_name_accepts_non_ascii_letters(self, db):
        assert "name" not in _errors(db, name="Zoë")

    @pytest.mark.parametrize("email", ["not-an-email", "a@", "@x.com", "a b@x.com"])
    def test_email_syntax(self, db, email):
        errors = _errors(db, email=email)
        assert "The email field must be a valid email address." in errors["email"]

    @pytest.mark.parametrize("mobile", ["12345", "12345abcde", "123456789012", "+123456789"])
    def test_mobile_rejects_bad_values(self, db, mobile):
        errors = _errors(db, mobile=mobile)
        assert errors["mobile"] == ["The mobile field must be 10 digits."]

    def test_mobile_accepts_ten_digits(self, db):
        assert "mobile" not in _errors(db, mobile="9876543210")


class TestEmailUniqueness:
    @pytest.fixture
    def existing(self, db):
        return UserRepository.create_user(
            db, User(name="Bob", email="b@x.com", mobile="1234567890", address="2 Main St")
        )

    def test_duplicate_email_rejected(self, db, existing):
        errors = _errors(db, email="b@x.com")
        assert errors["email"] == ["The email has already been taken."]

    def test_own_email_allowed_when_ignoring_self(self, db, existing):
        assert _errors(db, ignore_id=existing.id, email="b@x.com") == {}

    def test_other_users_email_still_taken_when_ignoring_self(self, db, existing):
        other = UserRepository.create_user(
            db, User(name="Carol", email="c@x.com", mobile="1234567890", address="3 Main St")
        )
        errors = _errors(db, ignore_id=other.id, email="b@x.com")
        assert "email" in errors


class TestProfileImageRules:
    def test_image_is_optional(self, db):
        assert "profile_image" not in _errors(db, image=None)

    @pytest.mark.parametrize("content", [PNG_BYTES, JPG_BYTES, GIF_BYTES])
    def test_allowed_types(self, db, content):
        assert "profile_image" not in _errors(db, image=make_image(content))

    def test_non_image_rejected(self, db):
        errors = _errors(db, image=make_image(b"%PDF-1.4 not an image", filename="doc.pdf"))
        assert "The profile image field must be an image." in errors["profile_image"]

    def test_image_of_wrong_type_rejected(self, db):
        errors = _errors(db, image=make_image(WEBP_BYTES, filename="pic.webp"))
        assert errors["profile_image"] == ["The profile image field must be a file of type: jpg, png, gif."]

    def test_type_comes_from_content_not_extension(self, db):
        errors = _errors(db, image=make_image(b"plain text", filename="fake.png"))
        assert "The profile image field must be an image." in errors["profile_image"]

    def test_max_size(self, db):
        at_limit = make_image(PNG_BYTES + b"\x00" * (2048 * 1024 - len(PNG_BYTES)))
        too_big = make_image(PNG_BYTES + b"\x00" * (2048 * 1024))
        assert "profile_image" not in _errors(db, image=at_limit)
        assert _errors(db, image=too_big)["profile_image"] == [
            "The profile image field must not be greater than 2048 kilobytes."
        ]


class TestValidateUserInput:
    def test_raises_with_field_keyed_errors(self, db):
        form = UserForm(name="", email="bad", mobile="1", address="x")
        with pytest.raises(ValidationError) as exc_info:
            validate_user_input(db, form, None)
        assert set(exc_info.value.errors) == {"name", "email", "mobile"}

    def test_passes_silently_on_valid_input(self, db, valid_form):
        validate_user_input(db, valid_form, make_image())

    def test_form_values_are_trimmed(self):
        form = UserForm(name="  Alice ", email=" a@x.com", mobile="1234567890 ", address=" 1 Main St ")
        assert form.name == "Alice"
        assert form.email == "a@x.com"
        assert form.mobile == "1234567890"
