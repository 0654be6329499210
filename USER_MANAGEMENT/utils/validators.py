import re
from typing import Callable, Dict, List, NamedTuple, Optional
from email_validator import validate_email, EmailNotValidError
from sqlalchemy.orm import Session
from core.config import ALLOWED_IMAGE_TYPES, MAX_PROFILE_IMAGE_KB, MOBILE_DIGITS
from core.exceptions import ValidationError
from repositories.user_repository import UserRepository
from schemas.user_schema import UserForm, ImageUpload
from utils.image_sniffer import detect_image_type


class Rule(NamedTuple):
    check: Callable[[object], bool]
    message: str
    stop_on_failure: bool = False


def _label(field: str) -> str:
    return field.replace("_", " ")


def required(field: str) -> Rule:
    return Rule(lambda v: v is not None and v != "", f"The {_label(field)} field is required.", True)


def alpha(field: str) -> Rule:
    return Rule(lambda v: v.isalpha(), f"The {_label(field)} field must only contain letters.")


def email(field: str) -> Rule:
    def check(v: str) -> bool:
        try:
            validate_email(v, check_deliverability=False)
        except EmailNotValidError:
            return False
        return True
    return Rule(check, f"The {_label(field)} field must be a valid email address.")


def unique_email(db: Session, ignore_id: Optional[int]) -> Rule:
    return Rule(
        lambda v: UserRepository.get_by_email(db, v, exclude_id=ignore_id) is None,
        "The email has already been taken.",
    )


def digits(field: str, length: int) -> Rule:
    pattern = re.compile(rf"[0-9]{{{length}}}")
    return Rule(lambda v: pattern.fullmatch(v) is not None, f"The {_label(field)} field must be {length} digits.")


def image(field: str) -> Rule:
    return Rule(lambda f: detect_image_type(f.content) is not None, f"The {_label(field)} field must be an image.")


def mimes(field: str, types: List[str]) -> Rule:
    return Rule(
        lambda f: detect_image_type(f.content) in types,
        f"The {_label(field)} field must be a file of type: {', '.join(types)}.",
    )


def max_kilobytes(field: str, kilobytes: int) -> Rule:
    return Rule(
        lambda f: f.size_kb <= kilobytes,
        f"The {_label(field)} field must not be greater than {kilobytes} kilobytes.",
    )


def build_user_rules(db: Session, ignore_id: Optional[int] = None) -> Dict[str, List[Rule]]:
    return {
        "name": [required("name"), alpha("name")],
        "email": [required("email"), email("email"), unique_email(db, ignore_id)],
        "mobile": [required("mobile"), digits("mobile", MOBILE_DIGITS)],
        "address": [required("address")],
        "profile_image": [
            image("profile_image"),
            mimes("profile_image", ALLOWED_IMAGE_TYPES),
            max_kilobytes("profile_image", MAX_PROFILE_IMAGE_KB),
        ],
    }


def run_rules(values: Dict[str, object], rules: Dict[str, List[Rule]]) -> Dict[str, List[str]]:
    """
    Evaluate every field and collect all messages. A field without a required
    rule and without a value is skipped.
    """
    errors: Dict[str, List[str]] = {}
    for field, field_rules in rules.items():
        value = values.get(field)
        has_required = any(rule.stop_on_failure for rule in field_rules)
        if not has_required and value in (None, ""):
            continue

        messages = []
        for rule in field_rules:
            if rule.check(value):
                continue
            messages.append(rule.message)
            if rule.stop_on_failure:
                break
        if messages:
            errors[field] = messages
    return errors


def validate_user_input(
    db: Session,
    form: UserForm,
    image_upload: Optional[ImageUpload],
    ignore_id: Optional[int] = None,
) -> None:
    values = {**form.model_dump(), "profile_image": image_upload}
    errors = run_rules(values, build_user_rules(db, ignore_id))
    if errors:
        raise ValidationError(errors)
