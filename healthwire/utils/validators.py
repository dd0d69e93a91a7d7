"""
Input rules applied by the presentation layer before submitting forms.

The session core passes credentials through untouched; these checks are
the only place email, password, phone and form payload shapes are judged.
"""

import re
from typing import Any, Dict, Optional

from healthwire.config import settings
from healthwire.schemas.validation import FieldCheck, ValidationResult

EMAIL_PATTERN = re.compile(r"[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,}", re.IGNORECASE)
PHONE_PATTERN = re.compile(r"\+?[0-9]{10,15}")
URL_PATTERN = re.compile(r"(https?://)?([\da-z.-]+)\.([a-z.]{2,6})([/\w .-]*)/?")


def validate_email(email: Optional[str]) -> bool:
    return bool(email) and EMAIL_PATTERN.fullmatch(email) is not None


def validate_password(password: Optional[str]) -> FieldCheck:
    min_length = settings.PASSWORD_MIN_LENGTH
    if not password or len(password) < min_length:
        return FieldCheck(valid=False, message=f"Password must be at least {min_length} characters")
    return FieldCheck(valid=True)


def validate_phone(phone: Optional[str]) -> FieldCheck:
    if not phone or not PHONE_PATTERN.fullmatch(phone):
        return FieldCheck(valid=False, message="Invalid phone number format")
    return FieldCheck(valid=True)


def validate_url(url: Optional[str]) -> FieldCheck:
    """Empty URLs are allowed; anything else must look like a web address."""
    if not url:
        return FieldCheck(valid=True)
    if not URL_PATTERN.fullmatch(url):
        return FieldCheck(valid=False, message="Invalid URL format")
    return FieldCheck(valid=True)


def validate_mfa_code(code: Optional[str]) -> FieldCheck:
    length = settings.MFA_CODE_LENGTH
    if not code:
        return FieldCheck(valid=False, message="Verification code is required")
    if not re.fullmatch(rf"[0-9]{{{length}}}", code):
        return FieldCheck(valid=False, message=f"Code must be {length} digits")
    return FieldCheck(valid=True)


def _is_non_negative_number(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    try:
        return float(value) >= 0
    except (TypeError, ValueError):
        return False


def _common_field_errors(data: Dict[str, Any]) -> Dict[str, str]:
    errors: Dict[str, str] = {}

    if not data.get("nom") or len(data["nom"].strip()) < 2:
        errors["nom"] = "Name must be at least 2 characters"

    if not data.get("ville"):
        errors["ville"] = "City is required"

    if not validate_email(data.get("email")):
        errors["email"] = "Valid email is required"

    phone_check = validate_phone(data.get("telephone") or "")
    if not phone_check.valid:
        errors["telephone"] = phone_check.message

    if data.get("imageurl"):
        url_check = validate_url(data["imageurl"])
        if not url_check.valid:
            errors["imageurl"] = url_check.message

    # Password is optional on profile edits
    if data.get("password"):
        password_check = validate_password(data["password"])
        if not password_check.valid:
            errors["password"] = password_check.message

    return errors


def validate_common_fields(data: Dict[str, Any]) -> ValidationResult:
    """Fields shared by doctor and client profiles."""
    return ValidationResult.from_errors(_common_field_errors(data))


def validate_doctor_fields(data: Dict[str, Any]) -> ValidationResult:
    errors = _common_field_errors(data)

    if not data.get("specialite"):
        errors["specialite"] = "Specialty is required"

    if data.get("default_price") and not _is_non_negative_number(data["default_price"]):
        errors["default_price"] = "Price must be a valid positive number"

    return ValidationResult.from_errors(errors)


def validate_appointment(data: Dict[str, Any]) -> ValidationResult:
    errors: Dict[str, str] = {}

    if not data.get("id_doc"):
        errors["id_doc"] = "Doctor is required"

    if not data.get("id_clt"):
        errors["id_clt"] = "Patient is required"

    if not data.get("date"):
        errors["date"] = "Date and time are required"

    description = data.get("description_rdv")
    if not description or len(description.strip()) < 5:
        errors["description_rdv"] = "Description must be at least 5 characters"

    if data.get("price") is not None and not _is_non_negative_number(data["price"]):
        errors["price"] = "Price must be a valid positive number"

    return ValidationResult.from_errors(errors)


def validate_prescription(data: Dict[str, Any]) -> ValidationResult:
    """A prescription needs a patient and at least one complete medication line."""
    errors: Dict[str, Any] = {}

    if not data.get("client_id"):
        errors["client_id"] = "Patient is required"

    items = data.get("items")
    if not items or not isinstance(items, list):
        errors["items"] = "At least one medication is required"
    else:
        item_errors: Dict[int, Dict[str, str]] = {}
        for index, item in enumerate(items):
            item_error = {}
            if not item.get("medication"):
                item_error["medication"] = "Medication name is required"
            if not item.get("dosage"):
                item_error["dosage"] = "Dosage is required"
            if not item.get("frequency"):
                item_error["frequency"] = "Frequency is required"
            if not item.get("duration"):
                item_error["duration"] = "Duration is required"
            if item_error:
                item_errors[index] = item_error

        if item_errors:
            errors["items"] = item_errors

    return ValidationResult.from_errors(errors)


# Only fields present in the payload are checked; one form edits one entry type
MEDICAL_RECORD_FIELDS = {
    "allergy_name": "Allergy name is required",
    "condition_name": "Condition name is required",
    "diagnosis_date": "Diagnosis date is required",
    "consultation_date": "Consultation date is required",
    "consultation_type": "Consultation type is required",
    "diagnosis": "Diagnosis is required",
    "treatment": "Treatment is required",
}


def validate_medical_record(data: Dict[str, Any]) -> ValidationResult:
    errors = {
        field: message
        for field, message in MEDICAL_RECORD_FIELDS.items()
        if field in data and not data[field]
    }
    return ValidationResult.from_errors(errors)
