"""Turn Unipile LinkedIn profiles into contact records."""

import re
from typing import Any

import phonenumbers

from privatedata.models import ContactRecord

LINKEDIN_PROVIDER = "LINKEDIN"
LINKEDIN_PROFILE_URL = "https://www.linkedin.com/in/{}"

_PROFILE_PATH_MARKER = "/in/"
_NATIONAL_NUMBER_RE = re.compile(r"^(\d{3})(\d{3})(\d{4})$")


def extract_public_identifier(url: str) -> str | None:
    """Return the path segment after /in/ in a profile URL, or None."""
    _, marker, rest = url.partition(_PROFILE_PATH_MARKER)
    if not marker:
        return None
    identifier = re.split(r"[/?#]", rest, maxsplit=1)[0]
    return identifier or None


def format_phone_number(raw: str, default_region: str = "US") -> str | None:
    """
    Validate and format a phone number.

    Numbers under the default region's calling code render as "(NNN) NNN-NNNN".
    Numbers under any other calling code come back in E.164 form.
    Invalid numbers return None.
    """
    try:
        number = phonenumbers.parse(raw, default_region)
    except phonenumbers.NumberParseException:
        return None

    if not phonenumbers.is_valid_number(number):
        return None

    if number.country_code != phonenumbers.country_code_for_region(default_region):
        return phonenumbers.format_number(number, phonenumbers.PhoneNumberFormat.E164)

    national = phonenumbers.national_significant_number(number)
    return _NATIONAL_NUMBER_RE.sub(r"(\1) \2-\3", national)


def _first_work_experience(profile: dict[str, Any]) -> dict[str, Any]:
    experience = profile.get("work_experience")
    if isinstance(experience, list) and experience and isinstance(experience[0], dict):
        return experience[0]
    return {}


def build_contact_record(profile: dict[str, Any], default_region: str = "US") -> ContactRecord | None:
    """
    Build a contact record from a Unipile profile response.

    Expected profile structure:
    {
        "provider": "LINKEDIN",
        "public_identifier": "janedoe",
        "first_name": "Jane",
        "last_name": "Doe",
        "contact_info": {"emails": ["Jane@Example.com"], "phones": ["+1 650 253 0000"]},
        "work_experience": [{"company": "Acme", "position": "Recruiter"}],
    }

    Returns None unless the profile is a LinkedIn profile with a public identifier.
    """
    public_identifier = profile.get("public_identifier")
    if profile.get("provider") != LINKEDIN_PROVIDER or not isinstance(public_identifier, str):
        return None

    first_name = profile.get("first_name")
    last_name = profile.get("last_name")
    full_name = f"{first_name} {last_name}" if first_name and last_name else None

    contact_info = profile.get("contact_info")
    if not isinstance(contact_info, dict):
        contact_info = {}
    emails = [email.lower() for email in contact_info.get("emails") or [] if isinstance(email, str)]

    phones = []
    for raw_phone in contact_info.get("phones") or []:
        if not isinstance(raw_phone, str):
            continue
        formatted = format_phone_number(raw_phone, default_region)
        if formatted is not None:
            phones.append(formatted)

    job = _first_work_experience(profile)
    company = job.get("company")
    position = job.get("position")
    current_company_role = f"{company} - {position}" if company and position else None

    return ContactRecord(
        full_name=full_name,
        profile_url=LINKEDIN_PROFILE_URL.format(public_identifier),
        emails=emails,
        phones=phones,
        current_company_role=current_company_role,
    )
