from __future__ import annotations

import pytest

from saasdir.core.errors import ValidationError
from saasdir.domain.submissions import (
    SubmissionForm,
    is_blocked_host,
    resolve_category,
    validate_pricing,
    validate_submission,
    validate_url,
)


def _form(**overrides) -> SubmissionForm:
    values = {
        "name": "Acme AI",
        "description": "Writes release notes from your commits.",
        "url": "acme.ai",
        "category": "Coding",
        "pricing": "freemium",
    }
    values.update(overrides)
    return SubmissionForm(**values)


def test_valid_form_is_normalized():
    clean = validate_submission(_form(slug="  ", email=" me@acme.ai "))
    assert clean.url == "https://acme.ai"
    assert clean.pricing == "Freemium"
    assert clean.custom_slug is None
    assert clean.email == "me@acme.ai"


@pytest.mark.parametrize(
    "overrides, field",
    [
        ({"name": "   "}, "name"),
        ({"name": "x" * 101}, "name"),
        ({"description": "too short"}, "description"),
        ({"description": "y" * 501}, "description"),
        ({"url": ""}, "url"),
        ({"url": "not a url"}, "url"),
        ({"category": ""}, "category"),
        ({"category": "Other", "custom_category": ""}, "category"),
        ({"pricing": "Enterprise"}, "pricing"),
    ],
)
def test_invalid_fields(overrides, field):
    with pytest.raises(ValidationError) as exc:
        validate_submission(_form(**overrides))
    assert exc.value.field == field


def test_other_category_uses_custom_value():
    assert resolve_category("Other", " Robotics ") == "Robotics"
    assert resolve_category("Coding", "ignored") == "Coding"


@pytest.mark.parametrize(
    "url",
    [
        "http://localhost:8000",
        "http://127.0.0.1/admin",
        "http://10.0.0.5",
        "http://192.168.1.1",
        "http://169.254.169.254/latest/meta-data",
        "http://[::1]/",
        "http://printer.local",
        "http://metadata.google.internal",
    ],
)
def test_internal_targets_are_rejected(url):
    with pytest.raises(ValidationError) as exc:
        validate_url(url)
    assert exc.value.message == "This URL is not allowed"


def test_extra_blocked_hosts():
    assert is_blocked_host("spam.example.com", {"spam.example.com"})
    assert not is_blocked_host("ok.example.com", {"spam.example.com"})


def test_public_urls_pass():
    assert validate_url("https://example.com/path?q=1") == "https://example.com/path?q=1"
    assert validate_url("http://8.8.8.8") == "http://8.8.8.8"


def test_pricing_is_canonicalized():
    assert validate_pricing("PAID") == "Paid"
    assert validate_pricing(" free ") == "Free"
