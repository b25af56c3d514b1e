from crm.redaction import redact_sensitive_data


def test_sensitive_keys_are_masked_by_kind():
    redacted = redact_sensitive_data({
        "contactEmail": "jane.doe@acme.com",
        "phone": "+15551234567",
        "password": "hunter2",
        "api_token": 12345,
        "company": "Acme",
    })

    assert redacted == {
        "contactEmail": "ja***@acme.com",
        "phone": "***4567",
        "password": "***",
        "api_token": "***",
        "company": "Acme",
    }


def test_nested_structures_are_walked_without_mutating_input():
    data = {"contacts": [{"email": "bob@example.com", "title": "CTO"}], "meta": {"SSN": "123-45-6789"}}

    redacted = redact_sensitive_data(data)

    assert redacted == {"contacts": [{"email": "bo***@example.com", "title": "CTO"}], "meta": {"SSN": "***"}}
    assert data["contacts"][0]["email"] == "bob@example.com"


def test_scalars_pass_through():
    assert redact_sensitive_data("plain") == "plain"
    assert redact_sensitive_data(None) is None
