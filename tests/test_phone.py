import pytest

from partylink.services.phone import clean_optional_phone, normalize_sg_phone, phone_digits, whatsapp_digits


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("91234567", "+6591234567"),
        ("6591234567", "+6591234567"),
        ("+65 9123 4567", "+6591234567"),
        ("9123-4567", "+6591234567"),
        ("", ""),
        ("123", "123"),
        ("+1 415 555 0100", "+14155550100"),
        ("abc", ""),
    ],
)
def test_normalize_sg_phone(raw, expected):
    assert normalize_sg_phone(raw) == expected


def test_unrecognised_input_is_returned_verbatim():
    # 9 digits, no leading plus: not ours to guess
    assert normalize_sg_phone("912 345 678") == "912 345 678"


def test_no_prefix_validation():
    assert normalize_sg_phone("12345678") == "+6512345678"


def test_clean_optional_phone():
    assert clean_optional_phone(None) is None
    assert clean_optional_phone("   ") is None
    assert clean_optional_phone(" 81234567 ") == "+6581234567"


def test_phone_digits_for_display():
    assert phone_digits("+6581234567") == "81234567"
    assert phone_digits("+14155550100") == "14155550100"
    assert phone_digits(None) == ""


def test_whatsapp_digits_keep_country_code():
    assert whatsapp_digits("+6581234567") == "6581234567"
