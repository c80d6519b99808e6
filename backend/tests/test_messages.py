import pytest

from helios.schemas.messages import BUNDLE_KEYS, DeviceRequest, SolarDay, error_message, hello_message


@pytest.mark.parametrize(
    "payload, expected",
    [
        ({"REQ": 1, "OFFSET": 2}, 2),
        ({"REQ": 1, "OFFSET": -3}, -3),
        ({"REQ": 1, "OFFSET": 2.7}, 2),
        ({"REQ": 1, "OFFSET": -2.7}, -2),
        ({"REQ": 1}, 0),
        ({"REQ": 1, "OFFSET": "5"}, 0),
        ({"REQ": 1, "OFFSET": None}, 0),
        ({"REQ": 1, "OFFSET": True}, 0),
        ({"REQ": 1, "OFFSET": float("nan")}, 0),
    ],
)
def test_offset_coercion(payload, expected):
    assert DeviceRequest.model_validate(payload).offset == expected


def test_request_marker():
    assert DeviceRequest.model_validate({"REQ": 1}).requested is True
    assert DeviceRequest.model_validate({"REQ": True}).requested is True
    assert DeviceRequest.model_validate({"REQ": 0}).requested is False
    assert DeviceRequest.model_validate({"OFFSET": 1}).requested is False


def test_unknown_keys_are_ignored():
    request = DeviceRequest.model_validate({"REQ": 1, "OFFSET": 1, "VERSION": "2.0"})
    assert request.offset == 1


def test_solar_day_fields():
    day = SolarDay(date_label="Fri Jun 21", dawn="04:00", sunrise="04:43", sunset="21:33", dusk="22:20")
    assert day.to_fields("_P1") == {
        "DATE_P1": "Fri Jun 21",
        "DAWN_P1": "04:00",
        "SUNRISE_P1": "04:43",
        "SUNSET_P1": "21:33",
        "DUSK_P1": "22:20",
    }


def test_bundle_key_set():
    assert len(BUNDLE_KEYS) == 16
    assert "CENTER" in BUNDLE_KEYS
    assert "SUNRISE_M1" in BUNDLE_KEYS


def test_handshake_and_error_messages():
    assert hello_message() == {"HELLO": 1}
    assert error_message() == {"ERROR": "Calc error"}


def test_field_names_are_not_request_markers():
    request = DeviceRequest.model_validate({"requested": True, "offset": 3})
    assert request.requested is False
    assert request.offset == 0
