import pytest

SAMPLE_PAYLOAD = (
    "00020101021229300012D156000000000510A93FO3230Q31280012D156000000010308"
    "12345678520441115802CN5914BEST TRANSPORT6007BEIJING64200002ZH0104最佳运"
    "输0202北京540523.7253031565502016233030412340603***0708A60086670902ME91"
    "320016A0112233449988770708123456786304A13A"
)

# Payload Format Indicator plus a single template at tag 91.
TEMPLATE_PAYLOAD = "00020191320016A01122334499887707081234567863044D32"


@pytest.fixture
def sample_payload() -> str:
    return SAMPLE_PAYLOAD


@pytest.fixture
def template_payload() -> str:
    return TEMPLATE_PAYLOAD
