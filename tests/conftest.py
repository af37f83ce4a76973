"""Pytest configuration and shared fixtures."""
import pytest

import formstate.config as config_module


@pytest.fixture(autouse=True)
def restore_default_config():
    """Restore the thread's default FormConfig after each test."""
    original = getattr(config_module._default_config_context, 'value', None)

    yield

    if original is None:
        config_module.reset_default_config()
    else:
        config_module.set_default_config(original)


@pytest.fixture
def submitted():
    """Collects every mapping passed to a submit handler."""
    return []


@pytest.fixture
def discount_initial():
    """Initial data for an order-discount form."""
    return {
        "inputType": "",
        "discountValue": "",
        "array": [
            {"key": "DISCOUNT_CODE4000", "value": "15"},
            {"key": "DISCOUNT_CODE4020", "value": "20"},
            {"key": "DISCOUNT_CODE4020", "value": "99"},
        ],
        "note": "",
    }


@pytest.fixture
def profile_initial():
    """Initial data for a simple profile form with a multi-select field."""
    return {"name": "Ada", "email": "ada@example.com", "tags": [1, 2, 3]}
