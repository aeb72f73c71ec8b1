"""Shared BDD fixtures and step definitions for the Storefront."""

import pytest
from protean.exceptions import ValidationError
from pytest_bdd import then


@pytest.fixture()
def error():
    """Container for captured validation errors."""
    return {"exc": None}


@then("the cart action fails with a validation error")
def _(error):
    assert isinstance(error["exc"], ValidationError)
