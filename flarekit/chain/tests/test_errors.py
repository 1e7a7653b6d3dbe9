"""Tests for error classification."""
import pytest

from flarekit.chain.errors import (
    AccountNotActivatedError,
    ContractError,
    ErrorHandler,
    FlareKitError,
    LedgerError,
    NetworkError,
    ValidationError,
)


@pytest.fixture
def handler():
    return ErrorHandler()


@pytest.mark.parametrize("message,category", [
    ("429 Too Many Requests", "rate_limit"),
    ("execution reverted", "contract"),
    ("Connection refused", "network"),
    ("invalid params", "validation"),
    ("something odd", "unknown"),
])
def test_classify(handler, message, category):
    assert handler.classify_error(Exception(message)) == category


def test_wrap_keeps_flarekit_errors(handler):
    error = ValidationError("bad")
    assert handler.wrap(error, "Op") is error


@pytest.mark.parametrize("message,expected", [
    ("Read timed out", NetworkError),
    ("rate limit exceeded", NetworkError),
    ("execution reverted", ContractError),
    ("weird", ContractError),
])
def test_wrap(handler, message, expected):
    wrapped = handler.wrap(Exception(message), "Op")
    assert isinstance(wrapped, expected)
    assert str(wrapped) == f"Op failed: {message}"


def test_ledger_error_carries_result_code():
    error = AccountNotActivatedError("not found", result_code="actNotFound")
    assert isinstance(error, LedgerError)
    assert isinstance(error, FlareKitError)
    assert error.result_code == "actNotFound"
