"""Tests for action results and error classification."""

import pytest
from botocore.exceptions import ClientError
from django.db import DatabaseError

from cloudstack.apps.files.exceptions import QuotaExceededError
from cloudstack.apps.files.models import File
from cloudstack.results import (
    ActionError,
    ActionResult,
    ErrorKind,
    classify_error,
    server_action,
)


def test_success_result_is_ok():
    """Test a successful result carries its value and no error."""
    result = ActionResult.success([1, 2])

    assert result.ok
    assert result.value == [1, 2]
    assert result.error is None
    assert result.message == ''


def test_failure_result_may_carry_value():
    """Test a failed result keeps its fallback value."""
    result = ActionResult.failure(ErrorKind.NOT_FOUND, 'missing', value=0)

    assert not result.ok
    assert result.error is ErrorKind.NOT_FOUND
    assert result.message == 'missing'
    assert result.value == 0


@pytest.mark.parametrize(('error', 'kind'), [
    (File.DoesNotExist('gone'), ErrorKind.NOT_FOUND),
    (QuotaExceededError(10, 8, 5), ErrorKind.QUOTA_EXCEEDED),
    (DatabaseError('locked'), ErrorKind.PROVIDER_FAILURE),
    (ActionError('generic'), ErrorKind.PROVIDER_FAILURE),
])
def test_classify_error(error, kind):
    """Test exceptions map onto their failure category."""
    assert classify_error(error) is kind


def test_server_action_passes_result_through():
    """Test the decorator leaves successful results untouched."""
    @server_action
    def action():
        return ActionResult.success('done')

    assert action().value == 'done'


def test_server_action_converts_provider_errors():
    """Test storage client errors become provider failures."""
    @server_action
    def action():
        raise ClientError(
            {'Error': {'Code': '500', 'Message': 'boom'}},
            'PutObject',
        )

    result = action()

    assert result.error is ErrorKind.PROVIDER_FAILURE
    assert 'boom' in result.message
    assert result.value is None


def test_server_action_does_not_hide_programming_errors():
    """Test unexpected exceptions still propagate."""
    @server_action
    def action():
        raise TypeError('bug')

    with pytest.raises(TypeError):
        action()
