"""Tests for paver.utils.terraform.parsing."""

import pytest

from paver.utils.terraform.errors import ExecutorError, TerraformParseError
from paver.utils.terraform.parsing import is_no_state, parse_version, strip_one_newline


@pytest.mark.parametrize(
    "text,expected",
    [
        ("Terraform v0.11.7\n", "0.11.7"),
        ("Terraform v1.5.0\non linux_amd64\n", "1.5.0"),
        ("Terraform v0.11.7\n\nYour version is out of date! 0.12.0 is available", "0.11.7"),
    ],
)
def test_parse_version(text, expected):
    assert parse_version(text) == expected


@pytest.mark.parametrize("text", ["", "Terraform vX\n", "version 1.2", "1a2b3"])
def test_parse_version_fails(text):
    with pytest.raises(TerraformParseError, match="could not be parsed"):
        parse_version(text)


def test_parse_error_is_an_executor_error():
    assert issubclass(TerraformParseError, ExecutorError)


@pytest.mark.parametrize(
    "text,expected",
    [("bar\n", "bar"), ("bar\n\n", "bar\n"), ("bar", "bar"), ("", ""), ("bar \n", "bar ")],
)
def test_strip_one_newline(text, expected):
    assert strip_one_newline(text) == expected


def test_is_no_state():
    assert is_no_state("No state.")
    assert not is_no_state("No state.\n")
    assert not is_no_state('resource "x" {}')
