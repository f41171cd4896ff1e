from __future__ import annotations

from pathlib import Path

import pytest

from core.errors import InvalidArgumentError, JobsClientError
from core.validation import require_non_empty


def test_returns_value_when_present() -> None:
    path = Path("users.json")

    assert require_non_empty("connection id", "con_1") == "con_1"
    assert require_non_empty("users file", path) is path
    assert require_non_empty("limit", 0) == 0


@pytest.mark.parametrize("value", [None, ""])
def test_rejects_missing_values(value: object) -> None:
    with pytest.raises(InvalidArgumentError) as excinfo:
        require_non_empty("connection id", value)

    assert str(excinfo.value) == "'connection id' cannot be null!"


def test_invalid_argument_is_value_error() -> None:
    with pytest.raises(ValueError):
        require_non_empty("job id", None)
    assert issubclass(InvalidArgumentError, JobsClientError)
