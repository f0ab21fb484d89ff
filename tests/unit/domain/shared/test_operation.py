"""Unit tests for Operation parsing."""

import pytest

from jobarchive.domain.shared.authorization.operation import Operation
from jobarchive.domain.shared.error import UnrecognizedOperationError, ValidationError


class TestOperationParse:
    @pytest.mark.parametrize("name", [None, ""])
    def test_missing_name_means_list(self, name: str | None) -> None:
        assert Operation.parse(name) is Operation.LIST

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("toggle", Operation.TOGGLE),
            ("create", Operation.CREATE),
            ("paste", Operation.PASTE),
            ("editAll", Operation.EDIT_ALL),
            ("copyAll", Operation.COPY_ALL),
        ],
    )
    def test_known_names(self, name: str, expected: Operation) -> None:
        assert Operation.parse(name) is expected

    def test_unknown_name_raises(self) -> None:
        with pytest.raises(UnrecognizedOperationError) as exc_info:
            Operation.parse("explode")

        assert exc_info.value.name == "explode"
        assert exc_info.value.code == "unrecognized_operation"
        assert exc_info.value.field == "act"
        assert isinstance(exc_info.value, ValidationError)

    def test_names_are_case_sensitive(self) -> None:
        with pytest.raises(UnrecognizedOperationError):
            Operation.parse("Toggle")
