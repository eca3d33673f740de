import pytest

from nl2sql_guard.execute.errors import (
    AmbiguousColumn,
    ColumnNotFound,
    QuoteSyntax,
    Timeout,
    classify_error,
    error_message,
    is_ambiguous_column,
    is_column_not_found,
    is_quote_syntax_error,
    is_timeout,
)


class _DriverError(Exception):
    def __init__(self, message):
        super().__init__(message)
        self.message = message


class _Unprintable:
    def __str__(self):
        raise RuntimeError("boom")


def test_invalid_identifier_is_column_not_found():
    assert classify_error("invalid identifier 'FOO'") == ColumnNotFound(missing_columns=("FOO",))


def test_multiple_invalid_identifiers_are_deduplicated_in_order():
    msg = (
        "SQL compilation error: error line 1 at position 7 invalid identifier 'B'; "
        "Invalid identifier \"A\"; invalid identifier 'B'"
    )

    assert is_column_not_found(msg).missing_columns == ("B", "A")


def test_column_not_found_fallback_strips_quotes():
    assert is_column_not_found('column "total_sales" not found').missing_columns == (
        "total_sales",
    )


def test_ambiguous_column_extracts_quoted_names():
    result = classify_error('ambiguous column name "id"')

    assert result == AmbiguousColumn(columns=("id",))


def test_ambiguous_column_without_quotes_uses_placeholder():
    assert is_ambiguous_column("Column reference is AMBIGUOUS: id").columns == ("(unknown)",)


def test_statement_timeout_preserves_message():
    msg = "Statement timeout: query exceeded 30s"

    assert classify_error(msg) == Timeout(message=msg)


def test_generic_timeout_from_exception():
    assert is_timeout(TimeoutError("connection TIMEOUT after 5s")).message == (
        "connection TIMEOUT after 5s"
    )


def test_unrecognized_token_needs_single_quotes():
    result = is_quote_syntax_error('unrecognized token: "\'Technology"')

    assert result == QuoteSyntax(message='unrecognized token: "\'Technology"', needs_single_quotes=True)


def test_no_such_column_with_value_like_name_is_quote_syntax():
    assert is_quote_syntax_error('no such column: "Technology"').needs_single_quotes


def test_no_such_column_with_all_caps_name_is_not_quote_syntax():
    assert is_quote_syntax_error("no such column: 'TOTAL_SALES'") is None


def test_no_such_column_with_lowercase_name_is_not_quote_syntax():
    assert is_quote_syntax_error("no such column: 'region'") is None


def test_pascal_case_identifier_is_misclassified_as_literal():
    # Known limitation: real PascalCase columns look like literal values.
    assert is_quote_syntax_error('no such column: "OrderDate"') is not None


def test_syntax_error_near_double_quote():
    assert is_quote_syntax_error('near "Technology": syntax error').needs_single_quotes


def test_syntax_error_without_double_quote_is_unclassified():
    assert classify_error("near FROM: syntax error") is None


def test_retryable_flags():
    assert ColumnNotFound(("a",)).retryable
    assert AmbiguousColumn(("a",)).retryable
    assert QuoteSyntax("m").retryable
    assert not Timeout("m").retryable


def test_message_attribute_and_mapping_are_read():
    assert error_message(_DriverError("invalid identifier 'X'")) == "invalid identifier 'X'"
    assert error_message({"message": "ambiguous column"}) == "ambiguous column"
    assert classify_error({"message": "invalid identifier 'X'"}) == ColumnNotFound(("X",))


@pytest.mark.parametrize("err", [None, "", 0, {}, [], object(), _Unprintable(), {"message": None}])
@pytest.mark.parametrize(
    "classifier",
    [is_column_not_found, is_ambiguous_column, is_timeout, is_quote_syntax_error, classify_error],
)
def test_malformed_inputs_return_no_match(classifier, err):
    assert classifier(err) is None
