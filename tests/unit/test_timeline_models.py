"""Tests for the timeline event model and timestamp parsing."""

from datetime import UTC, datetime
from decimal import Decimal

import pytest
from pydantic import ValidationError

from trexport.timeline import (
    Amount,
    ProcessingStats,
    TimestampParseError,
    TransactionEvent,
    parse_timestamp,
)


class TestParseTimestamp:
    """Trade Republic timestamps use ``+0000`` instead of ``Z``."""

    def test_plus_zero_offset_matches_zulu(self):
        assert parse_timestamp("2025-07-16T12:37:00.707+0000") == parse_timestamp(
            "2025-07-16T12:37:00.707Z"
        )

    def test_parsed_value_is_utc(self):
        parsed = parse_timestamp("2025-07-16T12:37:00.707+0000")

        assert parsed == datetime(2025, 7, 16, 12, 37, 0, 707000, tzinfo=UTC)
        assert parsed.utcoffset().total_seconds() == 0

    def test_other_offsets_are_converted(self):
        parsed = parse_timestamp("2025-07-16T14:37:00.707+02:00")

        assert parsed == datetime(2025, 7, 16, 12, 37, 0, 707000, tzinfo=UTC)

    def test_missing_offset_is_rejected(self):
        with pytest.raises(TimestampParseError):
            parse_timestamp("2025-07-16T12:37:00.707")

    @pytest.mark.parametrize("value", ["", None, "yesterday", "2025-13-45T99:00:00Z"])
    def test_invalid_values_raise(self, value):
        with pytest.raises(TimestampParseError):
            parse_timestamp(value)

    def test_parse_error_is_value_error(self):
        with pytest.raises(ValueError):
            parse_timestamp("not a timestamp")


class TestTransactionEventFromApi:
    def test_full_item(self):
        event = TransactionEvent.from_api(
            {
                "id": "abc-123",
                "title": "Apple",
                "subtitle": "Buy order",
                "timestamp": "2025-07-16T12:37:00.707+0000",
                "eventType": "ORDER_EXECUTED",
                "amount": {"value": -100.5, "currency": "EUR"},
                "status": "EXECUTED",
                "details": {"sections": []},
            }
        )

        assert event.id == "abc-123"
        assert event.title == "Apple"
        assert event.subtitle == "Buy order"
        assert event.event_type == "ORDER_EXECUTED"
        assert event.amount.value == Decimal("-100.5")
        assert event.amount.currency == "EUR"
        assert event.status == "EXECUTED"
        assert event.details == {"sections": []}
        assert event.has_amount

    def test_missing_optional_fields_are_none(self):
        event = TransactionEvent.from_api({"id": "only-id"})

        assert event.title is None
        assert event.timestamp is None
        assert event.amount is None
        assert event.details is None
        assert not event.has_amount

    def test_unknown_fields_are_ignored(self):
        event = TransactionEvent.from_api({"id": "x", "icon": "logos/x.png", "badge": 3})

        assert event.id == "x"

    def test_numeric_id_is_stringified(self):
        assert TransactionEvent.from_api({"id": 42}).id == "42"

    def test_numeric_text_fields_are_stringified(self):
        event = TransactionEvent.from_api({"id": "x", "title": 7, "timestamp": 1752669420707, "status": 1.5})

        assert event.title == "7"
        assert event.timestamp == "1752669420707"
        assert event.status == "1.5"

    def test_amount_value_defaults_to_zero(self):
        event = TransactionEvent.from_api({"id": "x", "amount": {"currency": "EUR", "value": None}})

        assert event.has_amount
        assert event.amount.value == Decimal(0)
        assert str(event.amount) == "0.00 EUR"

    def test_null_amount_means_no_amount(self):
        assert not TransactionEvent.from_api({"id": "x", "amount": None}).has_amount

    def test_missing_id_raises(self):
        with pytest.raises(ValidationError):
            TransactionEvent.from_api({"title": "No id"})

    def test_non_object_item_raises(self):
        with pytest.raises(TypeError):
            TransactionEvent.from_api("garbage")

    def test_bad_amount_raises(self):
        with pytest.raises(ValidationError):
            TransactionEvent.from_api({"id": "x", "amount": {"value": "lots", "currency": "EUR"}})

    def test_amount_must_be_object(self):
        with pytest.raises(TypeError):
            TransactionEvent.from_api({"id": "x", "amount": 12})


class TestTransactionEvent:
    def test_epoch_seconds(self):
        event = TransactionEvent(id="x", timestamp="2025-07-16T12:37:00.707+0000")

        expected = int(datetime(2025, 7, 16, 12, 37, tzinfo=UTC).timestamp())
        assert event.epoch_seconds() == expected

    def test_epoch_seconds_without_timestamp_raises(self):
        with pytest.raises(TimestampParseError):
            TransactionEvent(id="x").epoch_seconds()

    def test_attach_details_keeps_payload_untouched(self):
        event = TransactionEvent(id="x")
        payload = [{"type": "table", "data": [{"title": "Fee", "detail": {"text": "1,00 €"}}]}]

        event.attach_details(payload)

        assert event.details is payload

    def test_str(self):
        event = TransactionEvent(
            id="x",
            title="Dividend",
            timestamp="2025-07-16T12:37:00.707+0000",
            event_type="CREDIT",
            amount=Amount(value=Decimal("12.3"), currency="EUR"),
        )

        assert str(event) == (
            "TransactionEvent(id='x', title='Dividend', "
            "timestamp='2025-07-16T12:37:00.707+0000', event_type='CREDIT', "
            "amount=12.30 EUR)"
        )

    def test_populate_by_wire_name(self):
        event = TransactionEvent.model_validate({"id": "x", "eventType": "CREDIT"})

        assert event.event_type == "CREDIT"


class TestAmount:
    def test_str_has_two_decimals(self):
        assert str(Amount(value=Decimal("100.5"), currency="EUR")) == "100.50 EUR"

    def test_value_is_decimal(self):
        amount = Amount.from_api({"value": 0.1, "currency": "EUR"})

        assert isinstance(amount.value, Decimal)


class TestProcessingStats:
    def test_str(self):
        stats = ProcessingStats(total_events=5, details_requested=3, details_received=2)

        assert str(stats) == "Events: 5, Details requested: 3, Details received: 2"

    def test_defaults_to_zero(self):
        assert str(ProcessingStats()) == "Events: 0, Details requested: 0, Details received: 0"
