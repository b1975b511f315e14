"""
Tests for the PM5 photo reader.
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from openai import OpenAIError

from bot.services.meter_reader import (
    MeterReading,
    MeterReadingError,
    PhotoMeterReader,
    parse_reading,
)


def completion(text: str):
    message = SimpleNamespace(content=text)
    return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def fake_openai(reply=None, error=None) -> MagicMock:
    client = MagicMock()
    client.chat.completions.create = AsyncMock(
        return_value=completion(reply) if reply is not None else None,
        side_effect=error,
    )
    return client


class TestParseReading:

    @pytest.mark.parametrize("text, expected", [
        ("true, 5000", MeterReading(True, 5000)),
        ("True,12500", MeterReading(True, 12500)),
        ("  false, 0000 ", MeterReading(False, 0)),
        ("true, 21 097", MeterReading(True, 21097)),
    ])
    def test_valid_replies(self, text, expected):
        assert parse_reading(text) == expected

    @pytest.mark.parametrize("text", [
        "",
        "5000",
        "yes, 5000",
        "true, five thousand",
        "true, 5,000",
    ])
    def test_unreadable_replies(self, text):
        with pytest.raises(MeterReadingError):
            parse_reading(text)

    def test_usable(self):
        assert MeterReading(True, 5000).usable
        assert not MeterReading(False, 5000).usable
        assert not MeterReading(True, 0).usable


class TestPhotoMeterReader:

    @pytest.mark.asyncio
    async def test_sends_image_as_data_url(self):
        client = fake_openai("true, 5000")
        reader = PhotoMeterReader(None, model="vision-test", client=client)

        reading = await reader.read(b"\x89PNG", "image/png")

        assert reading == MeterReading(True, 5000)
        kwargs = client.chat.completions.create.await_args.kwargs
        assert kwargs["model"] == "vision-test"
        image_part = kwargs["messages"][0]["content"][1]
        assert image_part["image_url"]["url"].startswith("data:image/png;base64,")

    @pytest.mark.asyncio
    async def test_api_failure(self):
        reader = PhotoMeterReader(None, client=fake_openai(error=OpenAIError("down")))
        with pytest.raises(MeterReadingError):
            await reader.read(b"img")
