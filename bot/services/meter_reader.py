"""
PM5 photo reader.

Asks an OpenAI vision model whether a photo shows a Concept2 PM5 monitor
and how many meters it reports as completed. The model is told to answer
with `<bool>, <int>` only (e.g. "true, 5000").
"""

import base64
import logging
from dataclasses import dataclass
from typing import Optional

from openai import AsyncOpenAI, OpenAIError

logger = logging.getLogger(__name__)


PROMPT = (
    "Analyze the following image. Determine if the image is a Concept2 PM5 and "
    "determine the completed number of meters shown in the picture. Do not get "
    "confused with predicted meters, only parse the actual completed meters. This "
    "is totaled on the screen for you. Do not total the meters yourself, look for "
    "the total on the screen (if the screen has View Detail in the top left, the "
    "top entry in the log is the total. It does not say total but interpret it as "
    "the total).\n"
    "Return nothing but a boolean representing if the image is a Concept2 PM5 "
    "separated by a comma with an integer representing the number of meters "
    "completed. Return the integer 0000 if this is not a Concept2 PM5."
)


class MeterReadingError(Exception):
    """The model reply could not be read, or the model call failed."""
    pass


@dataclass(frozen=True)
class MeterReading:
    is_pm5: bool
    meters: int

    @property
    def usable(self) -> bool:
        return self.is_pm5 and self.meters > 0


def parse_reading(text: str) -> MeterReading:
    """
    Parse a `<bool>, <int>` model reply.

    Raises:
        MeterReadingError: If the reply has a different shape
    """
    parts = [part.strip() for part in (text or "").strip().split(",")]
    if len(parts) != 2:
        raise MeterReadingError(f"Unexpected reply: {text!r}")

    flag, number = parts[0].lower(), parts[1].replace(" ", "")
    if flag not in ("true", "false"):
        raise MeterReadingError(f"Unexpected PM5 flag: {parts[0]!r}")
    try:
        meters = int(number)
    except ValueError:
        raise MeterReadingError(f"Unexpected meter value: {parts[1]!r}") from None

    return MeterReading(is_pm5=flag == "true", meters=meters)


class PhotoMeterReader:
    """
    Usage:
        reader = PhotoMeterReader(api_key, model="gpt-4o-mini")
        reading = await reader.read(image_bytes, "image/jpeg")
    """

    def __init__(
        self,
        api_key: Optional[str],
        model: str = "gpt-4o-mini",
        client: Optional[AsyncOpenAI] = None,
    ):
        self.model = model
        self._client = client or AsyncOpenAI(api_key=api_key)

    async def read(self, image: bytes, mime_type: str = "image/jpeg") -> MeterReading:
        """
        Read a monitor photo.

        Raises:
            MeterReadingError: If the model call fails or the reply is unreadable
        """
        data_url = f"data:{mime_type};base64,{base64.b64encode(image).decode('ascii')}"
        try:
            response = await self._client.chat.completions.create(
                model=self.model,
                messages=[
                    {
                        "role": "user",
                        "content": [
                            {"type": "text", "text": PROMPT},
                            {"type": "image_url", "image_url": {"url": data_url}},
                        ],
                    }
                ],
                temperature=0,
                max_tokens=20,
            )
        except OpenAIError as e:
            logger.error(f"Vision model call failed: {e}")
            raise MeterReadingError("Vision model call failed") from e

        text = (response.choices[0].message.content or "").strip()
        logger.info(f"Vision model reply: {text!r}")
        return parse_reading(text)
