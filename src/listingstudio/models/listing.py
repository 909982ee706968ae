"""Product listing data model."""

import re
from typing import List
from pydantic import BaseModel, Field

BULLET_PREFIX = "• "
KEYWORD_SEPARATOR = ", "

_CLIPBOARD_PATTERN = re.compile(
    r"^TITLE: (?P<title>[^\n]*)\n"
    r"PRICE: (?P<price>[^\n]*)\n"
    r"\nFEATURES:\n(?P<features>.*?)\n"
    r"\nDESCRIPTION:\n(?P<description>.*)\n"
    r"\nKEYWORDS:\n?(?P<keywords>.*)$",
    re.DOTALL,
)


class Listing(BaseModel):
    """E-commerce product listing as produced by the model.

    Field aliases are the wire names of the structured response schema.
    """

    title: str = Field(..., description="SEO title", min_length=1, max_length=200)
    bullets: List[str] = Field(..., description="Feature bullet points (5 expected)")
    description: str = Field(..., description="HTML formatted description")
    keywords: List[str] = Field(..., description="Backend search keywords (10 expected)")
    suggested_price: str = Field(
        ..., alias="suggestedPrice", description="Suggested price range, e.g. '$20 - $30'"
    )

    class Config:
        """Pydantic config."""
        frozen = True
        populate_by_name = True

    def to_clipboard_text(self) -> str:
        """Render the listing as the plain-text block users paste into seller portals.

        Keywords must not contain ", " and the description must not contain a
        line that reads exactly "KEYWORDS:" for the text to parse back.
        """
        features = "\n".join(f"{BULLET_PREFIX}{bullet}" for bullet in self.bullets)
        text = (
            f"TITLE: {self.title}\n"
            f"PRICE: {self.suggested_price}\n"
            f"\n"
            f"FEATURES:\n"
            f"{features}\n"
            f"\n"
            f"DESCRIPTION:\n"
            f"{self.description}\n"
            f"\n"
            f"KEYWORDS:\n"
            f"{KEYWORD_SEPARATOR.join(self.keywords)}"
        )
        return text.strip()

    @classmethod
    def from_clipboard_text(cls, text: str) -> "Listing":
        """Parse text produced by `to_clipboard_text` back into a listing.

        Raises:
            ValueError: If a section is missing or out of order.
        """
        match = _CLIPBOARD_PATTERN.match(text.strip())
        if not match:
            raise ValueError("Text is not in listing clipboard format")

        bullets = []
        for line in match.group("features").splitlines():
            if not line:
                continue
            if line.startswith(BULLET_PREFIX):
                line = line[len(BULLET_PREFIX):]
            bullets.append(line)

        keywords_text = match.group("keywords")
        keywords = keywords_text.split(KEYWORD_SEPARATOR) if keywords_text else []

        return cls(
            title=match.group("title"),
            suggested_price=match.group("price"),
            bullets=bullets,
            description=match.group("description"),
            keywords=keywords,
        )
