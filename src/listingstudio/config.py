"""Configuration management."""

import os
from pydantic import BaseModel, Field
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


class Config(BaseModel):
    """Application configuration."""

    # API Keys
    gemini_api_key: str = Field(
        default_factory=lambda: os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY", ""),
        description="Gemini API key"
    )
    anthropic_api_key: str = Field(
        default_factory=lambda: os.getenv("ANTHROPIC_API_KEY", ""),
        description="Anthropic API key (substitute text provider)"
    )
    google_cloud_project: str = Field(
        default_factory=lambda: os.getenv("GOOGLE_CLOUD_PROJECT", ""),
        description="Google Cloud project ID (Imagen via Vertex AI)"
    )

    # Providers
    text_provider: str = Field(
        default_factory=lambda: os.getenv("LISTING_STUDIO_TEXT_PROVIDER", "gemini"),
        description="Provider for listing, concept and storyboard text: 'gemini' or 'anthropic'"
    )
    image_provider: str = Field(
        default_factory=lambda: os.getenv("LISTING_STUDIO_IMAGE_PROVIDER", "gemini"),
        description="Provider for scene images: 'gemini' or 'imagen'"
    )

    # Model settings
    text_model: str = Field(
        default_factory=lambda: os.getenv("LISTING_STUDIO_TEXT_MODEL", "gemini-2.5-flash"),
        description="Gemini model for text and vision"
    )
    image_model: str = Field(
        default_factory=lambda: os.getenv("LISTING_STUDIO_IMAGE_MODEL", "gemini-2.5-flash-image"),
        description="Gemini model for scene images"
    )
    anthropic_model: str = Field(
        default_factory=lambda: os.getenv("LISTING_STUDIO_ANTHROPIC_MODEL", "claude-sonnet-4-20250514"),
        description="Claude model when text_provider is 'anthropic'"
    )
    imagen_model: str = Field(
        default="imagen-3.0-generate-001",
        description="Imagen model when image_provider is 'imagen'"
    )

    # Generation settings
    max_retries: int = Field(
        default=1,
        description="Attempts per model call (1 means a single request, no retry)",
        ge=1,
    )
    storyboard_scenes: int = Field(default=5, description="Scenes per storyboard", ge=1)
    scene_image_style: str = Field(
        default=" cinematic lighting, photorealistic, 4k, aspect ratio 16:9",
        description="Style directives appended to every frame prompt"
    )
    default_tone: str = Field(default="Persuasive", description="Listing tone used by automation")
    default_context: str = Field(
        default="Focus on viral features",
        description="Listing context used by automation"
    )

    class Config:
        """Pydantic config."""
        frozen = False

    def validate_required(self) -> None:
        """Validate that credentials for the selected providers are set.

        Raises:
            ValueError: If a provider is unknown or its credentials are missing.
        """
        missing: list[str] = []

        if self.text_provider not in ("gemini", "anthropic"):
            raise ValueError(f"Unknown text provider: {self.text_provider}")
        if self.image_provider not in ("gemini", "imagen"):
            raise ValueError(f"Unknown image provider: {self.image_provider}")

        if "gemini" in (self.text_provider, self.image_provider) and not self.gemini_api_key:
            missing.append("GEMINI_API_KEY")
        if self.text_provider == "anthropic" and not self.anthropic_api_key:
            missing.append("ANTHROPIC_API_KEY")
        if self.image_provider == "imagen" and not self.google_cloud_project:
            missing.append("GOOGLE_CLOUD_PROJECT")

        if missing:
            raise ValueError(
                f"Missing required configuration: {', '.join(missing)}. "
                "Set the corresponding environment variables."
            )


# Global config instance
config = Config()
