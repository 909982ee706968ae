"""listing-studio: AI product listings and ad storyboards."""

__version__ = "0.1.0"
