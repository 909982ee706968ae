"""Structured-output schemas sent to the model.

Field names are the wire contract shared with every provider.
"""

LISTING_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "title": {
            "type": "STRING",
            "description": "SEO optimized product title for Amazon/Shopify (max 200 chars).",
        },
        "bullets": {
            "type": "ARRAY",
            "items": {"type": "STRING"},
            "description": "5 compelling bullet points highlighting features and benefits.",
        },
        "description": {
            "type": "STRING",
            "description": "HTML formatted product description (use <p>, <b>, <ul> tags).",
        },
        "keywords": {
            "type": "ARRAY",
            "items": {"type": "STRING"},
            "description": "List of 10 backend search keywords.",
        },
        "suggestedPrice": {
            "type": "STRING",
            "description": "A suggested price range based on the product type (e.g., '$20 - $30').",
        },
    },
    "required": ["title", "bullets", "description", "keywords", "suggestedPrice"],
}

CONCEPTS_SCHEMA = {
    "type": "ARRAY",
    "items": {"type": "STRING"},
}

STORYBOARD_SCHEMA = {
    "type": "ARRAY",
    "items": {
        "type": "OBJECT",
        "properties": {
            "sceneNumber": {"type": "INTEGER"},
            "startFramePrompt": {
                "type": "STRING",
                "description": (
                    "Highly detailed description of the environment/scene setup "
                    "(80+ words), NO product visible."
                ),
            },
            "endFramePrompt": {
                "type": "STRING",
                "description": (
                    "Highly detailed description of the same scene but now "
                    "containing the product (80+ words)."
                ),
            },
            "videoMotionPrompt": {
                "type": "STRING",
                "description": (
                    "Prompt describing the action/movement that happens between "
                    "the start and end frame."
                ),
            },
        },
        "required": ["sceneNumber", "startFramePrompt", "endFramePrompt", "videoMotionPrompt"],
    },
}
