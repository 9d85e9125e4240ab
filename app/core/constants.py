"""
Core constants used across the application. Keep these simple and documented.
"""

# Poster shown by clients when a provider has no artwork for an item
PLACEHOLDER_POSTER: str = "/placeholder-poster.svg"

# Inline markers the chat model uses to embed recommendation cards in its text
REC_OPEN: str = "[REC]"
REC_CLOSE: str = "[/REC]"
REC_FIELD_SEPARATOR: str = "###"
REC_DEFAULT_YEAR: str = "N/A"
REC_DEFAULT_REASON: str = "Great pick!"

# Mid-stream failures are appended to the chat text as [ERROR]{json}[/ERROR]
ERROR_OPEN: str = "[ERROR]"
ERROR_CLOSE: str = "[/ERROR]"

# Cast members returned with media details
DETAILS_CAST_LIMIT: int = 5
