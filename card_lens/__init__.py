"""
Card Lens - Character Card Metadata Extraction

Recovers character, world and story-plot cards embedded in the
text chunks of PNG images, and exposes them over a small FastAPI service.
"""

__version__ = "0.1.0"
