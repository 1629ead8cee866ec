"""
api - FastAPI backend for the loot filter rarity extractor.

Provides RESTful API endpoints for:
- Parsing raw filter text
- Registering, parsing and inspecting filter files
- Rarity source selection and card rarity resolution
"""

__version__ = "0.1.0"
