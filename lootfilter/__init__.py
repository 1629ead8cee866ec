"""
lootfilter - divination card rarities from Path of Exile loot filters.

Provides:
- Filter parsing (TOC -> divination section -> tier blocks -> rarities)
- Filter header metadata and stable filter ids
- SQLite persistence of parsed rarities
- Orchestration of parsing, selection and rarity source merging
"""

__version__ = "0.1.0"
