"""
Unit constants: external unit-of-measure synonyms to canonical units.

Keys are upper-cased before lookup.
Version: 1.0.0
"""

UNIT_ATTRIBUTE_KEY: str = "unit_type"

UOM_MAPPING: dict[str, str] = {
    "UNIT": "UNIT",
    "UNITS": "UNIT",
    "EA": "UNIT",
    "EACH": "UNIT",
    "PC": "UNIT",
    "PCS": "UNIT",
    "PIECE": "UNIT",
    "PIECES": "UNIT",
    "BOX": "BOX",
    "BOXES": "BOX",
    "BX": "BOX",
    "CASE": "CASE",
    "CASES": "CASE",
    "CS": "CASE",
    "PALLET": "PALLET",
    "PALLETS": "PALLET",
    "PLT": "PALLET",
    "FOOT": "FOOT",
    "FEET": "FOOT",
    "FT": "FOOT",
    "YARD": "YARD",
    "YARDS": "YARD",
    "YD": "YARD",
    "POUND": "POUND",
    "POUNDS": "POUND",
    "LB": "POUND",
    "LBS": "POUND",
}
