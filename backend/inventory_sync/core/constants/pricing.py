"""
Pricing constants: attribute spellings searched for a unit price.

Exact keys are tried in this order before the substring scan.
Version: 1.0.0
"""

PRICE_ATTRIBUTE_KEYS: tuple[str, ...] = (
    "price", "Price", "PRICE",
    "unit_price", "Unit_Price", "Unit Price", "UNIT_PRICE",
    "cost", "Cost", "COST",
    "unit_cost", "Unit_Cost", "Unit Cost", "UNIT_COST",
    "price_per_unit", "Price_Per_Unit", "PRICE_PER_UNIT",
    "retail_price", "Retail_Price", "RETAIL_PRICE",
    "sale_price", "Sale_Price", "SALE_PRICE",
)

# Substrings that mark an attribute as price-like during the fallback scan
PRICE_KEY_HINTS: tuple[str, ...] = ("price", "cost")

DEFAULT_PRICE: float = 0.0
