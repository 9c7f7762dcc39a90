"""
System default categories shared by every user.
Seeded by ``flask spendee-seed``; rows have no owner and cannot be edited.
"""

GENERAL_CATEGORY = "General"
MPESA_CATEGORY = "M-Pesa"
UNCATEGORIZED_LABEL = "Uncategorized"

GENERAL_COLOR = "#808080"
GENERAL_ICON = "fa-folder"
GENERAL_DESCRIPTION = "Default category for uncategorized transactions"

# (name, color, icon)
DEFAULT_CATEGORIES = [
    (GENERAL_CATEGORY, GENERAL_COLOR, GENERAL_ICON),
    ("Food & Dining", "#FF7043", "fa-utensils"),
    ("Groceries", "#8BC34A", "fa-shopping-basket"),
    ("Transportation", "#42A5F5", "fa-bus"),
    ("Rent", "#5C6BC0", "fa-home"),
    ("Bills & Utilities", "#FFA726", "fa-file-invoice"),
    ("Shopping", "#EC407A", "fa-shopping-bag"),
    ("Entertainment", "#AB47BC", "fa-film"),
    ("Health", "#26A69A", "fa-heartbeat"),
    ("Education", "#7E57C2", "fa-graduation-cap"),
    ("Salary", "#66BB6A", "fa-money-bill-wave"),
    ("Freelance", "#9CCC65", "fa-laptop"),
    (MPESA_CATEGORY, "#43A047", "fa-mobile-alt"),
]
