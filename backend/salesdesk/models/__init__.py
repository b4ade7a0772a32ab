"""
SalesDesk Backend — ORM Models
===============================

Importing this package registers every table on `Base.metadata`, which is
what Alembic autogenerate and the test suite's create_all() read.

Tables:
    company  ← referenced by sales.company_id
    item     ← referenced by sales.item_id
    sales
    users
"""

from salesdesk.models.company import Company
from salesdesk.models.item import Item
from salesdesk.models.sales import Sales
from salesdesk.models.user import User

__all__ = ["Company", "Item", "Sales", "User"]
