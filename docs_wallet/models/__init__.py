# Models package init
"""
Docs Wallet Backend — ORM Models
=================================

Importing this package registers every table with Base.metadata, which
Alembic autogenerate and the test suite's create_all() rely on.

Table Inventory:
    - users:   one row per registered identity (email is unique)
    - images:  one row per uploaded file (url + storage handle + owner)
    - works:   free-form records owned by an identity
"""

from docs_wallet.models.image import Image
from docs_wallet.models.user import User
from docs_wallet.models.work import Work

__all__ = ["Image", "User", "Work"]
