# pos_api/models/registry.py
# Importing this module registers every table on Base.metadata.

from pos_api.models.categories import Category
from pos_api.models.products import Product
from pos_api.models.customers import Customer
from pos_api.models.users import User
from pos_api.models.sales import Sale
from pos_api.models.sale_items import SaleItem

__all__ = ["Category", "Product", "Customer", "User", "Sale", "SaleItem"]
