"""
SalesDesk Backend — Services Layer
===================================

Business logic between the routes (HTTP) and the stores (SQL).

Service Inventory:
    - CompanyService: GST uniqueness, delete protection, bulk delete, stats
    - ItemService:    HSN uniqueness, delete protection, bulk delete, stats
    - SalesService:   company/item reference checks, enriched reads
    - UserService:    registration, login, profile, password change

Services raise `salesdesk.exceptions` types; they never build HTTP
responses and never write SQL.
"""
