"""
SalesDesk Backend — API Routes Package
=======================================

Route Inventory:
    - health.py:   GET /, GET /health                        (public)
    - auth.py:     /auth/register, /auth/login               (public)
                   /auth/profile, /auth/change-password,
                   DELETE /auth/{id}                         (token)
    - company.py:  /company, /company/stats,
                   /company/bulk-delete, /company/{id}       (token)
    - item.py:     /item, /item/stats, /item/hsn/{hsnCode},
                   /item/bulk-delete, /item/{id}             (token)
    - sales.py:    /sales, /sales/{id}                       (token)

Routes stay thin: read the request, call a service, wrap the result in the
response envelope. Business rules live in services.
"""
