"""
Storage adapters, one module per table.

Each module is a set of free async functions taking the request's
AsyncSession first. Stores never commit; the session scope in
`salesdesk.database` owns the transaction.
"""
