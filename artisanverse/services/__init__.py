"""
High-level use cases for the Artisanverse API.

Each service module orchestrates the RecordStore to implement business rules
(product listing, wishlist, artisan profiles, orders, analytics).

Routers (FastAPI endpoints) call these services instead of manipulating the
collections directly.
"""
