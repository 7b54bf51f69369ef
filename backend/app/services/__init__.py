# Services package init
"""
PerkBoard Backend - Services Layer
====================================

What:  Business logic layer sitting between routes (HTTP) and database (persistence).
How:   Services receive a session per call, apply business rules, and return
       response schemas. Singletons are imported by routes.

Service Inventory:
    - perk_parser:    Pure parser for the *> / *< perk-definition text format
    - fuzzy:          RapidFuzz-backed approximate matching primitive
    - SearchService:  Fuzzy post/perk search with perk-id join and merge
    - PerkService:    Perk listing, definition file loading, upsert by name
    - PostService:    Post listing/creation and save/unsave counters
    - UserService:    Sign-in, profiles, follow graph, per-user post lists
"""
