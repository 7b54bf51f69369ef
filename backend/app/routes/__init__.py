# Routes package init
"""
PerkBoard Backend - API Routes Package
========================================

Route Inventory:
    - auth.py:    POST /auth/session, GET /auth/logout
    - posts.py:   GET /api/posts, GET /api/posts/{id}, POST /api/newpost,
                  POST /api/savepost, POST /api/unsavepost, GET /api/searchPosts
    - users.py:   GET /api/getuser, GET /api/users/{id}[/savedpostIDs|/savedposts|/posts],
                  POST /api/follow, POST /api/unfollow
    - perks.py:   GET /api/perks, GET /api/searchPerks,
                  GET /api/perkDefs (admin), POST /api/updatePerks (admin)
    - health.py:  GET /, GET /health

Routes stay thin: pull data from the request, call a service, return its result.
"""
