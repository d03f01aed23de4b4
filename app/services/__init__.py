# Services package.
#
# Each module exposes a focused set of async functions that encapsulate
# business logic and database access for a single domain aggregate:
#
#   article_service  - CRUD, visibility rules and feeds for Article
#   like_service     - idempotent like/unlike for Article
#   user_service     - sign-up and credential checks for User
#
# All service functions accept an AsyncSession as their first argument
# so that the router layer controls the transaction boundary via the
# ``get_db`` dependency.
