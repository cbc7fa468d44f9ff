# Services package.
#
# Each module exposes a focused set of async functions that enforce the
# business rules for a single resource before delegating storage to the
# repositories:
#
#   user_service    : registration and lookup of User
#   post_service    : CRUD + topic links for Post, ownership checks
#   comment_service : CRUD for Comment, ownership checks
#   topic_service   : CRUD for Topic, unique names
#   auth_service    : token login and the current user
#
# All service functions accept an AsyncSession as their first argument
# so that the router layer controls the transaction boundary via the
# ``get_db`` dependency.  Mutating functions on owned resources also take
# the caller's ``Identity`` explicitly.  Failures are raised as the typed
# errors from ``forum.errors``; services never return None for "missing".
