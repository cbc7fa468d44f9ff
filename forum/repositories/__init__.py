# Repositories package.
#
# Each module wraps the AsyncSession for a single table and is the only
# place SQL statements are built:
#
#   base    : SQLRepository: get_all / get_by_id / create / update / delete
#   users   : lookup by username
#   posts   : topic- and author-scoped reads, post/topic link maintenance
#   comments: post-scoped reads
#   topics  : lookup by name, post-scoped reads
#
# Repositories flush but never commit; the transaction boundary is owned
# by the ``get_db`` dependency.  Storage errors leave this package wrapped
# in ``forum.errors.PersistenceError``.
from forum.repositories.comments import CommentRepository
from forum.repositories.posts import PostRepository
from forum.repositories.topics import TopicRepository
from forum.repositories.users import UserRepository

__all__ = ["CommentRepository", "PostRepository", "TopicRepository", "UserRepository"]
