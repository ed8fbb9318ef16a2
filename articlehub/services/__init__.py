# Services package.
#
# Business logic for the two aggregates:
#
#   article_service  : cache-aside reads and invalidating writes for Article
#   article_guard    : existence/ownership checks and the publish transition
#   auth_service     : registration, login and identity lookup for User
#
# ArticleService commits each write before it invalidates the cache; the
# other services leave the transaction boundary to the ``get_db``
# dependency.  ArticleService receives its repository and cache handle
# explicitly rather than through module state.
