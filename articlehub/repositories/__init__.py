# Repositories package.
#
# Repositories own SQL construction for one aggregate and are bound to the
# request's AsyncSession:
#
#   article_repository  : filtered/paginated reads and single-row CRUD for Article
