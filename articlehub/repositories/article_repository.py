"""
Article repository: SQL access for the Article aggregate.

The repository is bound to one ``AsyncSession``.  Writes flush; ``commit``
is called by the service once a write is complete, and ``get_db`` commits
or rolls back whatever is left when the request ends.  The author
relationship is ``lazy="noload"`` on the model, so every read that needs
it asks for it with ``joinedload``.
"""
from sqlalchemy import Select, delete, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from articlehub.models import Article
from articlehub.schemas import ArticlesQuery


class ArticleRepository:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    # ------------------------------------------------------------------
    # Query building
    # ------------------------------------------------------------------

    @staticmethod
    def _apply_filters(stmt: Select, query: ArticlesQuery) -> Select:
        """Add one WHERE clause per filter present on *query*."""
        if query.search:
            pattern = f"%{query.search}%"
            stmt = stmt.where(
                or_(Article.title.ilike(pattern), Article.description.ilike(pattern))
            )
        if query.author_id:
            stmt = stmt.where(Article.author_id == query.author_id)
        if query.is_published is not None:
            stmt = stmt.where(Article.is_published.is_(query.is_published))
        if query.start_date:
            stmt = stmt.where(Article.created_at >= query.start_date)
        if query.end_date:
            stmt = stmt.where(Article.created_at <= query.end_date)
        return stmt

    async def find_with_pagination(self, query: ArticlesQuery) -> tuple[list[Article], int]:
        """
        Return one page of articles (newest first) and the total number
        of rows matching the filters, ignoring pagination.

        Two statements are issued: a COUNT and the page SELECT with the
        author joined in.
        """
        count_q = self._apply_filters(select(func.count()).select_from(Article), query)
        total: int = (await self.db.execute(count_q)).scalar_one()

        rows_q = (
            self._apply_filters(select(Article), query)
            .options(joinedload(Article.author))
            .order_by(Article.created_at.desc(), Article.id.desc())
            .offset(query.offset)
            .limit(query.limit)
        )
        result = await self.db.execute(rows_q)
        return list(result.unique().scalars().all()), total

    # ------------------------------------------------------------------
    # Single-row operations
    # ------------------------------------------------------------------

    async def find_one_by_id(self, article_id: int) -> Article | None:
        q = (
            select(Article)
            .where(Article.id == article_id)
            .options(joinedload(Article.author))
            # Bulk UPDATEs bypass the identity map; always read fresh state.
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(q)
        return result.unique().scalar_one_or_none()

    async def create(self, values: dict) -> Article:
        """Insert a new article and return it with id and timestamps populated."""
        article = Article(**values)
        self.db.add(article)
        await self.db.flush()
        return article

    async def update(self, article_id: int, values: dict) -> Article | None:
        """
        Apply *values* to the article and return the stored row.

        Returns None when no row matched, i.e. the article vanished
        between the caller's existence check and this write.
        """
        if values:
            result = await self.db.execute(
                update(Article).where(Article.id == article_id).values(**values)
            )
            if result.rowcount == 0:
                return None
        return await self.find_one_by_id(article_id)

    async def delete(self, article_id: int) -> None:
        await self.db.execute(delete(Article).where(Article.id == article_id))
        await self.db.flush()

    async def exists(self, article_id: int) -> bool:
        q = select(func.count()).select_from(Article).where(Article.id == article_id)
        return (await self.db.execute(q)).scalar_one() > 0

    async def commit(self) -> None:
        await self.db.commit()
