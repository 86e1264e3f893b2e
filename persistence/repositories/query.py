"""
QueryBuilder - mutable query handle passed through filter chains.

SQLAlchemy statements are immutable; filters compose by mutating one
builder, so the builder holds the current ``Select`` and replaces it on
every call. All mutators return the builder for chaining.
"""

from typing import Any, Generic, Sequence, TypeVar

from sqlalchemy import Select, func, inspect, select, tuple_
from sqlalchemy.orm import Session, aliased

ModelT = TypeVar("ModelT")


class QueryBuilder(Generic[ModelT]):
    """
    Query scoped to one aliased entity.

    Attributes:
        model: Mapped class being queried
        alias: SQL alias of the root entity
        entity: ``aliased(model, name=alias)``; filters build criteria from it
        statement: Current ``Select`` without row cap, offset or loader options
    """

    def __init__(self, db: Session, model: type[ModelT], alias: str):
        self._db = db
        self.model = model
        self.alias = alias
        self.entity = aliased(model, name=alias)
        self.statement: Select = select(self.entity)
        self.max_results: int | None = None
        self.first_result: int | None = None
        self.loader_options: list[Any] = []

    # =========================================================================
    # Mutators
    # =========================================================================

    def where(self, *criteria: Any) -> "QueryBuilder[ModelT]":
        self.statement = self.statement.where(*criteria)
        return self

    def join(self, target: Any, onclause: Any = None, **kwargs: Any) -> "QueryBuilder[ModelT]":
        if onclause is None:
            self.statement = self.statement.join(target, **kwargs)
        else:
            self.statement = self.statement.join(target, onclause, **kwargs)
        return self

    def outerjoin(self, target: Any, onclause: Any = None, **kwargs: Any) -> "QueryBuilder[ModelT]":
        return self.join(target, onclause, isouter=True, **kwargs)

    def order_by(self, *clauses: Any) -> "QueryBuilder[ModelT]":
        """Append ORDER BY clauses (earlier clauses keep precedence)."""
        self.statement = self.statement.order_by(*clauses)
        return self

    def options(self, *opts: Any) -> "QueryBuilder[ModelT]":
        """
        Loader options, e.g. ``selectinload(query.entity.comments)``.
        Applied to hydrated execution only.
        """
        self.loader_options.extend(opts)
        return self

    def set_max_results(self, max_results: int | None) -> "QueryBuilder[ModelT]":
        """Cap the number of rows (None = unbounded)."""
        self.max_results = max_results
        return self

    def set_first_result(self, first_result: int | None) -> "QueryBuilder[ModelT]":
        self.first_result = first_result
        return self

    # =========================================================================
    # Statement
    # =========================================================================

    def get_statement(self, with_options: bool = True) -> Select:
        """Final statement with the row cap and offset applied."""
        stmt = self.statement
        if with_options and self.loader_options:
            stmt = stmt.options(*self.loader_options)
        if self.first_result:
            stmt = stmt.offset(self.first_result)
        if self.max_results is not None:
            stmt = stmt.limit(self.max_results)
        return stmt

    def scalar_columns(self) -> list[Any]:
        """Mapped columns of the root entity labeled ``{alias}_{attribute}``."""
        return [
            getattr(self.entity, attr.key).label(f"{self.alias}_{attr.key}")
            for attr in inspect(self.model).column_attrs
        ]

    def primary_key(self) -> list[Any]:
        """Primary key attributes of the aliased root entity."""
        mapper = inspect(self.model)
        return [
            getattr(self.entity, mapper.get_property_by_column(column).key)
            for column in mapper.primary_key
        ]

    def get_scalar_statement(self) -> Select:
        return self.get_statement(with_options=False).with_only_columns(
            *self.scalar_columns(),
            maintain_column_froms=True,
        )

    # =========================================================================
    # Execution
    # =========================================================================

    def get_result(self) -> Sequence[ModelT]:
        """Execute and return hydrated entities."""
        return self._db.execute(self.get_statement()).scalars().unique().all()

    def get_scalar_result(self) -> list[dict[str, Any]]:
        """Execute and return one dict of column values per row."""
        rows = self._db.execute(self.get_scalar_statement()).mappings().all()
        return [dict(row) for row in rows]

    def get_single_result(self, hydrate: bool = True) -> ModelT | dict[str, Any]:
        """
        Execute and return exactly one row.

        Raises:
            sqlalchemy.exc.NoResultFound: No row matched
            sqlalchemy.exc.MultipleResultsFound: More than one row matched
                (only possible without a row cap of 1)
        """
        if hydrate:
            return self._db.execute(self.get_statement()).scalars().unique().one()
        return dict(self._db.execute(self.get_scalar_statement()).mappings().one())

    def execute(self, hydrate: bool = True) -> Sequence[Any]:
        """Execute in hydrated or scalar mode."""
        if hydrate:
            return self.get_result()
        return self.get_scalar_result()

    def get_root_ids(self) -> list[tuple[Any, ...]]:
        """
        Distinct root primary keys in statement order.

        Joins can repeat a root entity once per joined row; each key is kept
        at its first position. Row cap and offset are not applied.
        """
        stmt = self.statement.with_only_columns(*self.primary_key(), maintain_column_froms=True)
        return list(dict.fromkeys(tuple(row) for row in self._db.execute(stmt)))

    def get_entities(self, ids: Sequence[tuple[Any, ...]]) -> list[ModelT]:
        """Load root entities by primary key, returned in the order of ``ids``."""
        if not ids:
            return []

        key = self.primary_key()
        if len(key) == 1:
            criterion = key[0].in_([pk[0] for pk in ids])
        else:
            criterion = tuple_(*key).in_(ids)

        stmt = select(self.entity).where(criterion)
        if self.loader_options:
            stmt = stmt.options(*self.loader_options)

        mapper = inspect(self.model)
        by_key = {
            tuple(mapper.primary_key_from_instance(entity)): entity
            for entity in self._db.execute(stmt).scalars().unique()
        }
        return [by_key[pk] for pk in ids if pk in by_key]

    def get_count(self) -> int:
        """Count rows matched by the statement (row cap and offset included)."""
        stmt = self.get_statement(with_options=False)
        if self.max_results is None and not self.first_result:
            stmt = stmt.order_by(None)
        subquery = stmt.subquery()
        return self._db.scalar(select(func.count()).select_from(subquery)) or 0

    def __repr__(self) -> str:
        return f"QueryBuilder({self.model.__name__} AS {self.alias})"
