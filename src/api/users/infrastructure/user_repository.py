"""PostgreSQL implementation of IUserRepository.

Stores user accounts in the ``users`` table. Uniqueness of usernames and
non-empty email addresses is checked before writing; the unique index on
``username`` backs the check against concurrent writers.
"""

from __future__ import annotations

from sqlalchemy import delete, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from users.domain.aggregates import User
from users.domain.value_objects import UserId
from users.infrastructure.models import UserModel
from users.infrastructure.observability import (
    DefaultUserRepositoryProbe,
    UserRepositoryProbe,
)
from users.infrastructure.security import hash_password
from users.ports.exceptions import (
    DuplicateEmailError,
    DuplicateUsernameError,
    EmptyUsernameError,
    UserNotFoundError,
    ValueTooLongError,
)
from users.ports.repositories import IUserRepository, UserQuery

_ORDER_COLUMNS = {
    "id": UserModel.id,
    "username": UserModel.username,
    "name": UserModel.display_name,
    "slug": UserModel.slug,
    "email": UserModel.email,
    "url": UserModel.url,
    "registered": UserModel.created_at,
}

# Bounded text columns: (column, wire field, error code)
_BOUNDED_FIELDS = (
    ("username", "username", "user_login_too_long"),
    ("display_name", "name", "user_name_too_long"),
    ("first_name", "first_name", "user_first_name_too_long"),
    ("last_name", "last_name", "user_last_name_too_long"),
    ("nickname", "nickname", "user_nickname_too_long"),
    ("slug", "slug", "user_slug_too_long"),
    ("url", "URL", "user_url_too_long"),
    ("email", "email", "user_email_too_long"),
)


class UserRepository(IUserRepository):
    """PostgreSQL-backed repository for User aggregates.

    Transactions are managed by the caller; writes are flushed so that
    identity assignment and integrity errors surface immediately.
    """

    def __init__(
        self,
        session: AsyncSession,
        default_role: str = "subscriber",
        probe: UserRepositoryProbe | None = None,
    ) -> None:
        """Initialize repository with database session and probe.

        Args:
            session: AsyncSession from FastAPI dependency injection
            default_role: Role given to new users that were created without one
            probe: Optional domain probe for observability
        """
        self._session = session
        self._default_role = default_role
        self._probe = probe or DefaultUserRepositoryProbe()

    async def search(self, query: UserQuery) -> list[User]:
        """Find users matching a query, ordered and paginated."""
        stmt = select(UserModel)

        if query.search:
            term = f"%{query.search.strip('*')}%"
            stmt = stmt.where(
                or_(
                    UserModel.username.ilike(term),
                    UserModel.email.ilike(term),
                    UserModel.url.ilike(term),
                    UserModel.display_name.ilike(term),
                    UserModel.slug.ilike(term),
                )
            )
        if query.role:
            stmt = stmt.where(UserModel.roles.contains([query.role]))
        if query.include:
            stmt = stmt.where(UserModel.id.in_(query.include))
        if query.exclude:
            stmt = stmt.where(UserModel.id.not_in(query.exclude))

        column = _ORDER_COLUMNS.get(query.orderby, UserModel.username)
        ordering = column.desc() if query.order == "DESC" else column.asc()
        stmt = (
            stmt.order_by(ordering, UserModel.id.asc())
            .offset(query.offset)
            .limit(query.number)
        )

        result = await self._session.execute(stmt)
        users = [self._to_domain(model) for model in result.scalars().all()]

        self._probe.users_searched(
            count=len(users), offset=query.offset, number=query.number
        )
        return users

    async def get_by_id(self, user_id: UserId) -> User | None:
        """Retrieve a user by their ID.

        Args:
            user_id: The unique identifier of the user

        Returns:
            The User aggregate, or None if not found
        """
        model = await self._get_model(user_id.value)

        if model is None:
            self._probe.user_not_found(user_id.value)
            return None

        self._probe.user_retrieved(user_id.value)
        return self._to_domain(model)

    async def insert(self, user: User) -> UserId:
        """Persist a new user and return its assigned identity."""
        username = user.username.strip()
        if not username:
            raise EmptyUsernameError()

        values = self._column_values(user, username)
        values["display_name"] = user.name or username
        values["nickname"] = user.nickname or username
        values["slug"] = user.slug or _slugify(username)
        _ensure_fits(values)

        await self._ensure_unique(username, user.email, exclude_id=None)

        model = UserModel(
            **values,
            password_hash=hash_password(user.password) if user.password else "",
            roles=sorted(user.roles) or [self._default_role],
            capabilities=dict(user.direct_capabilities),
        )
        self._session.add(model)
        await self._flush(username)

        self._probe.user_saved(model.id, username, created=True)
        return UserId(value=model.id)

    async def update(self, user: User) -> UserId:
        """Persist changes to an existing user."""
        model = await self._get_model(user.id.value)
        if model is None:
            raise UserNotFoundError()

        username = user.username.strip()
        if not username:
            raise EmptyUsernameError()

        values = self._column_values(user, username)
        _ensure_fits(values)

        await self._ensure_unique(username, user.email, exclude_id=model.id)

        for column, value in values.items():
            setattr(model, column, value)
        if user.password is not None:
            model.password_hash = hash_password(user.password)
        await self._flush(username)

        self._probe.user_saved(model.id, username, created=False)
        return UserId(value=model.id)

    async def delete(self, user_id: UserId, reassign_to: UserId | None = None) -> bool:
        """Delete a user.

        Content owned by the user lives in other bounded contexts; the
        reassignment target is recorded so they can act on it.
        """
        stmt = delete(UserModel).where(UserModel.id == user_id.value)
        result = await self._session.execute(stmt)

        if result.rowcount == 0:
            return False

        self._probe.user_deleted(
            user_id.value,
            reassign_to.value if reassign_to is not None else None,
        )
        return True

    async def _get_model(self, user_id: int) -> UserModel | None:
        stmt = select(UserModel).where(UserModel.id == user_id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def _ensure_unique(
        self, username: str, email: str, exclude_id: int | None
    ) -> None:
        """Raise if the username or a non-empty email belongs to another user."""
        stmt = select(UserModel.id).where(
            func.lower(UserModel.username) == username.lower()
        )
        if exclude_id is not None:
            stmt = stmt.where(UserModel.id != exclude_id)
        result = await self._session.execute(stmt)
        if result.scalar_one_or_none() is not None:
            self._probe.duplicate_username(username)
            raise DuplicateUsernameError()

        if not email:
            return

        stmt = select(UserModel.id).where(func.lower(UserModel.email) == email.lower())
        if exclude_id is not None:
            stmt = stmt.where(UserModel.id != exclude_id)
        result = await self._session.execute(stmt)
        if result.scalar_one_or_none() is not None:
            self._probe.duplicate_email(email)
            raise DuplicateEmailError()

    async def _flush(self, username: str) -> None:
        """Flush pending writes, translating a lost uniqueness race."""
        try:
            await self._session.flush()
        except IntegrityError as e:
            if "username" in str(e.orig):
                self._probe.duplicate_username(username)
                raise DuplicateUsernameError() from e
            raise

    @staticmethod
    def _column_values(user: User, username: str) -> dict[str, str]:
        return {
            "username": username,
            "display_name": user.name,
            "first_name": user.first_name,
            "last_name": user.last_name,
            "nickname": user.nickname,
            "slug": user.slug,
            "url": user.url,
            "description": user.description,
            "email": user.email,
        }

    @staticmethod
    def _to_domain(model: UserModel) -> User:
        return User(
            id=UserId(value=model.id),
            username=model.username,
            name=model.display_name,
            first_name=model.first_name,
            last_name=model.last_name,
            nickname=model.nickname,
            slug=model.slug,
            url=model.url,
            description=model.description,
            email=model.email,
            registered=model.created_at,
            roles=frozenset(model.roles or ()),
            direct_capabilities={
                name: bool(granted) for name, granted in (model.capabilities or {}).items()
            },
        )


def _ensure_fits(values: dict[str, str]) -> None:
    """Raise if a value is longer than its column allows."""
    for column, field, code in _BOUNDED_FIELDS:
        limit = UserModel.__table__.c[column].type.length
        if len(values.get(column) or "") > limit:
            raise ValueTooLongError(
                f"{field} may not be longer than {limit} characters.",
                code=code,
                field=field,
            )


def _slugify(value: str) -> str:
    """Derive a URL-friendly slug from a username."""
    slug = "".join(ch if ch.isalnum() else "-" for ch in value.lower())
    return "-".join(part for part in slug.split("-") if part)[:50]
