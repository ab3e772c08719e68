"""
Prompt Resolver Module

Looks up named prompt templates through an ordered list of sources and renders
them with {placeholder} substitution. The database-backed source is tried
first; the built-in static table is the last resort, so the interview-*
templates always resolve even when the store is down.

The module contains:
- extract_variables / substitute_variables: placeholder helpers
- PromptSource: abstract source boundary, with DatabasePromptSource and StaticPromptSource
- PromptResolver: ordered fallback with a short-lived cache
- get_prompt_resolver: process-wide resolver used by routes and the interview session

Dependencies:
- sqlalchemy: For reading the prompts table.
- loguru: For logging fallbacks and unresolved placeholders.
- app.constants.fallback_prompts: For the built-in templates.

Author: @kcaparas1630
"""

import time
from abc import ABC, abstractmethod
from typing import Callable, Dict, List, Optional, Sequence
from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from app.constants.fallback_prompts import FALLBACK_CATEGORY, FALLBACK_PROMPTS
from app.constants.regex_patterns import REGEX_PATTERNS
from app.models.career_models import PromptRecord
from app.schemas.prompts.prompt_template import PromptTemplate

DEFAULT_CACHE_TTL_SECONDS = 300


class PromptSourceError(RuntimeError):
    """A prompt source could not be reached or returned unusable data."""


def extract_variables(content: str) -> List[str]:
    """
    Placeholder names in first-appearance order, without duplicates.

    Example:
        >>> extract_variables("Hi {name}, welcome to {company}. Bye {name}")
        ['name', 'company']
    """
    seen: List[str] = []
    for match in REGEX_PATTERNS['placeholder'].finditer(content):
        name = match.group(1)
        if name not in seen:
            seen.append(name)
    return seen


def substitute_variables(content: str, variables: Dict[str, Optional[str]]) -> str:
    """
    Replace every {token} that has a supplied value, in a single pass.

    Values are inserted verbatim (None becomes an empty string), so braces
    inside a value are never treated as placeholders. Tokens without a value
    are left as they are and logged.
    """
    unresolved: List[str] = []

    def replace(match):
        name = match.group(1)
        if name in variables:
            value = variables[name]
            return "" if value is None else str(value)
        unresolved.append(name)
        return match.group(0)

    rendered = REGEX_PATTERNS['placeholder'].sub(replace, content)
    if unresolved:
        logger.warning(f"Unresolved prompt variables: {', '.join(sorted(set(unresolved)))}")
    return rendered


class PromptSource(ABC):
    """Somewhere prompt templates can be read from."""

    name = "source"

    @abstractmethod
    def get_prompt(self, name: str) -> Optional[PromptTemplate]:
        ...

    @abstractmethod
    def get_prompts(self, category: Optional[str] = None) -> List[PromptTemplate]:
        ...


class DatabasePromptSource(PromptSource):
    """Active rows of the prompts table; the newest version wins when a name repeats."""

    name = "database"

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    @staticmethod
    def _to_template(record: PromptRecord) -> PromptTemplate:
        return PromptTemplate(
            id=record.id,
            name=record.name,
            category=record.category,
            description=record.description,
            content=record.content,
            variables=list(record.variables or extract_variables(record.content)),
            version=record.version,
            is_active=record.is_active,
        )

    def get_prompt(self, name: str) -> Optional[PromptTemplate]:
        try:
            with self.session_factory() as session:
                record = session.execute(
                    select(PromptRecord)
                    .where(PromptRecord.name == name, PromptRecord.is_active.is_(True))
                    .order_by(PromptRecord.version.desc())
                ).scalars().first()
                return self._to_template(record) if record else None
        except SQLAlchemyError as e:
            raise PromptSourceError(f"Prompt store unavailable: {e}") from e

    def get_prompts(self, category: Optional[str] = None) -> List[PromptTemplate]:
        try:
            with self.session_factory() as session:
                query = select(PromptRecord).where(PromptRecord.is_active.is_(True))
                if category:
                    query = query.where(PromptRecord.category == category)
                records = session.execute(query.order_by(PromptRecord.name)).scalars().all()
                return [self._to_template(record) for record in records]
        except SQLAlchemyError as e:
            raise PromptSourceError(f"Prompt store unavailable: {e}") from e


class StaticPromptSource(PromptSource):
    """The built-in templates. Never raises."""

    name = "static"

    def __init__(self, prompts: Optional[Dict[str, str]] = None):
        prompts = FALLBACK_PROMPTS if prompts is None else prompts
        self._templates = {
            key: PromptTemplate(
                id=f"fallback-{key}",
                name=key,
                category=FALLBACK_CATEGORY,
                description=f"Built-in {key} prompt",
                content=content,
                variables=extract_variables(content),
            )
            for key, content in prompts.items()
        }

    def get_prompt(self, name: str) -> Optional[PromptTemplate]:
        return self._templates.get(name)

    def get_prompts(self, category: Optional[str] = None) -> List[PromptTemplate]:
        if category and category != FALLBACK_CATEGORY:
            return []
        return list(self._templates.values())


class PromptResolver:
    """
    Ordered fallback over prompt sources with a TTL cache of hits.

    Attributes:
        sources (List[PromptSource]): Tried in order; the first hit wins.
        cache_ttl_seconds (float): How long a resolved prompt is reused.
    """

    def __init__(
        self,
        sources: Sequence[PromptSource],
        cache_ttl_seconds: float = DEFAULT_CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.sources = list(sources)
        self.cache_ttl_seconds = cache_ttl_seconds
        self.clock = clock
        self._cache: Dict[str, tuple] = {}

    def _cached(self, name: str) -> Optional[PromptTemplate]:
        entry = self._cache.get(name)
        if entry is None:
            return None
        template, expires_at = entry
        if self.clock() >= expires_at:
            del self._cache[name]
            return None
        return template

    def get_prompt(self, name: str) -> Optional[PromptTemplate]:
        """Resolve a prompt by name, or None when no source has it."""
        cached = self._cached(name)
        if cached is not None:
            return cached

        for source in self.sources:
            try:
                template = source.get_prompt(name)
            except PromptSourceError as e:
                logger.warning(f"Prompt source '{source.name}' failed for '{name}': {e}")
                continue
            if template is not None:
                if source.name == StaticPromptSource.name:
                    logger.warning(f"Using built-in prompt for '{name}'")
                self._cache[name] = (template, self.clock() + self.cache_ttl_seconds)
                return template

        logger.warning(f"Prompt '{name}' not found in any source")
        return None

    def get_prompts(self, category: Optional[str] = None) -> List[PromptTemplate]:
        """All prompts (optionally of one category) from the first source that has any."""
        for source in self.sources:
            try:
                templates = source.get_prompts(category)
            except PromptSourceError as e:
                logger.warning(f"Prompt source '{source.name}' failed listing prompts: {e}")
                continue
            if templates:
                return templates
        return []

    def render_prompt(self, name: str, variables: Dict[str, Optional[str]]) -> Optional[str]:
        """Resolve `name` and substitute `variables`; None when the prompt does not exist."""
        template = self.get_prompt(name)
        if template is None:
            return None
        return substitute_variables(template.content, variables)

    def clear_cache(self, name: Optional[str] = None) -> None:
        if name is None:
            self._cache.clear()
        else:
            self._cache.pop(name, None)


_prompt_resolver: Optional[PromptResolver] = None


def get_prompt_resolver() -> PromptResolver:
    """Process-wide resolver: database first, built-in templates last."""
    global _prompt_resolver
    if _prompt_resolver is None:
        from app.database import get_session_factory
        _prompt_resolver = PromptResolver([DatabasePromptSource(get_session_factory()), StaticPromptSource()])
    return _prompt_resolver
