from __future__ import annotations

import time
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, Generic, Protocol, TypeVar

import structlog

from clinica_core.core.domain.events.events import DomainEvent
from clinica_core.core.domain.services.event_dispatcher import EventDispatcher

# ───────────────────────────────────────────────
# CQRS: comandos, consultas paginadas e eventos pós-commit
# ───────────────────────────────────────────────

C = TypeVar('C')  # Command type
Q = TypeVar('Q')  # Query filtros type
R = TypeVar('R')  # Query result type
T = TypeVar('T')  # PagedResult item type

logger = structlog.get_logger(__name__)


# ───────────────────────────────────────────────
# DTOs
# ───────────────────────────────────────────────
@dataclass(frozen=True)
class CommandDTO:
    """Base dos comandos de escrita."""


@dataclass(frozen=True)
class QueryDTO(Generic[Q]):
    filtros: Q


@dataclass(frozen=True)
class PaginatedQueryDTO(Generic[Q]):
    """Consulta paginada: filtros + paginação (page é 1-based)."""
    filtros: Q
    page: int = 1
    page_size: int = 20


@dataclass(frozen=True)
class PagedResult(Generic[T]):
    items: Sequence[T]
    total: int
    page: int
    page_size: int
    has_more: bool = field(init=False)

    def __post_init__(self):
        # existe próxima página de verdade, não só "página cheia"
        object.__setattr__(self, 'has_more', self.total > self.page * self.page_size)


@dataclass(frozen=True)
class CommandOutcome(Generic[R]):
    """
    Retorno de handler que gera eventos: o bus devolve `value` ao chamador
    e publica `events` no dispatcher, já fora da transação do handler.
    """
    value: R
    events: Sequence[DomainEvent] = ()


# ───────────────────────────────────────────────
# Handlers
# ───────────────────────────────────────────────
class CommandHandler(Protocol, Generic[C]):
    def handle(self, command: C) -> Any:
        ...


class QueryHandler(Protocol, Generic[Q, R]):
    def handle(self, query: QueryDTO[Q]) -> R:
        ...


# ───────────────────────────────────────────────
# Buses
# ───────────────────────────────────────────────
class _TimedBus:
    kind = "mensagem"

    def __init__(self) -> None:
        self._handlers: dict[type, Any] = {}

    def register(self, message_type: type, handler: Any) -> None:
        self._handlers[message_type] = handler
        logger.debug("handler.registrado", kind=self.kind, message=message_type.__name__)

    def _run(self, message: Any) -> Any:
        name = type(message).__name__
        handler = self._handlers.get(type(message))
        if handler is None:
            raise ValueError(f"Nenhum handler para {self.kind}: {name}")
        start = time.perf_counter()
        result = handler.handle(message)
        logger.info(f"{self.kind}.executado", message=name, duration=f"{time.perf_counter() - start:.3f}s")
        return result


class CommandBus(_TimedBus):
    kind = "comando"

    def dispatch(self, command: Any) -> Any:
        return self._run(command)


class QueryBus(_TimedBus):
    kind = "query"

    def dispatch(self, query: QueryDTO[Any]) -> Any:
        return self._run(query)


class CommandBusImpl(CommandBus):
    """CommandBus que publica os eventos devolvidos em `CommandOutcome`."""

    def __init__(self, dispatcher: EventDispatcher):
        super().__init__()
        self.dispatcher = dispatcher

    def dispatch(self, command: Any) -> Any:
        result = super().dispatch(command)
        if not isinstance(result, CommandOutcome):
            return result
        for event in result.events:
            self.dispatcher.dispatch(event)
        return result.value


class QueryBusImpl(QueryBus):
    pass
