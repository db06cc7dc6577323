from dataclasses import dataclass

from django.test import SimpleTestCase

from clinica_core.core.application.cqrs import CommandBusImpl, CommandDTO, CommandOutcome, PagedResult
from clinica_core.core.domain.events.events import DomainEvent
from clinica_core.core.domain.services.event_dispatcher import EventDispatcher


@dataclass(frozen=True)
class _Ping(CommandDTO):
    valor: int


@dataclass(frozen=True, kw_only=True)
class _Pinged(DomainEvent):
    valor: int


class _EmitsEvents:
    def handle(self, cmd: _Ping) -> CommandOutcome[int]:
        return CommandOutcome(cmd.valor * 2, [_Pinged(valor=cmd.valor), _Pinged(valor=cmd.valor + 1)])


class _PlainResult:
    def handle(self, cmd: _Ping) -> list[int]:
        return [cmd.valor]


class CommandBusTests(SimpleTestCase):
    def setUp(self) -> None:
        self.received: list[int] = []
        dispatcher = EventDispatcher()
        dispatcher.subscribe(_Pinged, lambda evt: self.received.append(evt.valor))
        self.bus = CommandBusImpl(dispatcher=dispatcher)

    def test_outcome_events_are_published_and_value_returned(self) -> None:
        self.bus.register(_Ping, _EmitsEvents())
        self.assertEqual(self.bus.dispatch(_Ping(valor=3)), 6)
        self.assertEqual(self.received, [3, 4])

    def test_plain_results_pass_through_without_events(self) -> None:
        self.bus.register(_Ping, _PlainResult())
        self.assertEqual(self.bus.dispatch(_Ping(valor=3)), [3])
        self.assertEqual(self.received, [])

    def test_unregistered_command_raises(self) -> None:
        with self.assertRaises(ValueError):
            self.bus.dispatch(_Ping(valor=1))


class PagedResultTests(SimpleTestCase):
    def test_has_more_only_when_items_remain_after_this_page(self) -> None:
        self.assertTrue(PagedResult(items=[1, 2], total=3, page=1, page_size=2).has_more)
        self.assertFalse(PagedResult(items=[3], total=3, page=2, page_size=2).has_more)
        self.assertFalse(PagedResult(items=[1, 2], total=2, page=1, page_size=2).has_more)
