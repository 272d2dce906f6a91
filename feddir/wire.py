"""Fedwire participant directory: parsing, lookup, search and filters."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import IO, Any, Iterable

from .common import (
    MINIMUM_ROUTING_NUMBER_DIGITS,
    FedError,
    RecordWrongLengthError,
    jaro_winkler,
    levenshtein,
    normalize,
    validate_routing_number_query,
)

WIRE_LINE_LENGTH = 101
WIRE_JARO_WINKLER_SIMILARITY = 0.85
WIRE_LEVENSHTEIN_SIMILARITY = 0.85


@dataclass
class WIRELocation:
    """City and state of an institution."""

    city: str = ""
    state: str = ""


@dataclass
class WIREParticipant:
    """One Fedwire directory routing record."""

    routing_number: str = ""
    telegraphic_name: str = ""
    customer_name: str = ""
    location: WIRELocation = field(default_factory=WIRELocation)
    funds_transfer_status: str = ""
    funds_settlement_only_status: str = ""
    book_entry_securities_transfer_status: str = ""
    date: str = ""
    clean_name: str = ""


def _text(record: dict, key: str) -> str:
    value = record.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise FedError(f"field {key!r} must be a string")
    return value


def _read_all(stream: IO[Any]) -> str:
    data = stream.read()
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace")
    return data


def _lines(text: str) -> list[str]:
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def _reduce(scored: list[tuple[WIREParticipant, float]], limit: int) -> list[WIREParticipant]:
    ranked = sorted(scored, key=lambda item: item[1], reverse=True)
    return [participant for participant, _ in ranked[: max(limit, 0)]]


class WIREDictionary:
    """A set of Fedwire participants with routing-number and name indexes."""

    def __init__(self) -> None:
        self.participants: list[WIREParticipant] = []
        self.index_routing_number: dict[str, WIREParticipant] = {}
        self.index_customer_name: dict[str, list[WIREParticipant]] = {}

    def read(self, stream: IO[Any]) -> None:
        """Load participants from a JSON or fixed-width plaintext stream."""
        text = _read_all(stream)
        try:
            payload = json.loads(text)
        except ValueError:
            self._read_plaintext(text)
        else:
            self._read_json(payload)

    def _add(self, participant: WIREParticipant) -> None:
        self.participants.append(participant)
        self.index_routing_number[participant.routing_number] = participant

    def _build_name_index(self) -> None:
        self.index_customer_name = {}
        for participant in self.participants:
            self.index_customer_name.setdefault(participant.customer_name, []).append(participant)

    def _read_json(self, payload: Any) -> None:
        if not isinstance(payload, dict):
            raise FedError("Fedwire directory JSON must be an object")
        outer = payload.get("fedwireParticipants") or {}
        if not isinstance(outer, dict):
            raise FedError("fedwireParticipants must be an object")
        records = outer.get("fedwireParticipants") or []
        if not isinstance(records, list):
            raise FedError("fedwireParticipants list must be an array")
        for record in records:
            if not isinstance(record, dict):
                raise FedError("each Fedwire participant must be an object")
            name = _text(record, "customerName")
            self._add(
                WIREParticipant(
                    routing_number=_text(record, "routingNumber"),
                    telegraphic_name=_text(record, "telegraphicName"),
                    customer_name=name,
                    location=WIRELocation(
                        city=_text(record, "customerCity"),
                        state=_text(record, "customerState"),
                    ),
                    funds_transfer_status=_text(record, "fundsEligibility"),
                    funds_settlement_only_status=_text(record, "fundsSettlementOnlyStatus"),
                    book_entry_securities_transfer_status=_text(record, "securitiesEligibility"),
                    date=_text(record, "changeDate"),
                    clean_name=normalize(name),
                )
            )
        self._build_name_index()

    def _read_plaintext(self, text: str) -> None:
        for line in _lines(text):
            if len(line) != WIRE_LINE_LENGTH:
                raise RecordWrongLengthError(WIRE_LINE_LENGTH, len(line))
            self._add(self._parse_line(line))
        self._build_name_index()

    @staticmethod
    def _parse_line(line: str) -> WIREParticipant:
        name = line[27:63].strip(" ")
        return WIREParticipant(
            routing_number=line[:9],
            telegraphic_name=line[9:27].strip(" "),
            customer_name=name,
            location=WIRELocation(
                state=line[63:65],
                city=line[65:90].strip(" "),
            ),
            funds_transfer_status=line[90:91],
            funds_settlement_only_status=line[91:92],
            book_entry_securities_transfer_status=line[92:93],
            date=line[93:101],
            clean_name=normalize(name),
        )

    def routing_number_search_single(self, s: str) -> WIREParticipant | None:
        """Participant with exactly this routing number, or None."""
        return self.index_routing_number.get(s)

    def financial_institution_search_single(self, s: str) -> list[WIREParticipant]:
        """Participants whose customer name is exactly s."""
        return list(self.index_customer_name.get(s, []))

    def routing_number_search(self, s: str, limit: int) -> list[WIREParticipant]:
        """Participants ranked by routing number similarity; nine digits match exactly."""
        s = validate_routing_number_query(s)
        if len(s) == 9:
            scored = [(p, 1.0) for p in self.participants if p.routing_number == s]
        else:
            scored = [(p, jaro_winkler(p.routing_number, s)) for p in self.participants]
        return _reduce(scored, limit)

    def financial_institution_search(self, s: str, limit: int) -> list[WIREParticipant]:
        """Participants whose cleaned name resembles s, best first."""
        s = s.lower()
        scored = []
        for participant in self.participants:
            name = participant.clean_name.lower()
            jaro_score = jaro_winkler(name, s)
            leven_score = levenshtein(name, s)
            if jaro_score > WIRE_JARO_WINKLER_SIMILARITY or leven_score > WIRE_LEVENSHTEIN_SIMILARITY:
                scored.append((participant, max(jaro_score, leven_score)))
        return _reduce(scored, limit)

    def participant_routing_number_filter(
        self, participants: Iterable[WIREParticipant], s: str
    ) -> list[WIREParticipant]:
        """Participants whose routing number starts with s (at least two characters)."""
        s = s.strip()
        if len(s) < MINIMUM_ROUTING_NUMBER_DIGITS:
            raise RecordWrongLengthError(MINIMUM_ROUTING_NUMBER_DIGITS, len(s))
        return [p for p in participants if p.routing_number.startswith(s)]

    @staticmethod
    def _matching(participants: Iterable[WIREParticipant], attribute: str, s: str) -> list[WIREParticipant]:
        wanted = s.casefold()
        return [p for p in participants if getattr(p.location, attribute).casefold() == wanted]

    def participant_state_filter(self, participants: Iterable[WIREParticipant], s: str) -> list[WIREParticipant]:
        """Participants located in state s, ignoring case."""
        return self._matching(participants, "state", s)

    def participant_city_filter(self, participants: Iterable[WIREParticipant], s: str) -> list[WIREParticipant]:
        """Participants located in city s, ignoring case."""
        return self._matching(participants, "city", s)

    def state_filter(self, s: str) -> list[WIREParticipant]:
        """All participants located in state s."""
        return self.participant_state_filter(self.participants, s)

    def city_filter(self, s: str) -> list[WIREParticipant]:
        """All participants located in city s."""
        return self.participant_city_filter(self.participants, s)