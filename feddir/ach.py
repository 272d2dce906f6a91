"""FedACH participant directory: parsing, lookup, search and filters."""

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
    title_case,
    validate_routing_number_query,
)

ACH_LINE_LENGTH = 155
ACH_JARO_WINKLER_SIMILARITY = 0.85
ACH_LEVENSHTEIN_SIMILARITY = 0.85


@dataclass
class ACHLocation:
    """Delivery address of an institution."""

    address: str = ""
    city: str = ""
    state: str = ""
    postal_code: str = ""
    postal_code_extension: str = ""


@dataclass
class ACHParticipant:
    """One FedACH directory routing record."""

    routing_number: str = ""
    office_code: str = ""
    servicing_frb_number: str = ""
    record_type_code: str = ""
    revised: str = ""
    new_routing_number: str = ""
    customer_name: str = ""
    location: ACHLocation = field(default_factory=ACHLocation)
    phone_number: str = ""
    status_code: str = ""
    view_code: str = ""
    clean_name: str = ""

    def customer_name_label(self) -> str:
        """Customer name in title case for display."""
        return title_case(self.customer_name)


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


def _reduce(scored: list[tuple[ACHParticipant, float]], limit: int) -> list[ACHParticipant]:
    ranked = sorted(scored, key=lambda item: item[1], reverse=True)
    return [participant for participant, _ in ranked[: max(limit, 0)]]


class ACHDictionary:
    """A set of FedACH participants with routing-number and name indexes."""

    def __init__(self) -> None:
        self.participants: list[ACHParticipant] = []
        self.index_routing_number: dict[str, ACHParticipant] = {}
        self.index_customer_name: dict[str, list[ACHParticipant]] = {}

    def read(self, stream: IO[Any]) -> None:
        """Load participants from a JSON or fixed-width plaintext stream."""
        text = _read_all(stream)
        try:
            payload = json.loads(text)
        except ValueError:
            self._read_plaintext(text)
        else:
            self._read_json(payload)

    def _add(self, participant: ACHParticipant) -> None:
        self.participants.append(participant)
        self.index_routing_number[participant.routing_number] = participant

    def _build_name_index(self) -> None:
        self.index_customer_name = {}
        for participant in self.participants:
            self.index_customer_name.setdefault(participant.customer_name, []).append(participant)

    def _read_json(self, payload: Any) -> None:
        if not isinstance(payload, dict):
            raise FedError("ACH directory JSON must be an object")
        outer = payload.get("fedACHParticipants") or {}
        if not isinstance(outer, dict):
            raise FedError("fedACHParticipants must be an object")
        records = outer.get("fedACHParticipants") or []
        if not isinstance(records, list):
            raise FedError("fedACHParticipants list must be an array")
        for record in records:
            if not isinstance(record, dict):
                raise FedError("each ACH participant must be an object")
            name = _text(record, "customerName")
            self._add(
                ACHParticipant(
                    routing_number=_text(record, "routingNumber"),
                    office_code=_text(record, "officeCode"),
                    servicing_frb_number=_text(record, "servicingFRBNumber"),
                    record_type_code=_text(record, "recordTypeCode"),
                    revised=_text(record, "changeDate"),
                    new_routing_number=_text(record, "newRoutingNumber"),
                    customer_name=name,
                    location=ACHLocation(
                        address=_text(record, "customerAddress"),
                        city=_text(record, "customerCity"),
                        state=_text(record, "customerState"),
                        postal_code=_text(record, "customerZip"),
                        postal_code_extension=_text(record, "customerZipExt"),
                    ),
                    phone_number=_text(record, "customerAreaCode")
                    + _text(record, "customerPhonePrefix")
                    + _text(record, "customerPhoneSuffix"),
                    status_code=_text(record, "institutionStatusCode"),
                    view_code=_text(record, "dataViewCode"),
                    clean_name=normalize(name),
                )
            )
        self._build_name_index()

    def _read_plaintext(self, text: str) -> None:
        for line in _lines(text):
            if len(line) != ACH_LINE_LENGTH:
                raise RecordWrongLengthError(ACH_LINE_LENGTH, len(line))
            self._add(self._parse_line(line))
        self._build_name_index()

    @staticmethod
    def _parse_line(line: str) -> ACHParticipant:
        name = line[35:71].strip(" ")
        return ACHParticipant(
            routing_number=line[:9],
            office_code=line[9:10],
            servicing_frb_number=line[10:19],
            record_type_code=line[19:20],
            revised=line[20:26],
            new_routing_number=line[26:35],
            customer_name=name,
            location=ACHLocation(
                address=line[71:107].strip(" "),
                city=line[107:127].strip(" "),
                state=line[127:129],
                postal_code=line[129:134],
                postal_code_extension=line[134:138],
            ),
            phone_number=line[138:148],
            status_code=line[148:149],
            view_code=line[149:150],
            clean_name=normalize(name),
        )

    def routing_number_search_single(self, s: str) -> ACHParticipant | None:
        """Participant with exactly this routing number, or None."""
        return self.index_routing_number.get(s)

    def financial_institution_search_single(self, s: str) -> list[ACHParticipant]:
        """Participants whose customer name is exactly s."""
        return list(self.index_customer_name.get(s, []))

    def routing_number_search(self, s: str, limit: int) -> list[ACHParticipant]:
        """Participants ranked by routing number similarity; nine digits match exactly."""
        s = validate_routing_number_query(s)
        if len(s) == 9:
            scored = [(p, 1.0) for p in self.participants if p.routing_number == s]
        else:
            scored = [(p, jaro_winkler(p.routing_number, s)) for p in self.participants]
        return _reduce(scored, limit)

    def financial_institution_search(self, s: str, limit: int) -> list[ACHParticipant]:
        """Participants whose cleaned name resembles s, best first."""
        s = s.lower()
        scored = []
        for participant in self.participants:
            name = participant.clean_name.lower()
            jaro_score = jaro_winkler(name, s)
            leven_score = levenshtein(name, s)
            if jaro_score > ACH_JARO_WINKLER_SIMILARITY or leven_score > ACH_LEVENSHTEIN_SIMILARITY:
                scored.append((participant, max(jaro_score, leven_score)))
        return _reduce(scored, limit)

    @staticmethod
    def _matching(participants: Iterable[ACHParticipant], attribute: str, s: str) -> list[ACHParticipant]:
        wanted = s.casefold()
        return [p for p in participants if getattr(p.location, attribute).casefold() == wanted]

    def participant_state_filter(self, participants: Iterable[ACHParticipant], s: str) -> list[ACHParticipant]:
        """Participants located in state s, ignoring case."""
        return self._matching(participants, "state", s)

    def participant_city_filter(self, participants: Iterable[ACHParticipant], s: str) -> list[ACHParticipant]:
        """Participants located in city s, ignoring case."""
        return self._matching(participants, "city", s)

    def participant_postal_code_filter(
        self, participants: Iterable[ACHParticipant], s: str
    ) -> list[ACHParticipant]:
        """Participants with postal code s."""
        return self._matching(participants, "postal_code", s)

    def participant_routing_number_filter(
        self, participants: Iterable[ACHParticipant], s: str
    ) -> list[ACHParticipant]:
        """Participants whose routing number starts with s (at least two characters)."""
        s = s.strip()
        if len(s) < MINIMUM_ROUTING_NUMBER_DIGITS:
            raise RecordWrongLengthError(MINIMUM_ROUTING_NUMBER_DIGITS, len(s))
        return [p for p in participants if p.routing_number.startswith(s)]

    def state_filter(self, s: str) -> list[ACHParticipant]:
        """All participants located in state s."""
        return self.participant_state_filter(self.participants, s)

    def city_filter(self, s: str) -> list[ACHParticipant]:
        """All participants located in city s."""
        return self.participant_city_filter(self.participants, s)

    def postal_code_filter(self, s: str) -> list[ACHParticipant]:
        """All participants with postal code s."""
        return self.participant_postal_code_filter(self.participants, s)