# feddir

Load and search the Federal Reserve's FedACH and Fedwire participant
directories. Both the fixed-width plain-text files and the JSON download
format are accepted; the format is detected from the content.

## Installation

```
pip install feddir
```

## Loading a directory

```python
from feddir.ach import ACHDictionary
from feddir.wire import WIREDictionary

ach = ACHDictionary()
with open("FedACHdir.txt", "rb") as stream:
    ach.read(stream)

wire = WIREDictionary()
with open("fpddir.json", "rb") as stream:
    wire.read(stream)
```

`read` takes any object with a `read()` method returning text or bytes
(bytes are decoded as UTF-8). If the whole content parses as JSON it is read
as the JSON directory format; otherwise it is read line by line as
fixed-width records.

- Plain-text ACH records must be 155 characters long and Fedwire records
  101 characters. A line of any other length stops the read with a
  `RecordWrongLengthError`.
- JSON that does not have the expected shape (for example a top-level array,
  or a field that is not a string) raises `FedError`. A JSON object without
  the participant list, or with an empty one, loads no participants.

Each call to `read` adds to the participants already loaded. After reading,
a dictionary exposes:

- `participants` – the list of `ACHParticipant` / `WIREParticipant` records,
- `index_routing_number` – participants keyed by routing number,
- `index_customer_name` – lists of participants keyed by customer name.

`ACHParticipant` carries routing number, office code, servicing FRB number,
record type code, revision date, new routing number, customer name, an
`ACHLocation` (address, city, state, postal code and extension), phone
number, status and view codes, and `clean_name`, a normalised form of the
customer name. `WIREParticipant` carries routing number, telegraphic name,
customer name, a `WIRELocation` (city and state), the funds transfer,
settlement-only and book-entry securities statuses, the revision date and
`clean_name`.

## Searching

Exact lookups:

```python
participant = ach.routing_number_search_single("073905527")
if participant is not None:
    print(participant.customer_name_label())   # "Lincoln Savings Bank"

same_name = ach.financial_institution_search_single("BANK OF AMERICA N.A")
```

`routing_number_search_single` returns `None` when nothing matches;
`financial_institution_search_single` returns an empty list.

Ranked searches return at most `limit` participants, best match first:

```python
ach.routing_number_search("0739", limit=10)
ach.financial_institution_search("Farmers State Bank", limit=100)
```

A routing-number query is trimmed and must then be between 2 and 9 digits.
Shorter or longer queries raise `RecordWrongLengthError`; non-numeric
queries raise `RoutingNumberNumericError`. Both derive from `FedError`, and
all three live in `feddir.common`. A full 9-digit query matches only that
exact routing number; shorter queries rank every participant by Jaro-Winkler
similarity of its routing number to the query.

Name searches lower-case the query and compare it with each participant's
lower-cased `clean_name` using Jaro-Winkler similarity and a
Levenshtein-based similarity; a participant is kept when either score is
above 0.85 and ranked by the higher of the two.

## Filtering

State, city and postal-code filters compare without regard to case:

```python
ach.state_filter("nj")
ach.city_filter("Hamilton")
ach.postal_code_filter("08690")

hits = ach.financial_institution_search("Farmers State Bank", 100)
ach.participant_state_filter(hits, "MO")
ach.participant_city_filter(hits, "CAMERON")
ach.participant_postal_code_filter(hits, "64429")
ach.participant_routing_number_filter(hits, "08")   # routing-number prefix

wire.state_filter("pa")
wire.city_filter("Reading")
wire.participant_state_filter(wire.participants, "NC")
wire.participant_city_filter(wire.participants, "SALISBURY")
wire.participant_routing_number_filter(wire.participants, "02")
```

The routing-number prefix filters trim the prefix and raise
`RecordWrongLengthError` if fewer than two characters remain.

## Utilities

`feddir.common` also provides `normalize` (strips accents and punctuation
and collapses whitespace), `jaro_winkler`, `levenshtein` (a similarity from
0.0 to 1.0, not a raw distance) and `validate_routing_number_query` for use
on their own.

## What this package does not do

`feddir` is a library only. It has no command-line tool, no HTTP search
service and no client for one, and it does not download directory files:
you supply the FedACH or Fedwire file yourself and query it in-process.