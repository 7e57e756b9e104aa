import json
from concurrent.futures import ThreadPoolExecutor
from typing import Any, get_args

from pydantic import TypeAdapter, ValidationError

from rewards_reporter.errors import MalformedEventError, UnknownEventError
from rewards_reporter.models import ChainEvent, EventName

EVENT_NAMES: tuple[str, ...] = get_args(EventName)

_event_adapter: TypeAdapter = TypeAdapter(ChainEvent)


def parse_event(raw: Any) -> ChainEvent:
    """
    Decode a single web3 EventLog dict into its typed event.
    Anything that is not a recognized event is rejected here, before replay starts.
    """
    if not isinstance(raw, dict) or raw.get("event") not in EVENT_NAMES:
        raise UnknownEventError(f"Unknown event:\n{raw}")
    try:
        return _event_adapter.validate_python(raw)
    except ValidationError as e:
        raise MalformedEventError(f"Malformed {raw['event']} event:\n{raw}") from e


def parse_events(raws: list[Any]) -> list[ChainEvent]:
    return [parse_event(raw) for raw in raws]


def read_event_file(path: str) -> list[ChainEvent]:
    with open(path) as j:
        raws = json.load(j)
    if not isinstance(raws, list):
        raise MalformedEventError(f"Expected a list of events in {path}")
    return parse_events(raws)


def load_events(paths: list[str], max_workers: int = 4) -> list[ChainEvent]:
    """
    Read and decode the event files concurrently, then concatenate them in the order given.
    The files are assumed to already be in chronological order, we don't sort them.
    """
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        batches = list(executor.map(read_event_file, paths))
    return [event for batch in batches for event in batch]
