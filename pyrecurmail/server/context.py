from dataclasses import dataclass

from pyrecurmail.common.job import Payload


@dataclass(frozen=True)
class AttemptContext:
    key: str
    generation: int
    payload: Payload
    first: bool = False
