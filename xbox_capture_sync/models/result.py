"""Run result data model."""

import json
from dataclasses import dataclass


@dataclass(frozen=True)
class RunResult:
    """Outcome of a sync run, reported once to the invoker."""
    code: int
    message: str
    downloaded: int = 0

    @classmethod
    def success(cls, downloaded: int) -> "RunResult":
        return cls(code=200, message=f"{downloaded} new captures downloaded.", downloaded=downloaded)

    @classmethod
    def failure(cls, message: str) -> "RunResult":
        return cls(code=500, message=message)

    @property
    def ok(self) -> bool:
        return self.code == 200

    def to_dict(self) -> dict[str, int | str]:
        return {"code": self.code, "message": self.message}

    def to_json(self) -> str:
        return json.dumps(self.to_dict())
