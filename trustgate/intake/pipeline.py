from abc import ABC, abstractmethod
from dataclasses import dataclass

from trustgate.reputation.models import ReputationVerdict
from trustgate.signature.models import Artifact, ValidationVerdict


@dataclass(slots=True)
class IntakeContext:
    artifact: Artifact
    accepted_bytes: int = 0
    validation: ValidationVerdict | None = None
    reputation: ReputationVerdict | None = None
    encoded_payload: str = ""

    @property
    def is_accepted(self) -> bool:
        return bool(
            self.validation is not None
            and self.validation.accepted
            and self.reputation is not None
            and self.reputation.safe
        )


class IntakeStep(ABC):
    @abstractmethod
    def run(self, context: IntakeContext) -> IntakeContext:
        raise NotImplementedError

    def close(self) -> None:
        """Release resources held by the step."""
