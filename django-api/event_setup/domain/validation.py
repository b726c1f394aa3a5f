"""Result types produced by step validation."""

from dataclasses import dataclass


@dataclass(frozen=True)
class StepResult:
    """Outcome of validating one wizard step.

    Errors block advancing past the step. Warnings are advisory only.
    """

    step: int
    ok: bool
    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()

    @classmethod
    def passed(cls, step: int, warnings: list[str] | tuple[str, ...] = ()) -> "StepResult":
        return cls(step=step, ok=True, warnings=tuple(warnings))

    @classmethod
    def failed(
        cls, step: int, errors: list[str], warnings: list[str] | tuple[str, ...] = ()
    ) -> "StepResult":
        return cls(step=step, ok=False, errors=tuple(errors), warnings=tuple(warnings))
