from dataclasses import dataclass
from dataclasses import field
from pathlib import Path


@dataclass(frozen=True)
class StepResult:
    """Outcome of a build step.

    Failures are reported here (and in the build log) instead of being raised,
    so the pipeline decides whether they should fail the build.
    """

    succeeded: bool
    status: None | str = None
    published: dict[str, str] = field(default_factory=dict)


def failed_step(published: None | dict[str, str] = None) -> StepResult:
    return StepResult(
        succeeded=False, published=published if published is not None else {}
    )


def exit_code(result: StepResult, fail_on_error: bool) -> int:
    return 1 if fail_on_error and not result.succeeded else 0


def write_env_file(path: Path, published: dict[str, str]) -> None:
    """Append KEY=value lines, so several steps can share one file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("a", encoding="utf-8") as f:
        for key, value in published.items():
            f.write(f"{key}={value}\n")
