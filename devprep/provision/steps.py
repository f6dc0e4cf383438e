"""
Provisioning steps and recipes.

A recipe is an ordered list of steps. Steps run strictly one after another and
the first failure aborts the rest; nothing already done is undone.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Union

from loguru import logger
from pydantic import BaseModel

from devprep.core.config import AppConfig
from devprep.core.errors import ProvisionError
from devprep.core.executor import CommandRunner
from devprep.core.strategies import ShellStrategy
from devprep.transfer.archive import ArchiveTransfer
from devprep.utils.fs import (
    copy_file,
    make_dirs,
    remove_tree_if_present,
    rename,
    write_text,
)


@dataclass
class ProvisionContext:
    """Everything a step needs at run time."""

    config: AppConfig
    runner: CommandRunner
    transfer: ArchiveTransfer
    flags: Dict[str, bool] = field(default_factory=dict)

    @property
    def is_windows(self) -> bool:
        return self.runner.system_info.is_windows

    def flag(self, name: str) -> bool:
        return bool(self.flags.get(name, False))


CommandText = Union[str, Callable[[ProvisionContext], str]]


@dataclass(frozen=True)
class Gate:
    """Named predicate deciding whether a step runs."""

    label: str
    predicate: Callable[[ProvisionContext], bool]

    def __call__(self, ctx: ProvisionContext) -> bool:
        return bool(self.predicate(ctx))

    def __and__(self, other: "Gate") -> "Gate":
        return Gate(
            f"{self.label} and {other.label}",
            lambda ctx: self(ctx) and other(ctx),
        )


def flag_set(name: str) -> Gate:
    return Gate(name, lambda ctx: ctx.flag(name))


def flag_unset(name: str) -> Gate:
    return Gate(f"not {name}", lambda ctx: not ctx.flag(name))


ON_WINDOWS = Gate("windows host", lambda ctx: ctx.is_windows)


class ProvisionStep(ABC):
    """Base class for all provisioning steps."""

    when: Optional[Gate] = None

    def should_run(self, ctx: ProvisionContext) -> bool:
        return self.when is None or self.when(ctx)

    @property
    def condition(self) -> Optional[str]:
        """Human readable gate, if any."""
        if self.when is None:
            return None
        return self.when.label

    @abstractmethod
    def describe(self) -> str:
        """One-line description of what the step does."""
        pass

    @abstractmethod
    def execute(self, ctx: ProvisionContext) -> None:
        """
        Run the step.

        Raises:
            ProvisionError: the step failed; the recipe must stop
        """
        pass


@dataclass
class FetchExtractStep(ProvisionStep):
    url: str
    destination: Path
    when: Optional[Gate] = None

    def describe(self) -> str:
        return f"Download {self.url} and extract into {self.destination}"

    def execute(self, ctx: ProvisionContext) -> None:
        ctx.transfer.download_and_extract(self.url, self.destination)


@dataclass
class RenameStep(ProvisionStep):
    source: Path
    target: Path
    # Drop an existing target first so a re-run can rename again
    replace: bool = False
    when: Optional[Gate] = None

    def describe(self) -> str:
        return f"Rename {self.source} to {self.target}"

    def execute(self, ctx: ProvisionContext) -> None:
        if self.replace:
            remove_tree_if_present(self.target)
        rename(self.source, self.target)


@dataclass
class WriteFileStep(ProvisionStep):
    path: Path
    content: str
    when: Optional[Gate] = None

    def describe(self) -> str:
        return f"Write {self.path}"

    def execute(self, ctx: ProvisionContext) -> None:
        make_dirs(self.path.parent)
        write_text(self.path, self.content)


@dataclass
class SetEnvStep(ProvisionStep):
    """Persist a user environment variable with ``setx``."""

    name: str
    value: str
    when: Optional[Gate] = None

    def describe(self) -> str:
        return f"Set persistent {self.name}={self.value}"

    def execute(self, ctx: ProvisionContext) -> None:
        ctx.runner.run_direct("setx", [self.name, self.value]).check()


@dataclass
class ShellCommandStep(ProvisionStep):
    """
    Run a shell command line.

    ``command`` may be a callable so the line can depend on probes made at run
    time. Without an explicit shell the host's native shell is used.
    """

    command: CommandText
    workdir: Optional[Path] = None
    shell: Optional[ShellStrategy] = None
    label: Optional[str] = None
    when: Optional[Gate] = None

    def describe(self) -> str:
        if self.label:
            return self.label
        if callable(self.command):
            return "Run generated command"
        return f"Run {self.command}"

    def execute(self, ctx: ProvisionContext) -> None:
        command = self.command(ctx) if callable(self.command) else self.command
        workdir = self.workdir or Path.cwd()
        if self.shell is None:
            result = ctx.runner.run_in(workdir, command)
        else:
            result = ctx.runner.run_via_shell(workdir, self.shell.name, self.shell.flag, command)
        result.check()


@dataclass
class DirectCommandStep(ProvisionStep):
    executable: str
    args: Sequence[str] = ()
    label: Optional[str] = None
    when: Optional[Gate] = None

    def describe(self) -> str:
        return self.label or " ".join([self.executable, *self.args])

    def execute(self, ctx: ProvisionContext) -> None:
        ctx.runner.run_direct(self.executable, self.args).check()


@dataclass
class CopyFileStep(ProvisionStep):
    source: Path
    target: Path
    when: Optional[Gate] = None

    def describe(self) -> str:
        return f"Copy {self.source} to {self.target}"

    def execute(self, ctx: ProvisionContext) -> None:
        make_dirs(self.target.parent)
        copy_file(self.source, self.target)


@dataclass
class RemoveTreeStep(ProvisionStep):
    """Delete a directory tree; a missing tree is fine."""

    path: Path
    when: Optional[Gate] = None

    def describe(self) -> str:
        return f"Remove {self.path}"

    def execute(self, ctx: ProvisionContext) -> None:
        remove_tree_if_present(self.path)


class StepOutcome(BaseModel):
    """Outcome of one step in a recipe run."""

    index: int
    description: str
    status: str  # 'pending', 'done', 'skipped'
    duration: float = 0.0


class RecipeReport(BaseModel):
    """Summary of a finished recipe run."""

    recipe: str
    started: datetime
    duration: float
    steps: List[StepOutcome] = []

    @property
    def done_count(self) -> int:
        return sum(1 for step in self.steps if step.status == "done")

    @property
    def skipped_count(self) -> int:
        return sum(1 for step in self.steps if step.status == "skipped")


@dataclass
class ProvisionRecipe:
    """Named, ordered list of steps for one target platform."""

    name: str
    description: str
    steps: List[ProvisionStep] = field(default_factory=list)

    def plan(self, ctx: ProvisionContext) -> List[StepOutcome]:
        """What a run would do, without doing it."""
        return [
            StepOutcome(
                index=index,
                description=step.describe(),
                status="pending" if step.should_run(ctx) else "skipped",
            )
            for index, step in enumerate(self.steps, start=1)
        ]

    def run(self, ctx: ProvisionContext, app_logger=logger) -> RecipeReport:
        """
        Execute every step in order.

        Raises:
            ProvisionError: first failing step; later steps are not run
        """
        started = datetime.now()
        outcomes: List[StepOutcome] = []
        app_logger.info(f"Running recipe '{self.name}' ({len(self.steps)} steps)")

        for index, step in enumerate(self.steps, start=1):
            description = step.describe()
            if not step.should_run(ctx):
                app_logger.info(f"[{index}/{len(self.steps)}] Skipped ({step.condition} is false): {description}")
                outcomes.append(StepOutcome(index=index, description=description, status="skipped"))
                continue

            app_logger.info(f"[{index}/{len(self.steps)}] {description}")
            step_start = datetime.now()
            try:
                step.execute(ctx)
            except ProvisionError:
                app_logger.error(f"Recipe '{self.name}' aborted at step {index}: {description}")
                raise

            outcomes.append(
                StepOutcome(
                    index=index,
                    description=description,
                    status="done",
                    duration=(datetime.now() - step_start).total_seconds(),
                )
            )

        duration = (datetime.now() - started).total_seconds()
        app_logger.info(f"Recipe '{self.name}' finished in {duration:.1f}s")
        return RecipeReport(recipe=self.name, started=started, duration=duration, steps=outcomes)
