"""Sequential step execution with checkpoint/resume support."""

from typing import Sequence

from odooprovisioner.errors import StepExecutionError
from odooprovisioner.models import (
    RUN_ABORTED,
    RUN_IN_PROGRESS,
    RUN_SUCCEEDED,
    STEP_COMPLETED,
    STEP_FAILED,
    STEP_PENDING,
    STEP_RUNNING,
    RunContext,
    RunResult,
    StepDefinition,
    validate_step_definitions,
)


class StepRunner:
    """Runs provisioning steps in index order, skipping checkpointed ones."""

    def __init__(self, checkpoint_store, logger):
        self.checkpoint_store = checkpoint_store
        self.logger = logger

    def load_progress(self, name: str, total_steps: int) -> int:
        last_completed = self.checkpoint_store.load(name)
        if last_completed > total_steps:
            self.logger.warning(
                "Checkpoint for '%s' is %s but only %s steps exist. Starting from the first step.",
                name,
                last_completed,
                total_steps,
            )
            return 0
        return last_completed

    def run(
        self,
        name: str,
        steps: Sequence[StepDefinition],
        context: RunContext,
        dry_run: bool = False,
    ) -> RunResult:
        validate_step_definitions(steps)

        last_completed = self.load_progress(name, len(steps))
        result = RunResult(
            status=RUN_IN_PROGRESS,
            resumed_from=last_completed,
            step_statuses={step.index: STEP_PENDING for step in steps},
        )

        if last_completed:
            self.logger.info("Resuming '%s' after step %s.", name, last_completed)

        for step in steps:
            if step.index <= last_completed:
                self.logger.info("--- Skipping Step %s: %s (Already completed) ---", step.index, step.label)
                result.step_statuses[step.index] = STEP_COMPLETED
                result.skipped.append(step.index)
                continue

            if dry_run:
                self.logger.info("--- Would run Step %s: %s ---", step.index, step.label)
                continue

            self.logger.info("--- Starting Step %s: %s ---", step.index, step.label)
            result.step_statuses[step.index] = STEP_RUNNING

            try:
                step.body(context)
            except Exception as exc:
                result.step_statuses[step.index] = STEP_FAILED
                result.status = RUN_ABORTED
                result.failed_step = step.index
                raise StepExecutionError(
                    index=step.index,
                    label=step.label,
                    last_completed=last_completed,
                    cause=str(exc),
                ) from exc

            self.checkpoint_store.save(name, step.index)
            last_completed = step.index
            result.step_statuses[step.index] = STEP_COMPLETED
            result.executed.append(step.index)

        if dry_run:
            return result

        self.checkpoint_store.clear(name)
        result.status = RUN_SUCCEEDED
        self.logger.info(
            "All %s steps completed for '%s' (%s executed, %s skipped).",
            len(steps),
            name,
            len(result.executed),
            len(result.skipped),
        )
        return result

