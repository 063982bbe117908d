# src/current_task/core/engine.py

from __future__ import annotations

"""
State engine.

One update call per tick:
1. base snapshot (status "ok" + standard message, time fields, task metrics)
2. custom state rules, evaluated against a placeholder snapshot (pass 1)
3. downtime conditions, then nagging conditions unless downtime is on (pass 2)
4. status timers (reset first if downtime just ended)
5. publish the final snapshot

Pass 1 decides the status, so it never sees status-derived values: status is
forced to "ok" and both timers to 0. The nagging/downtime flags are the
ones published by the previous update.
Pass 2 sees the real status/message; its timer fields are the values
published by the previous update.
"""

import logging
from datetime import datetime

from .rules import AdvancedConfiguration, first_matching, first_matching_condition, render_message
from .snapshot import Snapshot
from .status_timer import StatusTimer
from .task_metrics import TaskMetrics

logger = logging.getLogger(__name__)

STATUS_OK = "ok"
STATUS_ERROR = "error"


def standard_message(metrics: TaskMetrics) -> str:
    n = metrics.number_marked_current
    if n == 1:
        return metrics.current_task_title
    if n == 0:
        return "(no current task)"
    return f"({n} tasks marked current)"


class StateEngine:
    def __init__(self, configuration: AdvancedConfiguration, now: datetime) -> None:
        self._configuration = configuration
        self._timer = StatusTimer(now)
        self._snapshot = Snapshot.build(
            TaskMetrics(), now, status=STATUS_OK, message=standard_message(TaskMetrics())
        )

    @property
    def snapshot(self) -> Snapshot:
        """Last published snapshot."""
        return self._snapshot

    def update_configuration(self, configuration: AdvancedConfiguration) -> None:
        self._configuration = configuration

    def reset_status_timers(self, now: datetime) -> None:
        self._timer.reset(now)

    # ---- update cycle ----

    def update(self, metrics: TaskMetrics, now: datetime) -> Snapshot:
        logger.debug("Updating from task metrics: %s", metrics)

        base = Snapshot.build(metrics, now, status=STATUS_OK, message=standard_message(metrics))
        status, message = self._apply_custom_state_rules(base)
        return self._finish(base.with_values(status=status, message=message), now)

    def update_with_error(
            self,
            error_message: str,
            now: datetime,
            metrics: TaskMetrics | None = None,
    ) -> Snapshot:
        """Upstream fetch failed: status is "error" and custom rules can't override it."""
        logger.debug("Updating from task metrics error: %s", error_message)

        base = Snapshot.build(
            metrics or TaskMetrics(), now, status=STATUS_ERROR, message=str(error_message)
        )
        return self._finish(base, now)

    def _apply_custom_state_rules(self, base: Snapshot) -> tuple[str, str]:
        rules = self._configuration.custom_state_rules
        if rules is None:
            return base.status, base.message

        placeholder = base.with_values(
            status=STATUS_OK,
            seconds_in_current_status=0,
            seconds_since_ok_status=0,
            nagging_enabled=self._snapshot.nagging_enabled,
            downtime_enabled=self._snapshot.downtime_enabled,
        )

        rule = first_matching(rules, placeholder.to_dict(), lambda r: r.condition)
        if rule is None:
            logger.debug("No matching custom state rule")
            return base.status, base.message

        logger.debug("First matching custom state rule: %s", rule)
        return rule.resulting_status, render_message(rule.resulting_message, placeholder)

    def _finish(self, current: Snapshot, now: datetime) -> Snapshot:
        was_downtime_enabled = self._snapshot.downtime_enabled

        real = current.with_values(
            seconds_in_current_status=self._snapshot.seconds_in_current_status,
            seconds_since_ok_status=self._snapshot.seconds_since_ok_status,
            nagging_enabled=False,
            downtime_enabled=False,
        )
        real_values = real.to_dict()

        downtime = first_matching_condition(self._configuration.downtime_conditions, real_values)
        downtime_enabled = downtime is not None
        if downtime_enabled:
            logger.debug("First matching downtime condition: %s", downtime)
        else:
            logger.debug("No matching downtime condition")

        nagging_enabled = False
        if downtime_enabled:
            logger.debug("Ignoring nagging conditions because downtime is enabled")
        else:
            nagging = first_matching_condition(self._configuration.nagging_conditions, real_values)
            nagging_enabled = nagging is not None
            if nagging_enabled:
                logger.debug("First matching nagging condition: %s", nagging)
            else:
                logger.debug("No matching nagging condition")

        if was_downtime_enabled and not downtime_enabled:
            logger.debug("Downtime ended, resetting status timers")
            self._timer.reset(now)

        self._timer.update_from_status(real.status, now)

        self._snapshot = real.with_values(
            seconds_in_current_status=self._timer.seconds_in_current_status(now),
            seconds_since_ok_status=self._timer.seconds_since_ok_status(now),
            nagging_enabled=nagging_enabled,
            downtime_enabled=downtime_enabled,
        )
        return self._snapshot
